# -*- coding: utf-8 -*-
"""Built-in schedule restored by "reset to default"."""
from __future__ import annotations

from .models import CourseShell


DEFAULT_COURSES: list[CourseShell] = [
    CourseShell(
        name_ar="برمجة الحاسب",
        name_en="Computer Programming",
        doctor="د. أحمد محمود",
        ta_name="م. محمد علي",
        lecture_day="السبت",
        section_day="الأحد",
    ),
    CourseShell(
        name_ar="هياكل البيانات",
        name_en="Data Structures",
        doctor="د. سارة حسن",
        ta_name="م. ياسمين عادل",
        lecture_day="الأحد",
        section_day="الثلاثاء",
    ),
    CourseShell(
        name_ar="قواعد البيانات",
        name_en="Database Systems",
        doctor="د. خالد إبراهيم",
        ta_name="م. عمر سعيد",
        lecture_day="الاثنين",
        section_day="الأربعاء",
    ),
    CourseShell(
        name_ar="الرياضيات المتقطعة",
        name_en="Discrete Mathematics",
        doctor="د. منى عبد الرحمن",
        lecture_day="الثلاثاء",
    ),
    CourseShell(
        name_ar="شبكات الحاسب",
        name_en="Computer Networks",
        doctor="د. طارق فؤاد",
        ta_name="م. نورهان سامي",
        lecture_day="الأربعاء",
        section_day="الخميس",
    ),
    CourseShell(
        name_ar="نظم التشغيل",
        name_en="Operating Systems",
        doctor="د. هشام مصطفى",
        ta_name="م. أحمد جمال",
        lecture_day="الخميس",
        section_day="السبت",
    ),
]
