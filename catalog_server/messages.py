# -*- coding: utf-8 -*-
"""User-facing texts in the supported display languages."""
from __future__ import annotations

import typing as t

from . import config


ItemLabels = t.Dict[str, str]

# Placeholder labels for generated item names ("Lecture 3", "المحاضرة 3")
ITEM_LABELS: dict[str, ItemLabels] = {
    "ar": {"lecture": "المحاضرة", "section": "السكشن"},
    "en": {"lecture": "Lecture", "section": "Section"},
}

MESSAGES: dict[str, dict[str, str]] = {
    "ar": {
        "pdf_only": "الرجاء رفع ملف PDF فقط.",
        "busy": "جاري تحليل الجدول بالفعل، يرجى الانتظار حتى تنتهي العملية الحالية.",
        "confirm_reset": "هل أنت متأكد؟ سيتم حذف الجدول الحالي واستبداله بالجدول الافتراضي.",
        "reset_not_confirmed": "لم يتم تأكيد إعادة التعيين.",
        "no_courses_extracted": "لم يتمكن الذكاء الاصطناعي من استخراج أي مواد.",
        "extraction_failed": "فشل تحليل الجدول: {error}.",
        "import_succeeded": "تم تحليل واستيراد الجدول بنجاح!",
        "import_failed": "فشل استيراد الجدول: {error}. قد تكون البيانات غير مكتملة، أعد المحاولة أو أعد التحميل.",
        "reset_failed": "فشل إعادة تعيين الجدول: {error}. قد تكون البيانات غير مكتملة، أعد المحاولة أو أعد التحميل.",
        "fetch_failed": (
            "فشل تحميل البيانات من قاعدة البيانات.\n\nالخطأ: {error}\n\n"
            "يرجى التأكد من أن الجداول تم إنشاؤها بشكل صحيح وأن سياسات RLS تسمح بالوصول."
        ),
        "upload_failed": "فشل رفع الملف: {error}",
        "upload_policy_failed": (
            "فشل رفع الملف: خطأ في الصلاحيات.\n\n"
            "يرجى التأكد من إضافة سياسات الأمان (RLS) لحاوية التخزين (Storage) للسماح بعمليات الرفع (INSERT/UPDATE)."
        ),
        "file_update_failed": "فشل تحديث بيانات الملف في قاعدة البيانات: {error}",
        "toggle_failed": "فشل تحديث حالة الإنجاز: {error}",
        "add_item_failed": "فشل إضافة عنصر جديد: {error}",
        "invalid_data": "بيانات غير صالحة",
        "course_not_found": "المادة غير موجودة: {course_id}",
        "item_not_found": "العنصر غير موجود: {item_id}",
        "no_file": "لم يتم رفع ملف",
        "not_configured": (
            "خطأ في الإعداد: قاعدة البيانات غير مُهيأة. "
            "اضبط المتغيرين SUPABASE_URL و SUPABASE_ANON_KEY بقيم مشروعك (Project Settings > API)."
        ),
    },
    "en": {
        "pdf_only": "Please upload a PDF file only.",
        "busy": "A schedule is already being analyzed, please wait for it to finish.",
        "confirm_reset": "Are you sure? The current schedule will be deleted and replaced by the default one.",
        "reset_not_confirmed": "Reset was not confirmed.",
        "no_courses_extracted": "The AI could not extract any courses.",
        "extraction_failed": "Failed to analyze the schedule: {error}.",
        "import_succeeded": "Schedule analyzed and imported successfully!",
        "import_failed": "Failed to import the schedule: {error}. Data may be incomplete, retry or refresh.",
        "reset_failed": "Failed to reset the schedule: {error}. Data may be incomplete, retry or refresh.",
        "fetch_failed": (
            "Failed to load data from the database.\n\nError: {error}\n\n"
            "Make sure the tables exist and that RLS policies allow access."
        ),
        "upload_failed": "File upload failed: {error}",
        "upload_policy_failed": (
            "File upload failed: permission error.\n\n"
            "Make sure the storage bucket has RLS policies that allow uploads (INSERT/UPDATE)."
        ),
        "file_update_failed": "Failed to save the file details in the database: {error}",
        "toggle_failed": "Failed to update completion status: {error}",
        "add_item_failed": "Failed to add a new item: {error}",
        "invalid_data": "invalid data",
        "course_not_found": "Course not found: {course_id}",
        "item_not_found": "Item not found: {item_id}",
        "no_file": "No file uploaded",
        "not_configured": (
            "Configuration error: the database is not configured. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY to your project's values (Project Settings > API)."
        ),
    },
}


def _language(language: t.Optional[str]) -> str:
    lang = language or config.CATALOG_LANGUAGE
    return lang if lang in MESSAGES else "en"


def message(key: str, language: t.Optional[str] = None, **kwargs: t.Any) -> str:
    """Look up a user-facing message and fill in its placeholders."""
    return MESSAGES[_language(language)][key].format(**kwargs)


def item_label(kind: str, language: t.Optional[str] = None) -> str:
    """Placeholder label for an item kind ("lecture" -> "Lecture")."""
    return ITEM_LABELS[_language(language)][kind]


def item_name(kind: str, number: int, language: t.Optional[str] = None) -> str:
    """Sequential display name of an item, e.g. ``item_name("lecture", 4) == "Lecture 4"``."""
    return f"{item_label(kind, language)} {number}"
