# -*- coding: utf-8 -*-
import typing as t
from dataclasses import dataclass, field, replace

from .models import Course, FileObject, Item


@dataclass
class CatalogStore:
    """In-memory catalog state owned by the controller.

    Populated on load, replaced wholesale after an import or reset, and
    patched in place after single-item mutations.
    """
    courses: list[Course] = field(default_factory=list)
    selected_course_id: t.Optional[str] = None
    viewing_file: t.Optional[FileObject] = None
    is_loading: bool = False
    is_analyzing: bool = False
    loaded: bool = False  # true once a fetch from storage has succeeded

    def replace_courses(self, courses: list[Course]) -> None:
        """Replaces the whole catalog, e.g. after a full refetch."""
        self.courses = list(courses)
        self.loaded = True
        if self.selected_course_id and self.find_course(self.selected_course_id) is None:
            self.selected_course_id = None

    def find_course(self, course_id: str) -> t.Optional[Course]:
        for course in self.courses:
            if course.id == course_id:
                return course
        return None

    def find_item(self, course_id: str, kind: str, item_id: str) -> t.Optional[Item]:
        course = self.find_course(course_id)
        if course is None:
            return None
        return course.find_item(kind, item_id)

    @property
    def selected_course(self) -> t.Optional[Course]:
        if self.selected_course_id is None:
            return None
        return self.find_course(self.selected_course_id)

    def select_course(self, course_id: str) -> t.Optional[Course]:
        course = self.find_course(course_id)
        self.selected_course_id = course.id if course else None
        return course

    def clear_selection(self) -> None:
        self.selected_course_id = None

    def patch_item(self, course_id: str, kind: str, item_id: str, **changes: t.Any) -> t.Optional[Item]:
        """Swaps one item for an updated copy; siblings and other courses are untouched.

        :return: The updated item, or None if it is not in the store.
        """
        course = self.find_course(course_id)
        if course is None:
            return None
        items = course.items(kind)
        for index, item in enumerate(items):
            if item.id == item_id:
                items[index] = replace(item, **changes)
                return items[index]
        return None

    def append_item(self, course_id: str, item: Item) -> None:
        """Appends a freshly created item to its course's collection."""
        course = self.find_course(course_id)
        if course is not None:
            course.items(item.kind).append(item)
