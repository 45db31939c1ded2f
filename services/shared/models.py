"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the catalog dataclasses, using
the same camelCase field names as the stored rows, so the HTTP API, the CLI
and the MCP gateway agree on one JSON shape.
"""
from __future__ import annotations

import typing as t
from pydantic import BaseModel, Field

from catalog_server.models import Course, CourseProgress, FileObject, Item


ItemKind = t.Literal["lecture", "section"]
ViewerMode = t.Literal["image", "pdf", "download"]
ErrorKind = t.Literal[
    "error",
    "configuration",
    "validation",
    "not_found",
    "extraction",
    "upstream",
    "partial_failure",
    "replace",
]


class FileObjectModel(BaseModel):
    """Metadata of one stored blob."""
    name: str
    path: str
    publicUrl: str
    type: str = ""


class ItemModel(BaseModel):
    """A lecture or a section."""
    id: str
    name: str
    kind: ItemKind
    course_id: str
    completed: bool = False
    file: t.Optional[FileObjectModel] = None


class CourseProgressModel(BaseModel):
    uploadedLectures: int = 0
    totalLectures: int = 0
    uploadedSections: int = 0
    totalSections: int = 0
    completedItems: int = 0
    totalItems: int = 0
    isComplete: bool = False


class CourseModel(BaseModel):
    """A course with its lectures and sections, as shown on the detail view."""
    id: str
    nameAr: str
    nameEn: str
    doctor: str
    taName: t.Optional[str] = None
    lectureDay: t.Optional[str] = None
    sectionDay: t.Optional[str] = None
    lectures: list[ItemModel] = Field(default_factory=list)
    sections: list[ItemModel] = Field(default_factory=list)
    progress: CourseProgressModel = Field(default_factory=CourseProgressModel)


class CourseListResponse(BaseModel):
    """The course gallery."""
    courses: list[CourseModel] = Field(default_factory=list)
    selectedCourseId: t.Optional[str] = None


class FileViewResponse(BaseModel):
    """An item's file plus how to present it (inline image, inline PDF, or download)."""
    file: t.Optional[FileObjectModel] = None
    viewerMode: t.Optional[ViewerMode] = None
    message: str = ""


class ScheduleResponse(BaseModel):
    """Result of an import or a reset: the freshly reloaded catalog."""
    message: str = ""
    courses: list[CourseModel] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    kind: ErrorKind = "error"
    message: str
    operation: t.Optional[str] = None
    upstreamMessage: t.Optional[str] = None
    stateMayBeInconsistent: bool = False


def file_to_pydantic(file: t.Optional[FileObject]) -> t.Optional[FileObjectModel]:
    if file is None:
        return None
    return FileObjectModel(**file.to_row())


def item_to_pydantic(item: Item) -> ItemModel:
    return ItemModel(
        id=item.id,
        name=item.name,
        kind=item.kind,
        course_id=item.course_id,
        completed=item.completed,
        file=file_to_pydantic(item.file),
    )


def progress_to_pydantic(progress: CourseProgress) -> CourseProgressModel:
    return CourseProgressModel(
        uploadedLectures=progress.uploaded_lectures,
        totalLectures=progress.total_lectures,
        uploadedSections=progress.uploaded_sections,
        totalSections=progress.total_sections,
        completedItems=progress.completed_items,
        totalItems=progress.total_items,
        isComplete=progress.is_complete,
    )


def course_to_pydantic(course: Course) -> CourseModel:
    """
    Convert a dataclass Course to its Pydantic model.

    Progress counters are computed here so clients never recount items.
    """
    return CourseModel(
        id=course.id,
        nameAr=course.name_ar,
        nameEn=course.name_en,
        doctor=course.doctor,
        taName=course.ta_name,
        lectureDay=course.lecture_day,
        sectionDay=course.section_day,
        lectures=[item_to_pydantic(i) for i in course.lectures],
        sections=[item_to_pydantic(i) for i in course.sections],
        progress=progress_to_pydantic(course.progress),
    )
