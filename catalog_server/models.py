"""
Data models for the course catalog.

This module contains the dataclasses used to represent courses, their
lecture/section items and uploaded files, plus the conversions between these
objects and the rows stored in the ``courses``, ``lectures`` and ``sections``
tables.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import typing as t


ItemKind = t.Literal["lecture", "section"]
ITEM_KINDS: tuple[ItemKind, ...] = ("lecture", "section")

ViewerMode = t.Literal["image", "pdf", "download"]


def table_for(kind: str) -> str:
    """Table (and owning collection) name for an item kind: lecture -> lectures."""
    if kind not in ITEM_KINDS:
        raise ValueError(f"Unknown item kind: {kind!r}")
    return f"{kind}s"


@dataclass
class FileObject:
    """One uploaded blob in the storage bucket."""
    name: str
    path: str
    public_url: str
    type: str = ""  # IANA media type, e.g. "application/pdf"

    @property
    def viewer_mode(self) -> ViewerMode:
        """How a viewer should present this file: inline image, inline PDF, or a download link."""
        if self.public_url and self.type.startswith("image/"):
            return "image"
        if self.public_url and self.type == "application/pdf":
            return "pdf"
        return "download"

    def to_row(self) -> dict[str, str]:
        return {
            "name": self.name,
            "path": self.path,
            "publicUrl": self.public_url,
            "type": self.type,
        }

    @classmethod
    def from_row(cls, row: t.Optional[dict[str, t.Any]]) -> t.Optional["FileObject"]:
        if not row:
            return None
        return cls(
            name=row.get("name", "") or "",
            path=row.get("path", "") or "",
            public_url=row.get("publicUrl", "") or "",
            type=row.get("type", "") or "",
        )


@dataclass
class Item:
    """A lecture or a section. The two kinds differ only by ``kind``."""
    id: str
    name: str
    course_id: str
    kind: ItemKind = "lecture"
    completed: bool = False
    file: t.Optional[FileObject] = None

    @classmethod
    def from_row(cls, row: dict[str, t.Any], kind: ItemKind) -> "Item":
        return cls(
            id=str(row["id"]),
            name=row.get("name", "") or "",
            course_id=str(row.get("course_id", "")),
            kind=kind,
            completed=bool(row.get("completed", False)),
            file=FileObject.from_row(row.get("file")),
        )


@dataclass
class CourseShell:
    """Minimal course description produced by extraction or the defaults, before it is stored."""
    name_ar: str
    name_en: str
    doctor: str
    ta_name: t.Optional[str] = None
    lecture_day: t.Optional[str] = None  # e.g. "السبت"
    section_day: t.Optional[str] = None

    def to_row(self) -> dict[str, t.Any]:
        """Row for the ``courses`` table; optional fields are left out when empty."""
        row: dict[str, t.Any] = {
            "nameAr": self.name_ar,
            "nameEn": self.name_en,
            "doctor": self.doctor,
        }
        if self.ta_name:
            row["taName"] = self.ta_name
        if self.lecture_day:
            row["lectureDay"] = self.lecture_day
        if self.section_day:
            row["sectionDay"] = self.section_day
        return row


@dataclass
class Course:
    """A stored course with its ordered lectures and sections."""
    id: str
    name_ar: str
    name_en: str
    doctor: str
    ta_name: t.Optional[str] = None
    lecture_day: t.Optional[str] = None
    section_day: t.Optional[str] = None
    lectures: list[Item] = field(default_factory=list)
    sections: list[Item] = field(default_factory=list)

    def items(self, kind: str) -> list[Item]:
        """The collection that owns items of ``kind``."""
        return self.lectures if table_for(kind) == "lectures" else self.sections

    def find_item(self, kind: str, item_id: str) -> t.Optional[Item]:
        for item in self.items(kind):
            if item.id == item_id:
                return item
        return None

    @property
    def progress(self) -> "CourseProgress":
        return CourseProgress.of(self)

    @classmethod
    def from_row(cls, row: dict[str, t.Any]) -> "Course":
        return cls(
            id=str(row["id"]),
            name_ar=row.get("nameAr", "") or "",
            name_en=row.get("nameEn", "") or "",
            doctor=row.get("doctor", "") or "",
            ta_name=row.get("taName") or None,
            lecture_day=row.get("lectureDay") or None,
            section_day=row.get("sectionDay") or None,
            lectures=[Item.from_row(r, "lecture") for r in row.get("lectures", []) or []],
            sections=[Item.from_row(r, "section") for r in row.get("sections", []) or []],
        )


@dataclass
class CourseProgress:
    """Upload and completion counters shown on a course card."""
    uploaded_lectures: int
    total_lectures: int
    uploaded_sections: int
    total_sections: int
    completed_items: int
    total_items: int

    @property
    def is_complete(self) -> bool:
        return self.total_items > 0 and self.completed_items == self.total_items

    @classmethod
    def of(cls, course: Course) -> "CourseProgress":
        items = course.lectures + course.sections
        return cls(
            uploaded_lectures=sum(1 for i in course.lectures if i.file),
            total_lectures=len(course.lectures),
            uploaded_sections=sum(1 for i in course.sections if i.file),
            total_sections=len(course.sections),
            completed_items=sum(1 for i in items if i.completed),
            total_items=len(items),
        )
