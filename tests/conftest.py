"""Shared fakes for the hosted store and the extraction service."""
import itertools
import json
import typing as t
from types import SimpleNamespace

import pytest

from catalog_server.controller import CatalogController
from catalog_server.errors import UpstreamError
from catalog_server.extraction import ScheduleExtractor
from catalog_server.models import CourseShell
from catalog_server.store import CatalogStore


class FakeSupabase:
    """In-memory stand-in for SupabaseClient that records every call."""

    url = "https://example.supabase.co"
    bucket = "course-files"

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, t.Any]]] = {"courses": [], "lectures": [], "sections": []}
        self.blobs: dict[str, tuple[bytes, str]] = {}
        self.calls: list[str] = []
        self.failures: dict[str, str] = {}
        self._ids = itertools.count(1)

    def fail(self, call: str, error: str = "boom") -> None:
        """Make the next and all later ``call`` operations raise UpstreamError."""
        self.failures[call] = error

    def _record(self, call: str) -> None:
        self.calls.append(call)
        if call in self.failures:
            error = self.failures[call]
            raise UpstreamError(error, operation=call, upstream_message=error, status_code=500)

    def seed_course(self, name: str = "Algorithms", lectures: int = 0, sections: int = 0) -> str:
        """Store a course with numbered items directly, without recording calls."""
        course_id = f"course-{next(self._ids)}"
        self.tables["courses"].append({"id": course_id, "nameAr": name, "nameEn": name, "doctor": "Dr. X"})
        for table, count, label in (("lectures", lectures, "Lecture"), ("sections", sections, "Section")):
            for number in range(1, count + 1):
                self.tables[table].append({
                    "id": f"{table}-{next(self._ids)}",
                    "name": f"{label} {number}",
                    "course_id": course_id,
                    "completed": False,
                    "file": None,
                })
        return course_id

    async def select_catalog(self) -> list[dict[str, t.Any]]:
        self._record("select catalog")
        return [
            dict(
                course,
                lectures=[dict(r) for r in self.tables["lectures"] if r["course_id"] == course["id"]],
                sections=[dict(r) for r in self.tables["sections"] if r["course_id"] == course["id"]],
            )
            for course in self.tables["courses"]
        ]

    async def delete_all(self, table: str) -> None:
        self._record(f"delete {table}")
        self.tables[table] = []

    async def insert(self, table: str, rows: list[dict[str, t.Any]]) -> list[dict[str, t.Any]]:
        self._record(f"insert {table}")
        stored = []
        for row in rows:
            new_row = {"id": f"{table}-{next(self._ids)}", **row}
            if table != "courses":
                new_row.setdefault("file", None)
                new_row.setdefault("completed", False)
            self.tables[table].append(new_row)
            stored.append(dict(new_row))
        return stored

    async def update(self, table: str, row_id: str, values: dict[str, t.Any]) -> None:
        self._record(f"update {table}")
        for row in self.tables[table]:
            if row["id"] == row_id:
                row.update(values)

    async def upload(self, path: str, content: bytes, content_type: str, upsert: bool = True) -> None:
        self._record("upload")
        self.blobs[path] = (content, content_type)

    def public_url(self, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{self.bucket}/{path}"

    async def remove(self, paths: list[str]) -> None:
        self._record("remove")
        for path in paths:
            self.blobs.pop(path, None)

    async def aclose(self) -> None:
        pass


class FakeCompletions:
    """Mimics ``AsyncOpenAI().chat.completions`` returning canned JSON text."""

    def __init__(self, content: str = "", error: t.Optional[Exception] = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[dict[str, t.Any]] = []

    async def create(self, **kwargs: t.Any) -> SimpleNamespace:
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


class FakeOpenAI:
    def __init__(self, content: str = "", error: t.Optional[Exception] = None) -> None:
        self.chat = SimpleNamespace(completions=FakeCompletions(content, error))

    @property
    def requests(self) -> list[dict[str, t.Any]]:
        return self.chat.completions.requests


def shells_json(count: int) -> str:
    """Model output with ``count`` distinct courses."""
    return json.dumps({
        "courses": [
            {
                "nameAr": f"مادة {n}",
                "nameEn": f"Course {n}",
                "doctor": f"Dr. {n}",
                "taName": None,
                "lectureDay": "السبت",
                "sectionDay": None,
            }
            for n in range(1, count + 1)
        ]
    })


def make_extractor(content: str = "", error: t.Optional[Exception] = None) -> ScheduleExtractor:
    return ScheduleExtractor(client=FakeOpenAI(content, error), model="test-model", prompt="extract", language="en")


@pytest.fixture
def db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def store() -> CatalogStore:
    return CatalogStore()


@pytest.fixture
def controller(db: FakeSupabase) -> CatalogController:
    return CatalogController(db=db, extractor=make_extractor(shells_json(2)), language="en")


@pytest.fixture
def default_shells() -> list[CourseShell]:
    return [
        CourseShell(name_ar="أ", name_en="A", doctor="Dr. A"),
        CourseShell(name_ar="ب", name_en="B", doctor="Dr. B", ta_name="TA B", lecture_day="Sun"),
    ]
