"""
Top-level application controller.

Owns the catalog store and the two collaborators (hosted store, extraction
service) and exposes every catalog operation. The HTTP service and the CLI
each hold one controller and pass it around; there is no module-level
catalog state.
"""
from __future__ import annotations

import typing as t

from . import config
from .assembly import fetch_courses
from .data_access import SupabaseClient
from .errors import ConfigurationError, NotFoundError
from .extraction import ScheduleExtractor
from .messages import message
from .models import Course, CourseShell, FileObject, Item
from .mutations import add_item, attach_file, toggle_complete
from .store import CatalogStore
from .workflow import import_schedule, reset_schedule


class CatalogController:
    """Entry point for everything a user can do with the catalog."""

    def __init__(
        self,
        db: SupabaseClient,
        extractor: ScheduleExtractor,
        store: t.Optional[CatalogStore] = None,
        language: t.Optional[str] = None,
    ) -> None:
        self.db = db
        self.extractor = extractor
        self.store = store or CatalogStore()
        self.language = language or config.CATALOG_LANGUAGE

    @classmethod
    def from_env(cls) -> "CatalogController":
        """
        Build a controller from environment settings.

        :raises ConfigurationError: If SUPABASE_URL / SUPABASE_ANON_KEY are not set.
        """
        if not config.is_configured():
            raise ConfigurationError(message("not_configured"), operation="configure")
        return cls(db=SupabaseClient(), extractor=ScheduleExtractor(language=config.CATALOG_LANGUAGE))

    async def aclose(self) -> None:
        await self.db.aclose()

    # -----------------------------
    # Reading
    # -----------------------------

    @property
    def courses(self) -> list[Course]:
        return self.store.courses

    async def load(self) -> list[Course]:
        """Fetch the full catalog from storage into the store."""
        return await fetch_courses(self.db, self.store, self.language)

    def get_course(self, course_id: str) -> Course:
        course = self.store.find_course(course_id)
        if course is None:
            raise NotFoundError(message("course_not_found", self.language, course_id=course_id))
        return course

    def select_course(self, course_id: str) -> Course:
        course = self.get_course(course_id)
        self.store.select_course(course.id)
        return course

    def back(self) -> None:
        self.store.clear_selection()

    def view_file(self, course_id: str, kind: str, item_id: str) -> t.Optional[FileObject]:
        """Open an item's file in the viewer; None when the item has no file."""
        item = self.get_course(course_id).find_item(kind, item_id)
        if item is None:
            raise NotFoundError(message("item_not_found", self.language, item_id=item_id))
        self.store.viewing_file = item.file
        return item.file

    def close_viewer(self) -> None:
        self.store.viewing_file = None

    # -----------------------------
    # Import / reset
    # -----------------------------

    async def import_schedule(self, filename: str, content: bytes, media_type: str) -> list[Course]:
        return await import_schedule(
            self.db, self.extractor, self.store, filename, content, media_type, self.language
        )

    async def reset_schedule(self, confirm: bool, shells: t.Optional[list[CourseShell]] = None) -> list[Course]:
        return await reset_schedule(self.db, self.store, confirm, shells, self.language)

    # -----------------------------
    # Item mutations
    # -----------------------------

    async def attach_file(
        self, course_id: str, kind: str, item_id: str, file_name: str, content: bytes, media_type: str
    ) -> FileObject:
        return await attach_file(
            self.db, self.store, course_id, kind, item_id, file_name, content, media_type, self.language
        )

    async def toggle_complete(self, course_id: str, kind: str, item_id: str) -> Item:
        return await toggle_complete(self.db, self.store, course_id, kind, item_id, self.language)

    async def add_item(self, course_id: str, kind: str) -> Item:
        return await add_item(self.db, self.store, course_id, kind, self.language)
