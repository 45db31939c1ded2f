"""
Schedule import and reset: destructive replacement of the whole catalog.

Ordering guarantee: nothing is deleted unless a valid, non-empty list of
course shells is already in hand. The replace itself (delete children,
delete courses, insert courses, seed children) is not transactional because
the row API offers no multi-statement transaction; a failure midway is
reported as a ``ReplaceError`` and the catalog is refetched on the next
successful run.
"""
from __future__ import annotations

import logging
import typing as t
from contextlib import contextmanager

from . import config
from .assembly import fetch_courses
from .data_access import SupabaseClient
from .defaults import DEFAULT_COURSES
from .errors import CatalogError, ReplaceError, UpstreamError, ValidationError
from .extraction import PDF_MEDIA_TYPE, ScheduleExtractor
from .messages import item_name, message
from .models import ITEM_KINDS, Course, CourseShell, table_for
from .store import CatalogStore


logger = logging.getLogger(__name__)


@contextmanager
def _analyzing(store: CatalogStore, language: t.Optional[str], operation: str) -> t.Iterator[None]:
    """Marks the store busy for the duration of an import or reset."""
    if store.is_analyzing:
        raise ValidationError(message("busy", language), operation=operation)
    store.is_analyzing = True
    try:
        yield
    finally:
        store.is_analyzing = False


def placeholder_rows(
    course_ids: list[str],
    kind: str,
    count: int = config.PLACEHOLDER_COUNT,
    language: t.Optional[str] = None,
) -> list[dict[str, t.Any]]:
    """Rows for ``count`` sequentially named, incomplete, file-less items per course."""
    return [
        {"course_id": course_id, "name": item_name(kind, number, language), "completed": False}
        for course_id in course_ids
        for number in range(1, count + 1)
    ]


def _inserted_ids(rows: t.Any, expected: int, language: t.Optional[str]) -> list[str]:
    """Ids of freshly inserted course rows; every shell must come back with one."""
    ids = [row.get("id") for row in rows if isinstance(row, dict)] if isinstance(rows, list) else []
    if len(ids) != expected or any(row_id is None for row_id in ids):
        error = message("invalid_data", language)
        raise UpstreamError(error, operation="insert courses", upstream_message=error)
    return [str(row_id) for row_id in ids]


async def replace_catalog(
    db: SupabaseClient,
    store: CatalogStore,
    shells: list[CourseShell],
    language: t.Optional[str] = None,
    failure_key: str = "import_failed",
) -> list[Course]:
    """
    Delete every item and course, insert ``shells`` with placeholder items, and reload.

    :raises ReplaceError: On any failure; persisted state may then be partial.
    """
    try:
        for kind in ITEM_KINDS:
            await db.delete_all(table_for(kind))
        await db.delete_all("courses")

        inserted = await db.insert("courses", [shell.to_row() for shell in shells])
        course_ids = _inserted_ids(inserted, len(shells), language)
        logger.info("Inserted %d course(s)", len(course_ids))

        for kind in ITEM_KINDS:
            await db.insert(table_for(kind), placeholder_rows(course_ids, kind, language=language))

        courses = await fetch_courses(db, store, language)
    except UpstreamError as e:
        logger.error("Catalog replace failed during %s: %s", e.operation, e.upstream_message)
        raise ReplaceError(
            message(failure_key, language, error=e.upstream_message),
            operation=e.operation,
            upstream_message=e.upstream_message,
            status_code=e.status_code,
        ) from e

    store.clear_selection()
    return courses


async def import_schedule(
    db: SupabaseClient,
    extractor: ScheduleExtractor,
    store: CatalogStore,
    filename: str,
    content: bytes,
    media_type: str,
    language: t.Optional[str] = None,
) -> list[Course]:
    """
    Replace the catalog with the courses found in a schedule PDF.

    :raises ValidationError: If the file is not a PDF (no network call made).
    :raises ExtractionError: If extraction fails or yields nothing (catalog untouched).
    :raises ReplaceError: If the replace or reload fails midway.
    """
    if media_type != PDF_MEDIA_TYPE:
        raise ValidationError(message("pdf_only", language), operation="import")

    with _analyzing(store, language, "import"):
        try:
            shells = await extractor.extract(content, filename)
        except CatalogError as e:
            logger.error("Schedule extraction failed for %s: %s", filename, e)
            raise

        courses = await replace_catalog(db, store, shells, language, failure_key="import_failed")

    logger.info("Imported schedule %s: %d course(s)", filename, len(courses))
    return courses


async def reset_schedule(
    db: SupabaseClient,
    store: CatalogStore,
    confirm: bool,
    shells: t.Optional[list[CourseShell]] = None,
    language: t.Optional[str] = None,
) -> list[Course]:
    """
    Replace the catalog with the built-in default courses.

    :param confirm: Must be True; the reset deletes the current catalog.
    :raises ValidationError: If not confirmed (no network call made).
    :raises ReplaceError: If the replace or reload fails midway.
    """
    if not confirm:
        raise ValidationError(message("reset_not_confirmed", language), operation="reset")

    with _analyzing(store, language, "reset"):
        courses = await replace_catalog(
            db, store, list(shells or DEFAULT_COURSES), language, failure_key="reset_failed"
        )

    logger.info("Reset catalog to %d default course(s)", len(courses))
    return courses
