"""
Catalog assembly: turn stored rows into the in-memory course list.

Used at startup and after every destructive replace, when ids have changed
and local patching cannot reconstruct the catalog.
"""
from __future__ import annotations

import logging
import re
import typing as t

from .data_access import SupabaseClient
from .errors import UpstreamError
from .messages import message
from .models import Course, Item
from .store import CatalogStore


logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")


def natural_key(name: str) -> tuple[t.Any, ...]:
    """
    Sort key comparing digit runs by value and text case-insensitively.

    "Lecture 2" sorts before "Lecture 10", and numbers sort before text
    ("10 Review" < "Lecture 1"). Digits in any Unicode decimal
    script (e.g. Arabic-Indic) count as numbers.
    """
    parts = _DIGITS.split(name)
    # split() alternates text and digit runs, starting with text
    return tuple(
        (0, int(part), "") if index % 2 else (1, 0, part.casefold())
        for index, part in enumerate(parts)
        if part
    )


def sort_items(items: list[Item]) -> list[Item]:
    return sorted(items, key=lambda item: natural_key(item.name))


def assemble_courses(rows: list[dict[str, t.Any]]) -> list[Course]:
    """Convert joined course rows into courses with naturally ordered children."""
    courses = []
    for row in rows:
        course = Course.from_row(row)
        course.lectures = sort_items(course.lectures)
        course.sections = sort_items(course.sections)
        courses.append(course)
    return courses


async def fetch_courses(
    db: SupabaseClient,
    store: CatalogStore,
    language: t.Optional[str] = None,
) -> list[Course]:
    """
    Refetch the whole catalog and replace the store's course list.

    :raises UpstreamError: If the store could not be read; the message
        includes hints about table setup and access policies.
    """
    store.is_loading = True
    try:
        rows = await db.select_catalog()
        courses = assemble_courses(rows)
    except UpstreamError as e:
        logger.error("Error fetching catalog: %s", e.upstream_message)
        raise UpstreamError(
            message("fetch_failed", language, error=e.upstream_message),
            operation="fetch",
            upstream_message=e.upstream_message,
            status_code=e.status_code,
        ) from e
    except (KeyError, TypeError, AttributeError) as e:
        logger.error("Malformed catalog rows: %r", e)
        error = f"{message('invalid_data', language)}: {e!r}"
        raise UpstreamError(
            message("fetch_failed", language, error=error), operation="fetch", upstream_message=error
        ) from e
    finally:
        store.is_loading = False

    store.replace_courses(courses)
    logger.info("Loaded %d course(s)", len(courses))
    return courses
