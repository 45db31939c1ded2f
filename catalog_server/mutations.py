"""
Single-item operations: attach a file, toggle completion, add an item.

Each one is a read-modify-write against one row followed by an in-place patch
of the store; the catalog is never refetched here. Concurrent writers are not
detected, the last write wins.
"""
from __future__ import annotations

import logging
import re
import typing as t

from .data_access import SupabaseClient
from .errors import NotFoundError, PartialFailureError, UpstreamError
from .messages import item_name, message
from .models import Course, FileObject, Item, table_for
from .store import CatalogStore


logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")


def sanitize_file_name(file_name: str) -> str:
    return _WHITESPACE.sub("_", file_name)


def file_path(course_id: str, kind: str, item_id: str, file_name: str) -> str:
    """Storage path of an item's file; the same item and name always map to the same path."""
    return f"{course_id}/{kind}-{item_id}-{sanitize_file_name(file_name)}"


def _require_course(store: CatalogStore, course_id: str, language: t.Optional[str]) -> Course:
    course = store.find_course(course_id)
    if course is None:
        raise NotFoundError(message("course_not_found", language, course_id=course_id))
    return course


def _require_item(
    store: CatalogStore, course_id: str, kind: str, item_id: str, language: t.Optional[str]
) -> Item:
    item = _require_course(store, course_id, language).find_item(kind, item_id)
    if item is None:
        raise NotFoundError(message("item_not_found", language, item_id=item_id))
    return item


async def attach_file(
    db: SupabaseClient,
    store: CatalogStore,
    course_id: str,
    kind: str,
    item_id: str,
    file_name: str,
    content: bytes,
    media_type: str,
    language: t.Optional[str] = None,
) -> FileObject:
    """
    Upload a file for an item and record it on the item's row.

    :raises UpstreamError: If the upload fails; nothing was written.
    :raises PartialFailureError: If the row update fails after the upload;
        the uploaded blob has been removed again.
    """
    table = table_for(kind)
    _require_item(store, course_id, kind, item_id, language)
    path = file_path(course_id, kind, item_id, file_name)

    try:
        await db.upload(path, content, media_type, upsert=True)
    except UpstreamError as e:
        logger.error("Upload error for %s: %s", path, e.upstream_message)
        if "security policy" in e.upstream_message:
            user_message = message("upload_policy_failed", language)
        else:
            user_message = message("upload_failed", language, error=e.upstream_message)
        raise UpstreamError(
            user_message, operation="upload", upstream_message=e.upstream_message, status_code=e.status_code
        ) from e

    file_object = FileObject(name=file_name, path=path, public_url=db.public_url(path), type=media_type)

    try:
        await db.update(table, item_id, {"file": file_object.to_row()})
    except UpstreamError as e:
        logger.error("DB update error for %s %s: %s", kind, item_id, e.upstream_message)
        try:
            await db.remove([path])
        except UpstreamError as cleanup_error:
            logger.warning("Could not remove orphaned file %s: %s", path, cleanup_error.upstream_message)
        raise PartialFailureError(
            message("file_update_failed", language, error=e.upstream_message),
            operation="attach file",
            upstream_message=e.upstream_message,
            status_code=e.status_code,
        ) from e

    store.patch_item(course_id, kind, item_id, file=file_object)
    logger.info("Attached %s to %s %s", path, kind, item_id)
    return file_object


async def toggle_complete(
    db: SupabaseClient,
    store: CatalogStore,
    course_id: str,
    kind: str,
    item_id: str,
    language: t.Optional[str] = None,
) -> Item:
    """Flip an item's ``completed`` flag, persist it, then patch the store."""
    table = table_for(kind)
    new_status = not _require_item(store, course_id, kind, item_id, language).completed

    try:
        await db.update(table, item_id, {"completed": new_status})
    except UpstreamError as e:
        logger.error("Toggle complete error for %s %s: %s", kind, item_id, e.upstream_message)
        raise UpstreamError(
            message("toggle_failed", language, error=e.upstream_message),
            operation="toggle complete",
            upstream_message=e.upstream_message,
            status_code=e.status_code,
        ) from e

    return store.patch_item(course_id, kind, item_id, completed=new_status)


async def add_item(
    db: SupabaseClient,
    store: CatalogStore,
    course_id: str,
    kind: str,
    language: t.Optional[str] = None,
) -> Item:
    """Create the next sequentially named item (3 lectures -> "Lecture 4") and append it."""
    table = table_for(kind)
    course = _require_course(store, course_id, language)
    name = item_name(kind, len(course.items(kind)) + 1, language)

    try:
        rows = await db.insert(table, [{"name": name, "course_id": course_id, "completed": False}])
    except UpstreamError as e:
        logger.error("Error adding new %s to %s: %s", kind, course_id, e.upstream_message)
        raise UpstreamError(
            message("add_item_failed", language, error=e.upstream_message),
            operation="add item",
            upstream_message=e.upstream_message,
            status_code=e.status_code,
        ) from e

    if not rows:
        raise UpstreamError(
            message("add_item_failed", language, error=message("invalid_data", language)),
            operation="add item",
        )

    item = Item.from_row(rows[0], kind)
    store.append_item(course_id, item)
    return item
