"""
MCP Gateway Server - catalog tools for LLM agents.

Each tool makes an HTTP call to the catalog service and returns its JSON
response as Pydantic models, so agents can browse courses, mark items
complete, attach files and import schedules.
"""
from __future__ import annotations

import mimetypes
import typing as t
from pathlib import Path

import httpx
from fastmcp import FastMCP

from catalog_server import config
from services.shared.models import (
    CourseListResponse,
    CourseModel,
    ErrorResponse,
    FileObjectModel,
    FileViewResponse,
    ItemModel,
    ScheduleResponse,
)


mcp = FastMCP("CourseCatalogGateway")

# Service URL - configurable via environment variable
CATALOG_SERVICE_URL = config.CATALOG_SERVICE_URL

# Timeout settings (in seconds)
STANDARD_TIMEOUT = config.CATALOG_HTTP_TIMEOUT  # CRUD operations
IMPORT_TIMEOUT = config.EXTRACTION_TIMEOUT  # schedule import waits on the LLM

Collection = t.Literal["lectures", "sections"]


def _call(
    method: str,
    path: str,
    timeout: float = STANDARD_TIMEOUT,
    transport: t.Optional[httpx.BaseTransport] = None,
    **kwargs: t.Any,
) -> t.Any:
    """Call the catalog service and return the decoded JSON body."""
    try:
        with httpx.Client(base_url=CATALOG_SERVICE_URL, timeout=timeout, transport=transport) as client:
            response = client.request(method, path, **kwargs)
            response.raise_for_status()
        return response.json()
    except httpx.TimeoutException:
        raise RuntimeError(f"Catalog service call {method} {path} timed out after {timeout} seconds")
    except httpx.HTTPStatusError as e:
        try:
            detail = ErrorResponse(**e.response.json()).message
        except (ValueError, TypeError):
            detail = e.response.text
        raise RuntimeError(f"HTTP error from catalog service: {e.response.status_code} {detail}")
    except httpx.HTTPError as e:
        raise RuntimeError(f"Error calling catalog service: {str(e)}")


def _read_upload(file_path: str) -> tuple[str, bytes, str]:
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {file_path}")
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return path.name, path.read_bytes(), media_type


@mcp.tool()
def list_courses(refresh: bool = False) -> CourseListResponse:
    """Lists all courses with their lectures, sections and progress.

    :param refresh: Refetch the catalog from storage first.
    """
    return CourseListResponse(**_call("GET", "/courses", params={"refresh": str(refresh).lower()}))


@mcp.tool()
def get_course(course_id: str) -> CourseModel:
    """Shows one course with its lectures and sections."""
    return CourseModel(**_call("GET", f"/courses/{course_id}"))


@mcp.tool()
def add_item(course_id: str, collection: Collection) -> ItemModel:
    """Adds the next numbered lecture or section to a course."""
    return ItemModel(**_call("POST", f"/courses/{course_id}/{collection}"))


@mcp.tool()
def toggle_complete(course_id: str, collection: Collection, item_id: str) -> ItemModel:
    """Marks a lecture or section complete, or incomplete if it already was."""
    return ItemModel(**_call("POST", f"/courses/{course_id}/{collection}/{item_id}/toggle"))


@mcp.tool()
def attach_file(course_id: str, collection: Collection, item_id: str, file_path: str) -> FileObjectModel:
    """Uploads a local file for a lecture or section, replacing any previous file.

    :param file_path: Path of the local file to upload.
    """
    name, content, media_type = _read_upload(file_path)
    return FileObjectModel(**_call(
        "POST",
        f"/courses/{course_id}/{collection}/{item_id}/file",
        files={"file": (name, content, media_type)},
    ))


@mcp.tool()
def view_file(course_id: str, collection: Collection, item_id: str) -> FileViewResponse:
    """Returns an item's file URL and whether it displays inline (image, pdf) or needs download."""
    return FileViewResponse(**_call("GET", f"/courses/{course_id}/{collection}/{item_id}/file"))


@mcp.tool()
def import_schedule(pdf_path: str) -> ScheduleResponse:
    """Replaces the whole catalog with the courses extracted from a schedule PDF.

    This deletes every existing course, lecture and section.
    """
    name, content, media_type = _read_upload(pdf_path)
    return ScheduleResponse(**_call(
        "POST", "/schedule:import", timeout=IMPORT_TIMEOUT, files={"file": (name, content, media_type)}
    ))


@mcp.tool()
def reset_schedule(confirm: bool) -> ScheduleResponse:
    """Replaces the whole catalog with the default courses. ``confirm`` must be true."""
    return ScheduleResponse(**_call("POST", "/schedule:reset", params={"confirm": str(confirm).lower()}))


@mcp.tool()
def get_gateway_info() -> dict[str, str]:
    """Reports where the gateway sends its calls and whether the service is up."""
    try:
        health = _call("GET", "/health")
        status = health.get("status", "unknown")
    except RuntimeError as e:
        status = f"unreachable: {e}"
    return {"catalog_service": CATALOG_SERVICE_URL, "catalog_service_status": status, "gateway_status": "running"}


if __name__ == "__main__":
    mcp.run()
