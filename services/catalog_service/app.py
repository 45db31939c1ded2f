"""
FastAPI service for the course catalog.

Exposes the gallery, the course detail view and every catalog operation
(file attach, completion toggle, item creation, schedule import and reset)
as REST endpoints. Schedule import calls the LLM and can take 30-60 seconds
for large PDFs.
"""
from __future__ import annotations

import logging
import typing as t
from contextlib import asynccontextmanager
from enum import Enum

from fastapi import Depends, FastAPI, File, Query, Request, UploadFile
from fastapi.responses import JSONResponse

from catalog_server.controller import CatalogController
from catalog_server.errors import CatalogError, ConfigurationError, ReplaceError, UpstreamError
from catalog_server.messages import message
from services.shared.models import (
    CourseListResponse,
    CourseModel,
    ErrorResponse,
    FileObjectModel,
    FileViewResponse,
    ItemModel,
    ScheduleResponse,
    course_to_pydantic,
    file_to_pydantic,
    item_to_pydantic,
)


logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "configuration": 503,
    "validation": 400,
    "not_found": 404,
    "extraction": 422,
    "upstream": 502,
    "partial_failure": 502,
    "replace": 502,
}


class Collection(str, Enum):
    """URL segment naming an item collection."""
    lectures = "lectures"
    sections = "sections"

    @property
    def kind(self) -> str:
        return self.value[:-1]


def create_app(
    controller_factory: t.Callable[[], CatalogController] = CatalogController.from_env,
) -> FastAPI:
    """Build the service; ``controller_factory`` is called once at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the controller and load the catalog on startup, close it on shutdown."""
        try:
            app.state.controller = controller_factory()
        except ConfigurationError as e:
            # Serve setup instructions instead of crashing
            logger.warning(e.user_message)
            app.state.controller = None

        if app.state.controller is not None:
            try:
                await app.state.controller.load()
            except CatalogError as e:
                # Catalog endpoints retry the load and report its error until it succeeds
                logger.error("Initial catalog load failed: %s", e.user_message)

        yield

        if app.state.controller is not None:
            await app.state.controller.aclose()

    app = FastAPI(
        title="Course Catalog Service",
        description="REST API for course materials tracking and LLM-based schedule import",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        body = ErrorResponse(
            kind=exc.kind,
            message=exc.user_message,
            operation=exc.operation,
            upstreamMessage=exc.upstream_message if isinstance(exc, UpstreamError) else None,
            stateMayBeInconsistent=isinstance(exc, ReplaceError),
        )
        return JSONResponse(status_code=STATUS_BY_KIND.get(exc.kind, 500), content=body.model_dump())

    def get_controller(request: Request) -> CatalogController:
        controller = request.app.state.controller
        if controller is None:
            raise ConfigurationError(message("not_configured"), operation="configure")
        return controller

    async def get_loaded_controller(controller: CatalogController = Depends(get_controller)) -> CatalogController:
        """The controller, after a successful catalog load; raises the fetch error otherwise."""
        if not controller.store.loaded:
            await controller.load()
        return controller

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint for container orchestration."""
        return {
            "status": "healthy",
            "service": "catalog-service",
            "configured": request.app.state.controller is not None,
        }

    @app.get("/courses", response_model=CourseListResponse)
    async def list_courses(
        refresh: bool = Query(False, description="Refetch the catalog from storage first"),
        controller: CatalogController = Depends(get_controller),
    ) -> CourseListResponse:
        """The course gallery, with upload and completion progress per course."""
        if refresh or not controller.store.loaded:
            await controller.load()
        return CourseListResponse(
            courses=[course_to_pydantic(c) for c in controller.courses],
            selectedCourseId=controller.store.selected_course_id,
        )

    @app.get("/courses/{course_id}", response_model=CourseModel)
    async def get_course(course_id: str, controller: CatalogController = Depends(get_loaded_controller)) -> CourseModel:
        """One course's detail view; also marks it as the selected course."""
        return course_to_pydantic(controller.select_course(course_id))

    @app.post("/courses/{course_id}/{collection}", response_model=ItemModel)
    async def add_item(
        course_id: str,
        collection: Collection,
        controller: CatalogController = Depends(get_loaded_controller),
    ) -> ItemModel:
        """Append the next sequentially named lecture or section."""
        item = await controller.add_item(course_id, collection.kind)
        return item_to_pydantic(item)

    @app.post("/courses/{course_id}/{collection}/{item_id}/toggle", response_model=ItemModel)
    async def toggle_complete(
        course_id: str,
        collection: Collection,
        item_id: str,
        controller: CatalogController = Depends(get_loaded_controller),
    ) -> ItemModel:
        item = await controller.toggle_complete(course_id, collection.kind, item_id)
        return item_to_pydantic(item)

    @app.post("/courses/{course_id}/{collection}/{item_id}/file", response_model=FileObjectModel)
    async def attach_file(
        course_id: str,
        collection: Collection,
        item_id: str,
        file: UploadFile = File(...),
        controller: CatalogController = Depends(get_loaded_controller),
    ) -> FileObjectModel:
        """Upload (or overwrite) the item's file."""
        content = await file.read()
        file_object = await controller.attach_file(
            course_id,
            collection.kind,
            item_id,
            file.filename or "file",
            content,
            file.content_type or "application/octet-stream",
        )
        return file_to_pydantic(file_object)

    @app.get("/courses/{course_id}/{collection}/{item_id}/file", response_model=FileViewResponse)
    async def view_file(
        course_id: str,
        collection: Collection,
        item_id: str,
        controller: CatalogController = Depends(get_loaded_controller),
    ) -> FileViewResponse:
        file_object = controller.view_file(course_id, collection.kind, item_id)
        if file_object is None:
            return FileViewResponse(message=message("no_file", controller.language))
        return FileViewResponse(file=file_to_pydantic(file_object), viewerMode=file_object.viewer_mode)

    @app.post("/schedule:import", response_model=ScheduleResponse)
    async def import_schedule(
        file: UploadFile = File(...),
        controller: CatalogController = Depends(get_controller),
    ) -> ScheduleResponse:
        """
        Replace the catalog with the courses an LLM extracts from a schedule PDF.

        Non-PDF uploads are rejected before anything is sent anywhere.
        """
        content = await file.read()
        courses = await controller.import_schedule(
            file.filename or "schedule.pdf", content, file.content_type or ""
        )
        return ScheduleResponse(
            message=message("import_succeeded", controller.language),
            courses=[course_to_pydantic(c) for c in courses],
        )

    @app.post("/schedule:reset", response_model=ScheduleResponse)
    async def reset_schedule(
        confirm: bool = Query(False, description="Must be true: the current catalog is deleted"),
        controller: CatalogController = Depends(get_controller),
    ) -> ScheduleResponse:
        courses = await controller.reset_schedule(confirm)
        return ScheduleResponse(courses=[course_to_pydantic(c) for c in courses])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from catalog_server.log import configure_logging

    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8004)
