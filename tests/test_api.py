"""Tests for the catalog HTTP service.

The controller is built from in-memory fakes, so no hosted store or LLM is
contacted.
"""
import pytest
from fastapi.testclient import TestClient

from catalog_server.controller import CatalogController
from catalog_server.errors import ConfigurationError
from services.catalog_service.app import create_app

from conftest import FakeSupabase, make_extractor, shells_json


@pytest.fixture
def client(db: FakeSupabase, controller: CatalogController):
    db.seed_course("Algorithms", lectures=3, sections=1)
    with TestClient(create_app(lambda: controller)) as test_client:
        yield test_client


def _first_course(client: TestClient) -> dict:
    return client.get("/courses").json()["courses"][0]


def test_health_reports_configured(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "healthy", "service": "catalog-service", "configured": True}


def test_gallery_lists_courses_with_progress(client: TestClient) -> None:
    course = _first_course(client)

    assert course["nameEn"] == "Algorithms"
    assert [i["name"] for i in course["lectures"]] == ["Lecture 1", "Lecture 2", "Lecture 3"]
    assert course["progress"]["totalItems"] == 4
    assert course["progress"]["isComplete"] is False


def test_unknown_course_is_404(client: TestClient) -> None:
    response = client.get("/courses/nope")

    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


def test_detail_view_selects_course(client: TestClient, controller: CatalogController) -> None:
    course_id = _first_course(client)["id"]

    assert client.get(f"/courses/{course_id}").json()["id"] == course_id
    assert controller.store.selected_course_id == course_id


def test_add_and_toggle_items(client: TestClient) -> None:
    course_id = _first_course(client)["id"]

    added = client.post(f"/courses/{course_id}/lectures").json()
    assert added["name"] == "Lecture 4"
    assert added["kind"] == "lecture"

    toggled = client.post(f"/courses/{course_id}/lectures/{added['id']}/toggle").json()
    assert toggled["completed"] is True
    assert _first_course(client)["progress"]["completedItems"] == 1


def test_attach_then_view_file(client: TestClient, db: FakeSupabase) -> None:
    course = _first_course(client)
    section_id = course["sections"][0]["id"]
    url = f"/courses/{course['id']}/sections/{section_id}/file"

    assert client.get(url).json()["file"] is None

    uploaded = client.post(url, files={"file": ("sheet 1.pdf", b"%PDF", "application/pdf")}).json()
    assert uploaded["name"] == "sheet 1.pdf"
    assert uploaded["path"] == f"{course['id']}/section-{section_id}-sheet_1.pdf"

    view = client.get(url).json()
    assert view["viewerMode"] == "pdf"
    assert view["file"]["publicUrl"] == db.public_url(uploaded["path"])


def test_import_rejects_non_pdf_before_any_call(client: TestClient, db: FakeSupabase) -> None:
    calls_before = list(db.calls)

    response = client.post("/schedule:import", files={"file": ("notes.txt", b"hello", "text/plain")})

    assert response.status_code == 400
    assert response.json()["kind"] == "validation"
    assert db.calls == calls_before


def test_import_replaces_catalog(client: TestClient) -> None:
    response = client.post("/schedule:import", files={"file": ("term.pdf", b"%PDF", "application/pdf")})

    assert response.status_code == 200
    body = response.json()
    assert [c["nameEn"] for c in body["courses"]] == ["Course 1", "Course 2"]
    assert all(len(c["lectures"]) == 12 for c in body["courses"])
    assert body["message"]


def test_reset_needs_confirmation(client: TestClient) -> None:
    assert client.post("/schedule:reset").status_code == 400

    response = client.post("/schedule:reset", params={"confirm": "true"})
    assert response.status_code == 200
    assert len(response.json()["courses"]) >= 1


def test_replace_failure_is_flagged_inconsistent(client: TestClient, db: FakeSupabase) -> None:
    db.fail("insert sections", "boom")

    response = client.post("/schedule:reset", params={"confirm": "true"})

    assert response.status_code == 502
    body = response.json()
    assert body["kind"] == "replace"
    assert body["stateMayBeInconsistent"] is True
    assert body["upstreamMessage"] == "boom"


def test_empty_extraction_is_422(db: FakeSupabase) -> None:
    controller = CatalogController(db=db, extractor=make_extractor('{"courses": []}'), language="en")
    with TestClient(create_app(lambda: controller)) as client:
        response = client.post("/schedule:import", files={"file": ("term.pdf", b"%PDF", "application/pdf")})

    assert response.status_code == 422
    assert not any(call.startswith("delete") for call in db.calls)


def test_unconfigured_service_serves_setup_instructions() -> None:
    def not_configured() -> CatalogController:
        raise ConfigurationError("set SUPABASE_URL and SUPABASE_ANON_KEY")

    with TestClient(create_app(not_configured)) as client:
        assert client.get("/health").json()["configured"] is False
        response = client.get("/courses")

    assert response.status_code == 503
    assert response.json()["kind"] == "configuration"
    assert "SUPABASE_URL" in response.json()["message"]


def test_failed_startup_load_is_reported_not_shown_as_empty(db: FakeSupabase) -> None:
    course_id = db.seed_course("Algorithms", lectures=1)
    db.fail("select catalog", "relation \"courses\" does not exist")
    controller = CatalogController(db=db, extractor=make_extractor(shells_json(1)), language="en")

    with TestClient(create_app(lambda: controller)) as client:
        gallery = client.get("/courses")
        detail = client.get(f"/courses/{course_id}")

        db.failures.clear()
        recovered = client.get("/courses")

    assert gallery.status_code == 502
    assert gallery.json()["kind"] == "upstream"
    assert "RLS" in gallery.json()["message"]
    assert gallery.json()["upstreamMessage"] == "relation \"courses\" does not exist"
    assert detail.status_code == 502
    assert recovered.status_code == 200
    assert [c["id"] for c in recovered.json()["courses"]] == [course_id]
