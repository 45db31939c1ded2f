"""Tests for the catalog command-line interface."""
import pytest
from click.testing import CliRunner

from catalog_cli.run import main
from catalog_server.controller import CatalogController
from catalog_server.errors import ConfigurationError

from conftest import FakeSupabase


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch, controller: CatalogController) -> CliRunner:
    monkeypatch.setattr("catalog_cli.run.CatalogController.from_env", lambda: controller)
    return CliRunner()


def test_list_shows_the_gallery(runner: CliRunner, db: FakeSupabase) -> None:
    db.seed_course("Algorithms", lectures=3)

    result = runner.invoke(main, ["list"])

    assert result.exit_code == 0, result.output
    assert "Algorithms" in result.output
    assert "0/3" in result.output


def test_list_without_courses_suggests_import(runner: CliRunner) -> None:
    result = runner.invoke(main, ["list"])

    assert result.exit_code == 0
    assert "No courses yet" in result.output


def test_add_prints_the_new_item(runner: CliRunner, db: FakeSupabase) -> None:
    course_id = db.seed_course("Algorithms", lectures=3)

    result = runner.invoke(main, ["add", course_id, "lecture"])

    assert result.exit_code == 0, result.output
    assert "Added Lecture 4" in result.output


def test_toggle_reports_the_new_state(runner: CliRunner, db: FakeSupabase) -> None:
    course_id = db.seed_course("Algorithms", sections=1)
    section_id = db.tables["sections"][0]["id"]

    result = runner.invoke(main, ["toggle", course_id, "section", section_id])

    assert result.exit_code == 0, result.output
    assert "Section 1: completed" in result.output


def test_declined_reset_changes_nothing(runner: CliRunner, db: FakeSupabase) -> None:
    db.seed_course("Keep me")

    result = runner.invoke(main, ["reset"], input="n\n")

    assert result.exit_code == 0
    assert db.calls == []
    assert len(db.tables["courses"]) == 1


def test_import_of_non_pdf_fails_with_notice(runner: CliRunner, db: FakeSupabase, tmp_path) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("not a schedule")

    result = runner.invoke(main, ["import", str(notes)])

    assert result.exit_code == 1
    assert "Please upload a PDF file only." in result.output
    assert db.calls == []


def test_unknown_course_exits_non_zero(runner: CliRunner) -> None:
    result = runner.invoke(main, ["show", "missing"])

    assert result.exit_code == 1
    assert "Course not found" in result.output


def test_missing_configuration_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    def not_configured() -> CatalogController:
        raise ConfigurationError("Set SUPABASE_URL and SUPABASE_ANON_KEY")

    monkeypatch.setattr("catalog_cli.run.CatalogController.from_env", not_configured)

    result = CliRunner().invoke(main, ["list"])

    assert result.exit_code == 1
    assert "SUPABASE_URL" in result.output
