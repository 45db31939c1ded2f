"""Tests for course-shell extraction from schedule PDFs."""
import base64
import json
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from catalog_server.errors import ExtractionError
from catalog_server.extraction import EXTRACTION_PROMPT, parse_course_shells
from prompts import available_prompts

from conftest import make_extractor, shells_json


def test_parse_accepts_bare_array_and_normalizes_optional_fields() -> None:
    raw = json.dumps([
        {"nameAr": " رياضيات ", "nameEn": "Math", "doctor": "Dr. M", "taName": "", "lectureDay": "الأحد"},
    ])

    [shell] = parse_course_shells(raw)

    assert shell.name_ar == "رياضيات"
    assert shell.ta_name is None
    assert shell.lecture_day == "الأحد"
    assert shell.section_day is None
    assert shell.to_row() == {"nameAr": "رياضيات", "nameEn": "Math", "doctor": "Dr. M", "lectureDay": "الأحد"}


def test_parse_accepts_courses_wrapper_without_deduplicating() -> None:
    raw = json.dumps({"courses": [
        {"nameAr": "أ", "nameEn": "A", "doctor": "D", "taName": None, "lectureDay": None, "sectionDay": None},
        {"nameAr": "أ", "nameEn": "A", "doctor": "D", "taName": None, "lectureDay": None, "sectionDay": None},
    ]})

    assert len(parse_course_shells(raw)) == 2


@pytest.mark.parametrize("raw", ["", "{", '{"courses": []}', "[]", '"text"', '[{"nameEn": "A"}]'])
def test_parse_rejects_unusable_output(raw: str) -> None:
    with pytest.raises(ExtractionError):
        parse_course_shells(raw, language="en")


def test_empty_result_uses_no_courses_message() -> None:
    with pytest.raises(ExtractionError) as exc_info:
        parse_course_shells("[]", language="en")

    assert exc_info.value.user_message == "The AI could not extract any courses."


def test_extraction_prompt_ships_with_the_package() -> None:
    assert "schedule_extraction_prompt" in available_prompts()
    assert "nameAr" in EXTRACTION_PROMPT


@pytest.mark.asyncio
async def test_extract_sends_pdf_and_strict_schema() -> None:
    extractor = make_extractor(shells_json(2))

    shells = await extractor.extract(b"%PDF-1.7", "term.pdf")

    assert [s.name_en for s in shells] == ["Course 1", "Course 2"]
    [request] = extractor.client.requests
    assert request["model"] == "test-model"
    fmt = request["response_format"]
    assert fmt["type"] == "json_schema"
    item_schema = fmt["json_schema"]["schema"]["properties"]["courses"]["items"]
    assert {"nameAr", "nameEn", "doctor"} <= set(item_schema["required"])
    text_part, file_part = request["messages"][0]["content"]
    assert text_part == {"type": "text", "text": "extract"}
    assert file_part["file"]["filename"] == "term.pdf"
    encoded = file_part["file"]["file_data"].split(",", 1)[1]
    assert file_part["file"]["file_data"].startswith("data:application/pdf;base64,")
    assert base64.b64decode(encoded) == b"%PDF-1.7"


@pytest.mark.asyncio
async def test_service_failure_becomes_extraction_error() -> None:
    extractor = make_extractor(error=OpenAIError("quota exceeded"))

    with pytest.raises(ExtractionError) as exc_info:
        await extractor.extract(b"%PDF", "term.pdf")

    assert "quota exceeded" in exc_info.value.user_message


@pytest.mark.asyncio
async def test_response_without_choices_becomes_extraction_error() -> None:
    extractor = make_extractor()

    async def no_choices(**kwargs):
        return SimpleNamespace(choices=[])

    extractor.client.chat.completions.create = no_choices

    with pytest.raises(ExtractionError):
        await extractor.extract(b"%PDF", "term.pdf")
