"""
Course-shell extraction from a schedule PDF.

The PDF is sent as-is to the LLM together with a fixed instruction and a JSON
schema; the model is trusted to merge duplicate course mentions, so the result
is only validated here, never deduplicated.
"""
from __future__ import annotations

import base64
import json
import logging
import typing as t

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from prompts import load_prompt

from . import config
from .errors import ExtractionError
from .messages import message
from .models import CourseShell


logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

EXTRACTION_PROMPT = load_prompt("schedule_extraction_prompt")

# Structured-output roots must be objects, so the course array sits under "courses".
# Optional fields are nullable because strict schemas list every property as required.
COURSE_SHELLS_SCHEMA: dict[str, t.Any] = {
    "type": "object",
    "properties": {
        "courses": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "nameAr": {"type": "string"},
                    "nameEn": {"type": "string"},
                    "doctor": {"type": "string"},
                    "taName": {"type": ["string", "null"]},
                    "lectureDay": {"type": ["string", "null"]},
                    "sectionDay": {"type": ["string", "null"]},
                },
                "required": ["nameAr", "nameEn", "doctor", "taName", "lectureDay", "sectionDay"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["courses"],
    "additionalProperties": False,
}


class ExtractedCourse(BaseModel):
    """One course record as returned by the model."""
    model_config = ConfigDict(str_strip_whitespace=True)

    nameAr: str
    nameEn: str
    doctor: str
    taName: t.Optional[str] = None
    lectureDay: t.Optional[str] = None
    sectionDay: t.Optional[str] = None

    def to_shell(self) -> CourseShell:
        return CourseShell(
            name_ar=self.nameAr,
            name_en=self.nameEn,
            doctor=self.doctor,
            ta_name=self.taName or None,
            lecture_day=self.lectureDay or None,
            section_day=self.sectionDay or None,
        )


_COURSE_LIST = TypeAdapter(list[ExtractedCourse])


def parse_course_shells(raw: str, language: t.Optional[str] = None) -> list[CourseShell]:
    """
    Parse the model's JSON text into course shells.

    Accepts a bare array or the ``{"courses": [...]}`` wrapper.

    :raises ExtractionError: If the text is not JSON, not an array of
        course-shaped records, or the array is empty.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ExtractionError(message("extraction_failed", language, error=f"invalid JSON: {e}"),
                              operation="extract") from e

    if isinstance(data, dict):
        data = data.get("courses")

    if not isinstance(data, list) or not data:
        raise ExtractionError(message("no_courses_extracted", language), operation="extract")

    try:
        courses = _COURSE_LIST.validate_python(data)
    except PydanticValidationError as e:
        raise ExtractionError(
            message("extraction_failed", language, error=f"{e.error_count()} invalid course record(s)"),
            operation="extract",
        ) from e

    return [course.to_shell() for course in courses]


class ScheduleExtractor:
    """Sends a schedule PDF to the LLM and returns the extracted course shells."""

    def __init__(
        self,
        client: t.Optional[AsyncOpenAI] = None,
        model: str = config.EXTRACTION_MODEL,
        prompt: str = EXTRACTION_PROMPT,
        language: t.Optional[str] = None,
    ) -> None:
        # Created on first use so the rest of the catalog works without an API key
        self.client = client
        self.model = model
        self.prompt = prompt
        self.language = language

    async def request_extraction(self, content: bytes, filename: str = "schedule.pdf") -> str:
        """Submit the PDF and return the model's raw JSON text."""
        encoded = base64.b64encode(content).decode("utf-8")
        try:
            if self.client is None:
                self.client = AsyncOpenAI(api_key=config.OPENAI_API_KEY, timeout=config.EXTRACTION_TIMEOUT)
            completion = await self.client.chat.completions.create(
                model=self.model,
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": "course_shells", "strict": True, "schema": COURSE_SHELLS_SCHEMA},
                },
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": self.prompt},
                            {
                                "type": "file",
                                "file": {
                                    "filename": filename,
                                    "file_data": f"data:{PDF_MEDIA_TYPE};base64,{encoded}",
                                },
                            },
                        ],
                    },
                ],
            )
        except OpenAIError as e:
            logger.error("Extraction request failed: %s", e)
            raise ExtractionError(message("extraction_failed", self.language, error=str(e)),
                                  operation="extract") from e

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    async def extract(self, content: bytes, filename: str = "schedule.pdf") -> list[CourseShell]:
        raw = await self.request_extraction(content, filename)
        shells = parse_course_shells(raw, self.language)
        logger.info("Extracted %d course shell(s) from %s", len(shells), filename)
        return shells
