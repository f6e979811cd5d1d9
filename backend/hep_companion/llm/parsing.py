# hep_companion/llm/parsing.py
"""
Turn raw model text into a validated GeneratedProgram.

Models like to wrap JSON in markdown fences or add chatter around it, so we
clean first and fall back to the first {...} span before giving up.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from hep_companion.core.error_codes import ErrorCode
from hep_companion.schemas.generation_schema import GeneratedProgram

# Codes a fresh attempt (with repair instructions) can plausibly fix
RECOVERABLE_CODES = frozenset({ErrorCode.PARSE_ERROR, ErrorCode.EMPTY_RESPONSE})

_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

PREVIEW_CHARS = 200


class GenerationValidationError(Exception):
    def __init__(self, message: str, code: ErrorCode = ErrorCode.VALIDATION_ERROR, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    @property
    def recoverable(self) -> bool:
        return self.code in RECOVERABLE_CODES


def _preview(text: str) -> str:
    if len(text) <= PREVIEW_CHARS:
        return text
    return text[:PREVIEW_CHARS] + "..."


def clean_and_parse(raw: str | None) -> Any:
    if not raw or not raw.strip():
        raise GenerationValidationError("No response content from model", code=ErrorCode.EMPTY_RESPONSE)

    cleaned = _FENCE_RE.sub("", raw).strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        match = _OBJECT_RE.search(cleaned)
        if match:
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                pass

        raise GenerationValidationError(
            "Failed to parse model response as JSON",
            code=ErrorCode.PARSE_ERROR,
            details={"raw_response": _preview(cleaned), "parse_error": str(e)},
        ) from e


def _loc(loc) -> str:
    return ".".join(str(p) for p in loc)


def validate_program(data: Any) -> GeneratedProgram:
    try:
        return GeneratedProgram.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        first = errors[0]
        raise GenerationValidationError(
            f"Invalid response format: {first['msg']} at {_loc(first['loc'])}",
            code=ErrorCode.VALIDATION_ERROR,
            details={"errors": [{"path": _loc(err["loc"]), "message": err["msg"]} for err in errors]},
        ) from e
