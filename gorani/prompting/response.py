"""Strict decoding of structured reasoning-service replies."""

from __future__ import annotations

from typing import Any, Dict, List, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ResponseSchemaError
from .constants import SCHEMA_DESCRIPTIONS, SCHEMA_NAMES, ResponseVariant


class FileSelection(BaseModel):
    """Reply listing the files needed for a task, in the service's order."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    files: List[str] = Field(description="Paths of the files needed for the task")


class CodeBundle(BaseModel):
    """Reply carrying generated scripts for a single output file."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    filename: str = Field(description="Name of the output file")
    scripts: List[str] = Field(description="List of code scripts")


ContextResponse = Union[FileSelection, CodeBundle]

_MODELS: Dict[ResponseVariant, Type[BaseModel]] = {
    ResponseVariant.FILE_SELECTION: FileSelection,
    ResponseVariant.CODE_BUNDLE: CodeBundle,
}


def parse_response(raw: bytes | str, variant: ResponseVariant) -> ContextResponse:
    """Decode ``raw`` JSON into exactly the requested response variant."""
    model = _MODELS[ResponseVariant(variant)]
    try:
        return model.model_validate_json(raw)  # type: ignore[return-value]
    except ValidationError as exc:
        problems = "; ".join(_format_error(error) for error in exc.errors())
        raise ResponseSchemaError(
            f"Reply does not match the {SCHEMA_NAMES[ResponseVariant(variant)]} schema: {problems}"
        ) from exc


def parse_file_selection(raw: bytes | str) -> FileSelection:
    return parse_response(raw, ResponseVariant.FILE_SELECTION)  # type: ignore[return-value]


def parse_code_bundle(raw: bytes | str) -> CodeBundle:
    return parse_response(raw, ResponseVariant.CODE_BUNDLE)  # type: ignore[return-value]


def serialize_response(response: ContextResponse) -> str:
    return response.model_dump_json()


def response_schema(variant: ResponseVariant) -> Dict[str, Any]:
    """Return the strict JSON schema sent alongside a request."""
    model = _MODELS[ResponseVariant(variant)]
    schema = model.model_json_schema()
    schema.pop("title", None)
    for prop in schema.get("properties", {}).values():
        prop.pop("title", None)
    schema["additionalProperties"] = False
    schema["required"] = list(schema.get("properties", {}))
    return schema


def response_format(variant: ResponseVariant) -> Dict[str, Any]:
    """Return the `response_format` block for a strict JSON-schema request."""
    variant = ResponseVariant(variant)
    return {
        "type": "json_schema",
        "json_schema": {
            "name": SCHEMA_NAMES[variant],
            "description": SCHEMA_DESCRIPTIONS[variant],
            "schema": response_schema(variant),
            "strict": True,
        },
    }


def _format_error(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
    return f"{location}: {error.get('msg', 'invalid value')}"


__all__ = [
    "CodeBundle",
    "ContextResponse",
    "FileSelection",
    "parse_code_bundle",
    "parse_file_selection",
    "parse_response",
    "response_format",
    "response_schema",
    "serialize_response",
]
