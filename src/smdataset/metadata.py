"""Metadata parsing, trimming, validation and submitter assignment."""

import json
from collections.abc import Mapping
from functools import cache
from importlib import resources
from typing import Any

from jsonschema import Draft7Validator
from jsonschema import ValidationError
from loguru import logger as log

from smdataset.errors import ValidationFailed
from smdataset.utils import get_in
from smdataset.utils import set_in

SUBMITTER_EMAIL_PATH: tuple[str, ...] = ("Submitted_By", "Submitter", "Email")
SCHEMA_RESOURCE: str = "metadata_schema.json"


@cache
def load_metadata_schema() -> dict[str, Any]:
    """Reads the bundled metadata schema. Loaded once per process."""
    schema_file = resources.files("smdataset.schemas").joinpath(SCHEMA_RESOURCE)
    schema = json.loads(schema_file.read_text(encoding="utf-8"))
    Draft7Validator.check_schema(schema)
    log.debug(f"Loaded metadata schema '{schema.get('title')}'")
    return schema


@cache
def get_metadata_validator() -> Draft7Validator:
    """Compiled validator for the bundled schema, shared by every request."""
    return Draft7Validator(load_metadata_schema())


def is_empty(value: Any) -> bool:
    """True for None, empty strings and containers whose every leaf is empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, Mapping):
        return all(is_empty(item) for item in value.values())
    if isinstance(value, list):
        return all(is_empty(item) for item in value)
    return False


def trim_empty_fields(schema: Mapping[str, Any], value: Any) -> Any:
    """Drops empty optional fields declared by the schema, recursively.

    Returns a trimmed copy; lists are kept as they are and fields unknown to
        the schema are left untouched. Empty required fields are kept so the
        validator reports them.
    """
    if not isinstance(value, Mapping):
        return value
    required = set(schema.get("required", []))
    trimmed = dict(value)
    for name, prop_schema in schema.get("properties", {}).items():
        if name not in trimmed:
            continue
        if is_empty(trimmed[name]) and name not in required:
            del trimmed[name]
        else:
            trimmed[name] = trim_empty_fields(prop_schema, trimmed[name])
    return trimmed


def _violation(error: ValidationError) -> dict[str, str]:
    path = "".join(f"/{part}" for part in error.absolute_path)
    return {"path": path, "message": error.message}


def collect_violations(
    metadata: Any,
    validator: Draft7Validator | None = None,
) -> list[dict[str, str]]:
    """Every schema violation in the trimmed metadata, ordered by location."""
    validator = validator or get_metadata_validator()
    cleaned = trim_empty_fields(validator.schema, metadata)
    errors = sorted(
        validator.iter_errors(cleaned),
        key=lambda err: (err.json_path, err.message),
    )
    return [_violation(err) for err in errors]


def validate_metadata(
    metadata: Any,
    validator: Draft7Validator | None = None,
) -> None:
    """Raises ValidationFailed carrying all violations found in the metadata."""
    violations = collect_violations(metadata, validator=validator)
    if violations:
        log.info(f"Metadata failed validation with {len(violations)} violation(s)")
        raise ValidationFailed(violations)


def parse_metadata_json(metadata_json: str) -> dict[str, Any]:
    """Parses metadata sent as a JSON string."""
    try:
        metadata = json.loads(metadata_json)
    except json.JSONDecodeError as err:
        raise ValidationFailed(
            [{"path": "", "message": f"Invalid metadata JSON: {err.msg}"}]
        ) from err
    if not isinstance(metadata, dict):
        raise ValidationFailed(
            [{"path": "", "message": "Metadata must be a JSON object"}]
        )
    return metadata


def assign_submitter_email(
    old_metadata: Mapping[str, Any] | None,
    new_metadata: dict[str, Any],
    acting_user_email: str,
) -> None:
    """Sets the submitter email on `new_metadata` in place.

    New datasets get the acting user's email. Edits always keep the submitter
        recorded in `old_metadata`, whatever the edit payload says.
    """
    email = (
        get_in(old_metadata, SUBMITTER_EMAIL_PATH)
        if old_metadata is not None
        else acting_user_email
    )
    set_in(new_metadata, SUBMITTER_EMAIL_PATH, email)


__all__ = [
    "assign_submitter_email",
    "collect_violations",
    "get_metadata_validator",
    "is_empty",
    "load_metadata_schema",
    "parse_metadata_json",
    "trim_empty_fields",
    "validate_metadata",
]
