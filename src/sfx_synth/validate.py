from __future__ import annotations

import json
import math
from typing import Any

import structlog

from sfx_synth.models import FIELD_RANGES, INT_FIELDS, WAVE_SHAPES, Patch

logger = structlog.get_logger()


class PatchValidationError(str):
    """A structured validation error that behaves as a plain string.

    Subclasses ``str`` so callers can compare against ``[]``, test membership
    and ``"; ".join(errors)`` without unpacking anything.
    """

    kind: str
    field_name: str | None
    severity: str  # "error" | "warning"

    def __new__(
        cls,
        kind: str,
        message: str,
        *,
        field_name: str | None = None,
        severity: str = "error",
    ) -> PatchValidationError:
        return super().__new__(cls, message)

    def __init__(
        self,
        kind: str,
        message: str,
        *,
        field_name: str | None = None,
        severity: str = "error",
    ) -> None:
        self.kind = kind
        self.field_name = field_name
        self.severity = severity


def validate_patch(patch: Patch) -> list[PatchValidationError]:
    """Check a patch and return a list of errors (empty = valid).

    Patches built through the constructor are always valid; this exists for
    patches assembled with ``Patch.model_construct`` or mutated behind
    pydantic's back, where no clamping has happened.
    """
    errors: list[PatchValidationError] = []

    # 1. Wave shape -- a name, or a reference integer code
    shape = patch.wave_shape
    if isinstance(shape, int) and not isinstance(shape, bool):
        if not 0 <= shape < len(WAVE_SHAPES):
            errors.append(
                PatchValidationError(
                    "out_of_range",
                    f"Wave shape code {shape} outside [0, {len(WAVE_SHAPES) - 1}]",
                    field_name="wave_shape",
                )
            )
    elif shape not in WAVE_SHAPES:
        errors.append(
            PatchValidationError(
                "unknown_shape",
                f"Unknown wave shape '{patch.wave_shape}'",
                field_name="wave_shape",
            )
        )

    # 2. Numeric fields -- type, finiteness, range
    for name, (lo, hi) in FIELD_RANGES.items():
        value = getattr(patch, name, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(
                PatchValidationError(
                    "bad_type",
                    f"Field '{name}' is not a number: {value!r}",
                    field_name=name,
                )
            )
            continue
        if name in INT_FIELDS and not isinstance(value, int):
            errors.append(
                PatchValidationError(
                    "bad_type",
                    f"Field '{name}' must be an integer, got {value!r}",
                    field_name=name,
                )
            )
            continue
        if not math.isfinite(value):
            errors.append(
                PatchValidationError(
                    "not_finite", f"Field '{name}' is not finite: {value}", field_name=name
                )
            )
            continue
        if value < lo or value > hi:
            errors.append(
                PatchValidationError(
                    "out_of_range",
                    f"Field '{name}' = {value} outside [{lo}, {hi}]",
                    field_name=name,
                )
            )

    # 3. Silent patch -- legal, but renders nothing
    if not errors and patch.envelope_time == 0.0:
        errors.append(
            PatchValidationError(
                "silent",
                "Envelope has zero length, patch renders no samples",
                severity="warning",
            )
        )

    return errors


def _unknown_keys(data: dict[str, Any]) -> list[str]:
    return sorted(key for key in data if key not in Patch.model_fields)


def validate_patch_data(data: dict[str, Any]) -> list[PatchValidationError]:
    """Check raw patch data as written, without clamping it.

    Missing fields take their defaults. Keys that are not patch fields, such
    as a misspelled name, are reported as warnings since loading drops them.
    """
    known = {key: value for key, value in data.items() if key in Patch.model_fields}
    patch = Patch.model_construct(**{**Patch().model_dump(), **known})
    errors = validate_patch(patch)
    for key in _unknown_keys(data):
        errors.append(
            PatchValidationError(
                "unknown_field",
                f"Unknown patch field '{key}' is ignored",
                field_name=key,
                severity="warning",
            )
        )
    return errors


def load_patch(data: str | bytes | dict[str, Any]) -> Patch:
    """Build a patch from JSON text or a mapping, clamping every value."""
    if isinstance(data, (str, bytes)):
        data = json.loads(data)
    if not isinstance(data, dict):
        raise ValueError(f"Patch data must be a JSON object, got {type(data).__name__}")
    unknown = _unknown_keys(data)
    if unknown:
        logger.warning("patch.unknown_fields", fields=unknown)
    return Patch.model_validate(data)


def dump_patch(patch: Patch, *, indent: int | None = 2) -> str:
    """Serialize a patch to JSON text."""
    return patch.model_dump_json(indent=indent)
