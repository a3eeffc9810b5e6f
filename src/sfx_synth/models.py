from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

WaveShape = Literal["square", "sawtooth", "sine", "noise", "triangle"]

# Index order matches the reference wave_type codes (0..3), triangle appended.
WAVE_SHAPES: tuple[str, ...] = ("square", "sawtooth", "sine", "noise", "triangle")


# ---------------------------------------------------------------------------
# Field ranges
# ---------------------------------------------------------------------------

FIELD_RANGES: dict[str, tuple[float, float]] = {
    # Pitch
    "base_frequency": (0.0, 1.0),
    "frequency_limit": (0.0, 1.0),
    "frequency_slide": (-1.0, 1.0),
    "delta_slide": (-1.0, 1.0),
    "vibrato_depth": (0.0, 1.0),
    "vibrato_speed": (0.0, 1.0),
    # Change / arpeggio
    "change_amount": (-1.0, 1.0),
    "change_speed": (0.0, 1.0),
    # Duty
    "duty": (0.0, 1.0),
    "duty_sweep": (-1.0, 1.0),
    # Envelope (seconds)
    "attack_time": (0.0, 1.0),
    "sustain_time": (0.0, 1.0),
    "sustain_punch": (-1.0, 1.0),
    "decay_time": (0.0, 1.0),
    # Filters
    "lowpass_cutoff": (0.0, 1.0),
    "lowpass_cutoff_sweep": (-1.0, 1.0),
    "lowpass_resonance": (0.0, 1.0),
    "highpass_cutoff": (0.0, 1.0),
    "highpass_cutoff_sweep": (-1.0, 1.0),
    # Phaser
    "phaser_offset": (-1.0, 1.0),
    "phaser_sweep": (-1.0, 1.0),
    # Repeat
    "repeat_speed": (0.0, 1.0),
    # Output
    "sample_rate": (0, 768000),
    "sample_size": (1, 32),
    "sample_hold": (1, 64),
    "master_volume": (0.0, 1.0),
}

INT_FIELDS = ("sample_rate", "sample_size", "sample_hold")
FLOAT_FIELDS = tuple(name for name in FIELD_RANGES if name not in INT_FIELDS)

# Fields that shape the sound itself; output format fields are excluded.
SYNTH_FIELDS = tuple(name for name in FLOAT_FIELDS if name != "master_volume")


def clamp(value: float, lo: float, hi: float) -> float:
    """Saturate *value* into ``[lo, hi]``."""
    return min(max(value, lo), hi)


# ---------------------------------------------------------------------------
# Patch
# ---------------------------------------------------------------------------


class Patch(BaseModel):
    """Complete set of synthesis controls describing one sound.

    Every numeric field is saturated into its range from ``FIELD_RANGES`` on
    construction and on assignment, so a ``Patch`` obtained through the
    normal constructors is always in range.
    """

    model_config = ConfigDict(validate_assignment=True)

    wave_shape: WaveShape = "square"

    base_frequency: float = 0.3
    frequency_limit: float = 0.0
    frequency_slide: float = 0.0
    delta_slide: float = 0.0
    vibrato_depth: float = 0.0
    vibrato_speed: float = 0.0

    change_amount: float = 0.0
    change_speed: float = 0.0

    duty: float = 0.0
    duty_sweep: float = 0.0

    attack_time: float = 0.0
    sustain_time: float = 0.0
    sustain_punch: float = 0.0
    decay_time: float = 0.0

    lowpass_cutoff: float = 1.0
    lowpass_cutoff_sweep: float = 0.0
    lowpass_resonance: float = 0.0
    highpass_cutoff: float = 0.0
    highpass_cutoff_sweep: float = 0.0

    phaser_offset: float = 0.0
    phaser_sweep: float = 0.0

    repeat_speed: float = 0.0

    sample_rate: int = 44100
    sample_size: int = 32  # bits; 32 leaves the signal untouched
    sample_hold: int = 1  # output samples each crushed value is held for
    master_volume: float = 0.5

    @field_validator("wave_shape", mode="before")
    @classmethod
    def _shape_from_code(cls, value: Any) -> Any:
        # Reference wave_type integer codes
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if math.isnan(value):
                return "square"
            index = int(clamp(value, 0, len(WAVE_SHAPES) - 1))
            return WAVE_SHAPES[index]
        return value

    @field_validator(*INT_FIELDS, mode="before")
    @classmethod
    def _round_int(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, float):
            if math.isnan(value):
                return cls.model_fields[info.field_name].default
            lo, hi = FIELD_RANGES[info.field_name]
            return int(round(clamp(value, lo, hi)))
        return value

    @field_validator(*INT_FIELDS, mode="after")
    @classmethod
    def _clamp_int(cls, value: int, info: ValidationInfo) -> int:
        lo, hi = FIELD_RANGES[info.field_name]
        return int(clamp(value, lo, hi))

    @field_validator(*FLOAT_FIELDS, mode="after")
    @classmethod
    def _clamp_float(cls, value: float, info: ValidationInfo) -> float:
        if math.isnan(value):
            return cls.model_fields[info.field_name].default
        lo, hi = FIELD_RANGES[info.field_name]
        return float(clamp(value, lo, hi))

    @classmethod
    def new(cls) -> Patch:
        """Return the neutral patch: square wave, no envelope, no effects."""
        return cls()

    def set(self, field: str, value: Any) -> None:
        """Assign *value* to *field*, saturating it into the field's range."""
        if field not in type(self).model_fields:
            raise ValueError(f"Unknown patch field: '{field}'")
        setattr(self, field, value)

    def copy_with(self, **changes: Any) -> Patch:
        """Return a clamped copy with *changes* applied."""
        data = self.model_dump()
        for name in changes:
            if name not in data:
                raise ValueError(f"Unknown patch field: '{name}'")
        data.update(changes)
        return type(self).model_validate(data)

    def is_valid(self) -> bool:
        """Return True if every field is inside its declared range."""
        from sfx_synth.validate import validate_patch

        return not any(e.severity == "error" for e in validate_patch(self))

    @property
    def envelope_time(self) -> float:
        return self.attack_time + self.sustain_time + self.decay_time
