"""sfx-synth: procedural game sound effects in the style of sfxr."""

from sfx_synth.effects import Crusher, HighPass, LowPass, Phaser
from sfx_synth.generator import SUPERSAMPLING, Generator, render, start
from sfx_synth.models import FIELD_RANGES, WAVE_SHAPES, Patch, WaveShape, clamp
from sfx_synth.modulation import REFERENCE_RATE, Envelope, EnvelopeStage, Pitch
from sfx_synth.oscillator import Oscillator
from sfx_synth.randomize import (
    PRESET_ALIASES,
    PRESETS,
    blip,
    explosion,
    hit,
    jump,
    laser,
    make_rng,
    mutate,
    pickup,
    powerup,
    randomize,
    randomize_preset,
)
from sfx_synth.validate import (
    PatchValidationError,
    dump_patch,
    load_patch,
    validate_patch,
    validate_patch_data,
)

__all__ = [
    "FIELD_RANGES",
    "PRESETS",
    "PRESET_ALIASES",
    "REFERENCE_RATE",
    "SUPERSAMPLING",
    "WAVE_SHAPES",
    "Crusher",
    "Envelope",
    "EnvelopeStage",
    "Generator",
    "HighPass",
    "LowPass",
    "Oscillator",
    "Patch",
    "PatchValidationError",
    "Phaser",
    "Pitch",
    "WaveShape",
    "blip",
    "clamp",
    "dump_patch",
    "explosion",
    "hit",
    "jump",
    "laser",
    "load_patch",
    "make_rng",
    "mutate",
    "pickup",
    "powerup",
    "randomize",
    "randomize_preset",
    "render",
    "start",
    "validate_patch",
    "validate_patch_data",
]
