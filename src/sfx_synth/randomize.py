"""Random and preset patch generation.

Every function takes an explicit seed (an ``int``, a ready
``numpy.random.Generator`` or ``None`` for seed 0) so results are
reproducible without any process-wide random state. The recipes and their
constants are those of DrPetter's sfxr generator buttons.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Union

import numpy as np
import structlog

from sfx_synth.models import SYNTH_FIELDS, WAVE_SHAPES, Patch, clamp

logger = structlog.get_logger()

Seed = Union[int, np.random.Generator, None]
Recipe = Callable[[np.random.Generator, dict[str, Any]], None]


def make_rng(seed: Seed = None) -> np.random.Generator:
    """Return a random source for *seed*; generators are passed through."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(0 if seed is None else seed)


def _frnd(rng: np.random.Generator, span: float) -> float:
    """Uniform float in ``[0, span)``."""
    return float(rng.random()) * span


def _rnd(rng: np.random.Generator, n: int) -> int:
    """Uniform integer in ``[0, n]``."""
    return int(rng.integers(0, n + 1))


def _reset_values() -> dict[str, Any]:
    # Starting point of every preset button
    return Patch(sustain_time=0.3, decay_time=0.4).model_dump()


# ---------------------------------------------------------------------------
# Fully random patch
# ---------------------------------------------------------------------------


def randomize(seed: Seed = None) -> Patch:
    """Return a fully random patch tuned to sound generically pleasant."""
    rng = make_rng(seed)
    p = Patch().model_dump()

    p["wave_shape"] = WAVE_SHAPES[_rnd(rng, 3)]
    p["base_frequency"] = (_frnd(rng, 2.0) - 1.0) ** 2
    if _rnd(rng, 1):
        p["base_frequency"] = (_frnd(rng, 2.0) - 1.0) ** 3 + 0.5
    p["frequency_limit"] = 0.0
    p["frequency_slide"] = (_frnd(rng, 2.0) - 1.0) ** 5
    if p["base_frequency"] > 0.7 and p["frequency_slide"] > 0.2:
        p["frequency_slide"] = -p["frequency_slide"]
    if p["base_frequency"] < 0.2 and p["frequency_slide"] < -0.05:
        p["frequency_slide"] = -p["frequency_slide"]
    p["delta_slide"] = (_frnd(rng, 2.0) - 1.0) ** 3
    p["duty"] = _frnd(rng, 2.0) - 1.0
    p["duty_sweep"] = (_frnd(rng, 2.0) - 1.0) ** 3
    p["vibrato_depth"] = (_frnd(rng, 2.0) - 1.0) ** 3
    p["vibrato_speed"] = _frnd(rng, 2.0) - 1.0
    p["attack_time"] = (_frnd(rng, 2.0) - 1.0) ** 3
    p["sustain_time"] = (_frnd(rng, 2.0) - 1.0) ** 2
    p["decay_time"] = _frnd(rng, 2.0) - 1.0
    p["sustain_punch"] = _frnd(rng, 0.8) ** 2
    if p["attack_time"] + p["sustain_time"] + p["decay_time"] < 0.2:
        p["sustain_time"] += 0.2 + _frnd(rng, 0.3)
        p["decay_time"] += 0.2 + _frnd(rng, 0.3)
    p["lowpass_resonance"] = _frnd(rng, 2.0) - 1.0
    p["lowpass_cutoff"] = 1.0 - _frnd(rng, 1.0) ** 3
    p["lowpass_cutoff_sweep"] = (_frnd(rng, 2.0) - 1.0) ** 3
    if p["lowpass_cutoff"] < 0.1 and p["lowpass_cutoff_sweep"] < -0.05:
        p["lowpass_cutoff_sweep"] = -p["lowpass_cutoff_sweep"]
    p["highpass_cutoff"] = _frnd(rng, 1.0) ** 5
    p["highpass_cutoff_sweep"] = (_frnd(rng, 2.0) - 1.0) ** 5
    p["phaser_offset"] = (_frnd(rng, 2.0) - 1.0) ** 3
    p["phaser_sweep"] = (_frnd(rng, 2.0) - 1.0) ** 3
    p["repeat_speed"] = _frnd(rng, 2.0) - 1.0
    p["change_speed"] = _frnd(rng, 2.0) - 1.0
    p["change_amount"] = _frnd(rng, 2.0) - 1.0

    # Negative draws saturate at the lower bound, as the sliders would
    return Patch.model_validate(p)


# ---------------------------------------------------------------------------
# Preset recipes
# ---------------------------------------------------------------------------


def _pickup(rng: np.random.Generator, p: dict[str, Any]) -> None:
    p["base_frequency"] = 0.4 + _frnd(rng, 0.5)
    p["attack_time"] = 0.0
    p["sustain_time"] = _frnd(rng, 0.1)
    p["decay_time"] = 0.1 + _frnd(rng, 0.4)
    p["sustain_punch"] = 0.3 + _frnd(rng, 0.3)
    if _rnd(rng, 1):
        p["change_speed"] = 0.5 + _frnd(rng, 0.2)
        p["change_amount"] = 0.2 + _frnd(rng, 0.4)


def _laser(rng: np.random.Generator, p: dict[str, Any]) -> None:
    shape = _rnd(rng, 2)
    if shape == 2 and _rnd(rng, 1):
        shape = _rnd(rng, 1)
    p["wave_shape"] = WAVE_SHAPES[shape]
    p["base_frequency"] = 0.5 + _frnd(rng, 0.5)
    p["frequency_limit"] = max(p["base_frequency"] - 0.2 - _frnd(rng, 0.6), 0.2)
    p["frequency_slide"] = -0.15 - _frnd(rng, 0.2)
    if _rnd(rng, 2) == 0:
        p["base_frequency"] = 0.3 + _frnd(rng, 0.6)
        p["frequency_limit"] = _frnd(rng, 0.1)
        p["frequency_slide"] = -0.35 - _frnd(rng, 0.3)
    if _rnd(rng, 1):
        p["duty"] = _frnd(rng, 0.5)
        p["duty_sweep"] = _frnd(rng, 0.2)
    else:
        p["duty"] = 0.4 + _frnd(rng, 0.5)
        p["duty_sweep"] = -_frnd(rng, 0.7)
    p["attack_time"] = 0.0
    p["sustain_time"] = 0.1 + _frnd(rng, 0.2)
    p["decay_time"] = _frnd(rng, 0.4)
    if _rnd(rng, 1):
        p["sustain_punch"] = _frnd(rng, 0.3)
    if _rnd(rng, 2) == 0:
        p["phaser_offset"] = _frnd(rng, 0.2)
        p["phaser_sweep"] = -_frnd(rng, 0.2)
    if _rnd(rng, 1):
        p["highpass_cutoff"] = _frnd(rng, 0.3)


def _explosion(rng: np.random.Generator, p: dict[str, Any]) -> None:
    p["wave_shape"] = "noise"
    if _rnd(rng, 1):
        p["base_frequency"] = 0.1 + _frnd(rng, 0.4)
        p["frequency_slide"] = -0.1 + _frnd(rng, 0.4)
    else:
        p["base_frequency"] = 0.2 + _frnd(rng, 0.7)
        p["frequency_slide"] = -0.2 - _frnd(rng, 0.2)
    p["base_frequency"] *= p["base_frequency"]
    if _rnd(rng, 4) == 0:
        p["frequency_slide"] = 0.0
    if _rnd(rng, 2) == 0:
        p["repeat_speed"] = 0.3 + _frnd(rng, 0.5)
    p["attack_time"] = 0.0
    p["sustain_time"] = 0.1 + _frnd(rng, 0.3)
    p["decay_time"] = _frnd(rng, 0.5)
    if _rnd(rng, 1) == 0:
        p["phaser_offset"] = -0.3 + _frnd(rng, 0.9)
        p["phaser_sweep"] = -_frnd(rng, 0.3)
    p["sustain_punch"] = 0.2 + _frnd(rng, 0.6)
    if _rnd(rng, 1):
        p["vibrato_depth"] = _frnd(rng, 0.7)
        p["vibrato_speed"] = _frnd(rng, 0.6)
    if _rnd(rng, 2) == 0:
        p["change_speed"] = 0.6 + _frnd(rng, 0.3)
        p["change_amount"] = 0.8 - _frnd(rng, 1.6)


def _powerup(rng: np.random.Generator, p: dict[str, Any]) -> None:
    if _rnd(rng, 1):
        p["wave_shape"] = "sawtooth"
    else:
        p["duty"] = _frnd(rng, 0.6)
    if _rnd(rng, 1):
        p["base_frequency"] = 0.2 + _frnd(rng, 0.3)
        p["frequency_slide"] = 0.1 + _frnd(rng, 0.4)
        p["repeat_speed"] = 0.4 + _frnd(rng, 0.4)
    else:
        p["base_frequency"] = 0.2 + _frnd(rng, 0.3)
        p["frequency_slide"] = 0.05 + _frnd(rng, 0.2)
        if _rnd(rng, 1):
            p["vibrato_depth"] = _frnd(rng, 0.7)
            p["vibrato_speed"] = _frnd(rng, 0.6)
    p["attack_time"] = 0.0
    p["sustain_time"] = _frnd(rng, 0.4)
    p["decay_time"] = 0.1 + _frnd(rng, 0.4)


def _hit(rng: np.random.Generator, p: dict[str, Any]) -> None:
    shape = _rnd(rng, 2)
    if shape == 2:
        shape = 3  # noise
    p["wave_shape"] = WAVE_SHAPES[shape]
    if shape == 0:
        p["duty"] = _frnd(rng, 0.6)
    p["base_frequency"] = 0.2 + _frnd(rng, 0.6)
    p["frequency_slide"] = -0.3 - _frnd(rng, 0.4)
    p["attack_time"] = 0.0
    p["sustain_time"] = _frnd(rng, 0.1)
    p["decay_time"] = 0.1 + _frnd(rng, 0.2)
    if _rnd(rng, 1):
        p["highpass_cutoff"] = _frnd(rng, 0.3)


def _jump(rng: np.random.Generator, p: dict[str, Any]) -> None:
    p["wave_shape"] = "square"
    p["duty"] = _frnd(rng, 0.6)
    p["base_frequency"] = 0.3 + _frnd(rng, 0.3)
    p["frequency_slide"] = 0.1 + _frnd(rng, 0.2)
    p["attack_time"] = 0.0
    p["sustain_time"] = 0.1 + _frnd(rng, 0.3)
    p["decay_time"] = 0.1 + _frnd(rng, 0.2)
    if _rnd(rng, 1):
        p["highpass_cutoff"] = _frnd(rng, 0.3)
    if _rnd(rng, 1):
        p["lowpass_cutoff"] = 1.0 - _frnd(rng, 0.6)


def _blip(rng: np.random.Generator, p: dict[str, Any]) -> None:
    shape = _rnd(rng, 1)
    p["wave_shape"] = WAVE_SHAPES[shape]
    if shape == 0:
        p["duty"] = _frnd(rng, 0.6)
    p["base_frequency"] = 0.2 + _frnd(rng, 0.4)
    p["attack_time"] = 0.0
    p["sustain_time"] = 0.1 + _frnd(rng, 0.1)
    p["decay_time"] = _frnd(rng, 0.2)
    p["highpass_cutoff"] = 0.1


PRESETS: dict[str, Recipe] = {
    "pickup": _pickup,
    "laser": _laser,
    "explosion": _explosion,
    "powerup": _powerup,
    "hit": _hit,
    "jump": _jump,
    "blip": _blip,
}

PRESET_ALIASES: dict[str, str] = {
    "coin": "pickup",
    "shoot": "laser",
    "hurt": "hit",
    "select": "blip",
}


def randomize_preset(category: str, seed: Seed = None) -> Patch:
    """Return a random patch from one of the preset categories.

    *category* is one of ``PRESETS`` or an alias from ``PRESET_ALIASES``
    (``coin``, ``shoot``, ``hurt``, ``select``).
    """
    name = PRESET_ALIASES.get(category, category)
    recipe = PRESETS.get(name)
    if recipe is None:
        known = ", ".join(sorted(set(PRESETS) | set(PRESET_ALIASES)))
        raise ValueError(f"Unknown preset category '{category}' (expected one of: {known})")

    rng = make_rng(seed)
    p = _reset_values()
    recipe(rng, p)
    patch = Patch.model_validate(p)
    logger.debug("randomize.preset", category=name, wave_shape=patch.wave_shape)
    return patch


def pickup(seed: Seed = None) -> Patch:
    """Coin / item pickup."""
    return randomize_preset("pickup", seed)


def laser(seed: Seed = None) -> Patch:
    """Laser / shoot."""
    return randomize_preset("laser", seed)


def explosion(seed: Seed = None) -> Patch:
    return randomize_preset("explosion", seed)


def powerup(seed: Seed = None) -> Patch:
    return randomize_preset("powerup", seed)


def hit(seed: Seed = None) -> Patch:
    """Hit / hurt."""
    return randomize_preset("hit", seed)


def jump(seed: Seed = None) -> Patch:
    return randomize_preset("jump", seed)


def blip(seed: Seed = None) -> Patch:
    """Blip / menu select."""
    return randomize_preset("blip", seed)


# ---------------------------------------------------------------------------
# Mutation
# ---------------------------------------------------------------------------


def mutate(patch: Patch, seed: Seed = None, amount: float = 0.05) -> Patch:
    """Return a copy of *patch* with every synthesis field nudged.

    Each field in ``SYNTH_FIELDS`` moves by ``uniform(-amount, amount)`` and
    is clamped back into range. ``amount`` is saturated into ``[0, 1]``; the
    default matches the reference mutate button. The wave shape and the
    output format fields (rate, bit depth, hold, volume) are never touched.
    """
    if math.isnan(amount):
        raise ValueError("mutate amount must be a number, got NaN")
    amount = clamp(amount, 0.0, 1.0)

    rng = make_rng(seed)
    deltas = rng.uniform(-amount, amount, size=len(SYNTH_FIELDS))

    data = patch.model_dump()
    for name, delta in zip(SYNTH_FIELDS, deltas):
        data[name] = data[name] + float(delta)
    return Patch.model_validate(data)
