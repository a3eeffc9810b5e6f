"""Raw waveform generation."""

from __future__ import annotations

import math

import numpy as np

NOISE_TABLE_SIZE = 32
MIN_PERIOD = 8  # sub-samples


# ---------------------------------------------------------------------------
# Waveform math (fp = phase fraction in [0, 1))
# ---------------------------------------------------------------------------


def square(fp: float, duty: float) -> float:
    return 0.5 if fp < duty else -0.5


def sawtooth(fp: float) -> float:
    return 1.0 - fp * 2.0


def sine(fp: float) -> float:
    return math.sin(fp * 2.0 * math.pi)


def triangle(fp: float) -> float:
    return abs(1.0 - fp * 2.0) * 2.0 - 1.0


def noise_table(rng: np.random.Generator) -> list[float]:
    """Draw a fresh table of uniform noise values in ``[-1, 1)``."""
    return rng.uniform(-1.0, 1.0, NOISE_TABLE_SIZE).tolist()


# ---------------------------------------------------------------------------
# Phase accumulator
# ---------------------------------------------------------------------------


class Oscillator:
    """Integer sub-sample phase accumulator feeding one waveform.

    The period (in sub-samples) and square duty are supplied on every step
    by the modulation stage. Noise reads from a 32-entry table that is only
    redrawn when the phase wraps, giving one noise "cycle" per period.
    """

    def __init__(self, shape: str, rng: np.random.Generator) -> None:
        self.shape = shape
        self.rng = rng
        self.phase = 0
        self.noise = noise_table(rng)

    def reset(self) -> None:
        self.phase = 0
        self.noise = noise_table(self.rng)

    def step(self, period: int, duty: float) -> float:
        """Advance one sub-sample and return the raw waveform value."""
        phase = self.phase + 1
        if phase >= period:
            phase %= period
            if self.shape == "noise":
                self.noise = noise_table(self.rng)
        self.phase = phase

        shape = self.shape
        if shape == "noise":
            return self.noise[phase * NOISE_TABLE_SIZE // period]
        fp = phase / period
        if shape == "square":
            return square(fp, duty)
        if shape == "sawtooth":
            return sawtooth(fp)
        if shape == "sine":
            return sine(fp)
        return triangle(fp)
