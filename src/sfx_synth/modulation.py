"""Per-sample control state: amplitude envelope and pitch modulation."""

from __future__ import annotations

import math
from enum import IntEnum

import numpy as np

from sfx_synth.models import Patch
from sfx_synth.oscillator import MIN_PERIOD

# Rate the reference pitch and timing constants were tuned for.
REFERENCE_RATE = 44100


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------


class EnvelopeStage(IntEnum):
    ATTACK = 0
    SUSTAIN = 1
    DECAY = 2
    FINISHED = 3


def stage_length(seconds: float, sample_rate: int) -> int:
    """Number of output samples a stage of *seconds* lasts."""
    return int(round(seconds * sample_rate))


class Envelope:
    """Attack / sustain / decay amplitude envelope.

    Zero-length stages are skipped, so the envelope produces exactly
    ``attack + sustain + decay`` samples before reaching ``FINISHED``.
    """

    def __init__(
        self, attack: float, sustain: float, decay: float, punch: float, sample_rate: int
    ) -> None:
        self.lengths = (
            stage_length(attack, sample_rate),
            stage_length(sustain, sample_rate),
            stage_length(decay, sample_rate),
        )
        self.punch = punch
        self.reset()

    @classmethod
    def from_patch(cls, patch: Patch) -> Envelope:
        return cls(
            patch.attack_time,
            patch.sustain_time,
            patch.decay_time,
            patch.sustain_punch,
            patch.sample_rate,
        )

    def reset(self) -> None:
        self.stage = EnvelopeStage.ATTACK
        self.time = 0
        self.volume = 0.0
        self._skip_empty()

    @property
    def total_length(self) -> int:
        return sum(self.lengths)

    @property
    def finished(self) -> bool:
        return self.stage == EnvelopeStage.FINISHED

    def _skip_empty(self) -> None:
        while self.stage != EnvelopeStage.FINISHED and self.lengths[self.stage] == 0:
            self.stage = EnvelopeStage(self.stage + 1)

    def step(self) -> float:
        """Return the amplitude for the current sample, then advance."""
        if self.stage == EnvelopeStage.FINISHED:
            self.volume = 0.0
            return 0.0

        length = self.lengths[self.stage]
        t = self.time / length
        if self.stage == EnvelopeStage.ATTACK:
            volume = t
        elif self.stage == EnvelopeStage.SUSTAIN:
            volume = 1.0 + (1.0 - t) * 2.0 * self.punch
        else:
            volume = 1.0 - t

        self.time += 1
        if self.time >= length:
            self.time = 0
            self.stage = EnvelopeStage(self.stage + 1)
            self._skip_empty()

        self.volume = volume
        return volume


# ---------------------------------------------------------------------------
# Pitch
# ---------------------------------------------------------------------------


def _cycle_limit(speed: float, scale: float) -> int:
    # Shared timing curve of the change (arpeggio) and repeat controls, in
    # single precision so speeds such as 0.9 truncate to the reference count
    d = np.float32(1.0) - np.float32(speed)
    return int((d * d * np.float32(20000.0) + np.float32(32.0)) * np.float32(scale))


class Pitch:
    """Period, slide, vibrato, pitch change, duty sweep and repeat.

    Periods are expressed in oscillator sub-samples. ``step`` is called once
    per output sample and returns False once the frequency has slid below
    ``frequency_limit``.
    """

    def __init__(self, patch: Patch) -> None:
        self.patch = patch
        self.scale = patch.sample_rate / REFERENCE_RATE

        self.vib_speed = patch.vibrato_speed**2 * 0.01
        self.vib_amp = patch.vibrato_depth * 0.5

        self.rep_time = 0
        self.rep_limit = _cycle_limit(patch.repeat_speed, self.scale)
        if patch.repeat_speed == 0.0:
            self.rep_limit = 0

        self.restart()

    def restart(self) -> None:
        """Rebuild the pitch state from the patch, leaving the repeat timer alone."""
        p = self.patch
        self.fperiod = 100.0 / (p.base_frequency**2 + 0.001) * self.scale
        self.fmaxperiod = 100.0 / (p.frequency_limit**2 + 0.001) * self.scale
        self.fslide = 1.0 - p.frequency_slide**3 * 0.01
        self.fdslide = -(p.delta_slide**3) * 0.000001
        self.period = max(int(self.fperiod), MIN_PERIOD)
        self.vib_phase = 0.0

        self.duty = 0.5 - p.duty * 0.5
        self.duty_slide = -p.duty_sweep * 0.00005

        if p.change_amount >= 0.0:
            self.change_mod = 1.0 - p.change_amount**2 * 0.9
        else:
            self.change_mod = 1.0 + p.change_amount**2 * 10.0
        self.change_time = 0
        self.change_limit = _cycle_limit(p.change_speed, self.scale)
        if p.change_speed == 1.0:
            self.change_limit = 0

    def step(self) -> bool:
        self.rep_time += 1
        if self.rep_limit != 0 and self.rep_time >= self.rep_limit:
            self.rep_time = 0
            self.restart()

        # One-shot pitch change
        self.change_time += 1
        if self.change_limit != 0 and self.change_time >= self.change_limit:
            self.change_limit = 0
            self.fperiod *= self.change_mod

        # Slide
        audible = True
        self.fslide += self.fdslide
        self.fperiod *= self.fslide
        if self.fperiod > self.fmaxperiod:
            self.fperiod = self.fmaxperiod
            if self.patch.frequency_limit > 0.0:
                audible = False

        # Vibrato
        rfperiod = self.fperiod
        if self.vib_amp > 0.0:
            self.vib_phase += self.vib_speed
            rfperiod = self.fperiod * (1.0 + math.sin(self.vib_phase) * self.vib_amp)
        # A slide driven negative by delta_slide leaves the period non-positive
        self.period = int(rfperiod) if rfperiod > MIN_PERIOD else MIN_PERIOD

        # Duty sweep
        self.duty = min(max(self.duty + self.duty_slide, 0.0), 0.5)

        return audible
