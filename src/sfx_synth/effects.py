"""Post-processing stages: filters, phaser and crusher.

Filters and the phaser run once per oscillator sub-sample; their sweeps and
the crusher run once per output sample. Each stage is a pass-through when
its controls sit at their neutral values.
"""

from __future__ import annotations

from sfx_synth.models import Patch

PHASER_BUFFER_SIZE = 1024
_PHASER_MASK = PHASER_BUFFER_SIZE - 1
MAX_SAMPLE_SIZE = 32


class LowPass:
    """Resonant two-tap low-pass filter with a swept cutoff."""

    def __init__(self, cutoff: float, sweep: float, resonance: float) -> None:
        self.bypass = cutoff >= 1.0
        self.w = cutoff**3 * 0.1
        self.w_d = 1.0 + sweep * 0.0001
        self.damp = min(5.0 / (1.0 + resonance**2 * 20.0) * (0.01 + self.w), 0.8)
        self.pos = 0.0
        self.vel = 0.0

    @classmethod
    def from_patch(cls, patch: Patch) -> LowPass:
        return cls(patch.lowpass_cutoff, patch.lowpass_cutoff_sweep, patch.lowpass_resonance)

    def step(self, x: float) -> float:
        self.w = min(max(self.w * self.w_d, 0.0), 0.1)
        if self.bypass:
            self.pos = x
            self.vel = 0.0
        else:
            self.vel += (x - self.pos) * self.w
            self.vel -= self.vel * self.damp
        self.pos += self.vel
        return self.pos


class HighPass:
    """One-tap high-pass filter with a cutoff swept once per output sample."""

    def __init__(self, cutoff: float, sweep: float) -> None:
        self.bypass = cutoff == 0.0 and sweep == 0.0
        self.hp = cutoff**2 * 0.1
        self.hp_d = 1.0 + sweep * 0.0003
        self.prev = 0.0
        self.out = 0.0

    @classmethod
    def from_patch(cls, patch: Patch) -> HighPass:
        return cls(patch.highpass_cutoff, patch.highpass_cutoff_sweep)

    def sweep(self) -> None:
        self.hp = min(max(self.hp * self.hp_d, 0.00001), 0.1)

    def step(self, x: float) -> float:
        if self.bypass:
            return x
        self.out += x - self.prev
        self.out -= self.out * self.hp
        self.prev = x
        return self.out


class Phaser:
    """Swept delay line mixed back into its input (comb filter).

    The dry and delayed signals are averaged, so a zero offset returns the
    input unchanged.
    """

    def __init__(self, offset: float, sweep: float) -> None:
        self.fphase = offset**2 * 1020.0
        if offset < 0.0:
            self.fphase = -self.fphase
        self.fdphase = sweep**2 * 1.0
        if sweep < 0.0:
            self.fdphase = -self.fdphase
        self.bypass = self.fphase == 0.0 and self.fdphase == 0.0
        self.offset = min(abs(int(self.fphase)), _PHASER_MASK)
        self.buffer = [0.0] * PHASER_BUFFER_SIZE
        self.ipp = 0

    @classmethod
    def from_patch(cls, patch: Patch) -> Phaser:
        return cls(patch.phaser_offset, patch.phaser_sweep)

    def sweep(self) -> None:
        self.fphase += self.fdphase
        self.offset = min(abs(int(self.fphase)), _PHASER_MASK)

    def step(self, x: float) -> float:
        if self.bypass:
            return x
        ipp = self.ipp
        self.buffer[ipp] = x
        delayed = self.buffer[(ipp - self.offset) & _PHASER_MASK]
        self.ipp = (ipp + 1) & _PHASER_MASK
        return (x + delayed) * 0.5


class Crusher:
    """Amplitude quantizer with an optional sample-and-hold."""

    def __init__(self, sample_size: int, hold: int) -> None:
        self.quantize = sample_size < MAX_SAMPLE_SIZE
        self.levels = float(2 ** (sample_size - 1))
        self.hold = hold
        self.count = 0
        self.value = 0.0

    @classmethod
    def from_patch(cls, patch: Patch) -> Crusher:
        return cls(patch.sample_size, patch.sample_hold)

    @property
    def bypass(self) -> bool:
        return not self.quantize and self.hold <= 1

    def step(self, x: float) -> float:
        if self.quantize:
            x = round(x * self.levels) / self.levels
        if self.hold <= 1:
            return x
        if self.count == 0:
            self.value = x
        self.count = (self.count + 1) % self.hold
        return self.value
