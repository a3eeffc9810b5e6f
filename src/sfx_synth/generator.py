"""Sample generator: runs one patch through every stage, one tick at a time."""

from __future__ import annotations

from typing import Iterator

import numpy as np
import structlog

from sfx_synth.effects import Crusher, HighPass, LowPass, Phaser
from sfx_synth.models import Patch
from sfx_synth.modulation import Envelope, Pitch
from sfx_synth.oscillator import Oscillator
from sfx_synth.randomize import Seed, make_rng

logger = structlog.get_logger()

SUPERSAMPLING = 8


class Generator:
    """Owns the synthesis state for one rendering of one patch.

    The patch is copied on construction, so later changes to the caller's
    patch do not affect a running generator. ``seed`` drives the noise
    table; the same patch and seed always render the same samples. A
    ``numpy.random.Generator`` seed is drawn from once, so ``reset`` replays
    the same noise.

    Samples can be pulled one at a time (``next_sample`` or iteration),
    pushed into a buffer (``generate``) or rendered in one go
    (``render_all``).
    """

    def __init__(self, patch: Patch, *, seed: Seed = None) -> None:
        if patch.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {patch.sample_rate}")
        self.patch = patch.model_copy()
        if isinstance(seed, np.random.Generator):
            seed = int(seed.integers(0, 2**63 - 1))
        self.seed = seed
        self.reset()

    def reset(self) -> None:
        """Rebuild all state so the sound renders again from the start."""
        p = self.patch
        self.envelope = Envelope.from_patch(p)
        self.pitch = Pitch(p)
        self.oscillator = Oscillator(p.wave_shape, make_rng(self.seed))
        self.lowpass = LowPass.from_patch(p)
        self.highpass = HighPass.from_patch(p)
        self.phaser = Phaser.from_patch(p)
        self.crusher = Crusher.from_patch(p)
        self.position = 0
        self._finished = self.envelope.finished
        logger.debug(
            "generator.start",
            wave_shape=p.wave_shape,
            sample_rate=p.sample_rate,
            length=self.envelope.total_length,
        )

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def length(self) -> int:
        """Envelope length in samples; early termination can make the sound shorter."""
        return self.envelope.total_length

    def next_sample(self) -> float | None:
        """Advance one tick and return the next sample, or None when done."""
        if self._finished:
            return None

        audible = self.pitch.step()
        volume = self.envelope.step()
        self.phaser.sweep()
        self.highpass.sweep()

        period = self.pitch.period
        duty = self.pitch.duty
        osc = self.oscillator.step
        lowpass = self.lowpass.step
        highpass = self.highpass.step
        phaser = self.phaser.step

        acc = 0.0
        for _ in range(SUPERSAMPLING):
            acc += phaser(highpass(lowpass(osc(period, duty)))) * volume
        # The phaser halves its mix; doubling here restores the reference gain.
        sample = acc / SUPERSAMPLING * 2.0

        # Crushed at full scale, before the master volume
        sample = self.crusher.step(sample)
        sample = sample * self.patch.master_volume
        sample = min(max(sample, -1.0), 1.0)

        self.position += 1
        if not audible:
            logger.debug("generator.frequency_floor", position=self.position)
            self._finish()
        elif self.envelope.finished:
            self._finish()
        return sample

    def _finish(self) -> None:
        self._finished = True
        logger.debug("generator.finished", samples=self.position)

    def __iter__(self) -> Iterator[float]:
        return self

    def __next__(self) -> float:
        sample = self.next_sample()
        if sample is None:
            raise StopIteration
        return sample

    def generate(self, buffer: np.ndarray) -> int:
        """Fill *buffer* with the next samples and return how many were written.

        Slots past the end of the sound are zeroed. Successive calls continue
        where the previous one stopped.
        """
        n = 0
        size = len(buffer)
        while n < size:
            sample = self.next_sample()
            if sample is None:
                break
            buffer[n] = sample
            n += 1
        buffer[n:] = 0.0
        return n

    def render_all(self) -> np.ndarray:
        """Drain the remaining samples into a float32 array.

        A drained generator returns an empty array; call ``reset`` (or start a
        new generator) to render the sound again.
        """
        out = np.zeros(max(self.length - self.position, 0), dtype=np.float32)
        n = self.generate(out)
        return out[:n]


def start(patch: Patch, *, seed: Seed = None) -> Generator:
    """Create a generator for *patch*; raises ValueError if its sample rate is not positive."""
    return Generator(patch, seed=seed)


def render(patch: Patch, *, seed: Seed = None) -> np.ndarray:
    """Render *patch* from start to finish."""
    return Generator(patch, seed=seed).render_all()
