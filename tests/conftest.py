from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from sfx_synth import Patch, dump_patch


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo CLI logging config so later tests don't write to a closed captured stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def square_patch() -> Patch:
    """Plain square wave held for 0.2 s, no sweeps or effects."""
    return Patch(wave_shape="square", base_frequency=0.3, sustain_time=0.2)


@pytest.fixture
def short_patch() -> Patch:
    """Short sawtooth with a full envelope, punch and a pitch slide at a low rate."""
    return Patch(
        wave_shape="sawtooth",
        base_frequency=0.4,
        frequency_slide=0.2,
        attack_time=0.01,
        sustain_time=0.02,
        sustain_punch=0.3,
        decay_time=0.03,
        sample_rate=22050,
    )


@pytest.fixture
def patch_json(tmp_path: Path, square_patch: Patch) -> Path:
    """Write the square patch as JSON and return its path."""
    p = tmp_path / "patch.json"
    p.write_text(dump_patch(square_patch))
    return p
