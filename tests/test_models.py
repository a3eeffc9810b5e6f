from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from sfx_synth import FIELD_RANGES, WAVE_SHAPES, Patch

# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_new_is_default(self) -> None:
        assert Patch.new() == Patch()

    def test_default_is_silent(self) -> None:
        p = Patch()
        assert p.attack_time == 0.0
        assert p.sustain_time == 0.0
        assert p.decay_time == 0.0
        assert p.envelope_time == 0.0

    def test_default_effects_neutral(self) -> None:
        p = Patch()
        assert p.lowpass_cutoff == 1.0
        assert p.highpass_cutoff == 0.0
        assert p.phaser_offset == 0.0
        assert p.sample_size == 32
        assert p.sample_hold == 1

    def test_default_output(self) -> None:
        p = Patch()
        assert p.wave_shape == "square"
        assert p.sample_rate == 44100
        assert p.master_volume == 0.5

    def test_default_valid(self) -> None:
        assert Patch().is_valid()


class TestConstructionClamps:
    def test_above_range(self) -> None:
        assert Patch(base_frequency=2.0).base_frequency == 1.0

    def test_below_range(self) -> None:
        assert Patch(frequency_slide=-3.0).frequency_slide == -1.0

    def test_negative_unit_field(self) -> None:
        assert Patch(attack_time=-0.5).attack_time == 0.0

    def test_nan_becomes_default(self) -> None:
        assert Patch(lowpass_cutoff=float("nan")).lowpass_cutoff == 1.0
        assert Patch(duty=float("nan")).duty == 0.0

    def test_infinity_saturates(self) -> None:
        assert Patch(decay_time=math.inf).decay_time == 1.0
        assert Patch(phaser_sweep=-math.inf).phaser_sweep == -1.0

    def test_in_range_untouched(self) -> None:
        assert Patch(sustain_punch=-0.25).sustain_punch == -0.25


class TestIntFields:
    def test_sample_rate_negative(self) -> None:
        assert Patch(sample_rate=-10).sample_rate == 0

    def test_sample_size_above(self) -> None:
        assert Patch(sample_size=64).sample_size == 32

    def test_sample_size_below(self) -> None:
        assert Patch(sample_size=0).sample_size == 1

    def test_float_rounds(self) -> None:
        assert Patch(sample_hold=2.6).sample_hold == 3

    def test_float_infinity(self) -> None:
        assert Patch(sample_rate=math.inf).sample_rate == 768000

    def test_float_nan(self) -> None:
        assert Patch(sample_rate=float("nan")).sample_rate == 44100


class TestWaveShape:
    @pytest.mark.parametrize("shape", WAVE_SHAPES)
    def test_names(self, shape: str) -> None:
        assert Patch(wave_shape=shape).wave_shape == shape

    def test_reference_codes(self) -> None:
        assert Patch(wave_shape=0).wave_shape == "square"
        assert Patch(wave_shape=1).wave_shape == "sawtooth"
        assert Patch(wave_shape=2).wave_shape == "sine"
        assert Patch(wave_shape=3).wave_shape == "noise"

    def test_code_clamped(self) -> None:
        assert Patch(wave_shape=9).wave_shape == "triangle"
        assert Patch(wave_shape=-2).wave_shape == "square"

    def test_unknown_name(self) -> None:
        with pytest.raises(ValidationError):
            Patch(wave_shape="organ")


# ---------------------------------------------------------------------------
# Mutation in place
# ---------------------------------------------------------------------------


class TestSet:
    def test_set_stores(self) -> None:
        p = Patch()
        p.set("vibrato_depth", 0.4)
        assert p.vibrato_depth == 0.4

    def test_set_clamps(self) -> None:
        p = Patch()
        p.set("frequency_slide", -5)
        assert p.frequency_slide == -1.0

    def test_assignment_clamps(self) -> None:
        p = Patch()
        p.master_volume = 7.0
        assert p.master_volume == 1.0

    def test_set_shape(self) -> None:
        p = Patch()
        p.set("wave_shape", "noise")
        assert p.wave_shape == "noise"

    def test_set_unknown_field(self) -> None:
        with pytest.raises(ValueError, match="Unknown patch field"):
            Patch().set("volume", 1.0)

    @pytest.mark.parametrize("field", sorted(FIELD_RANGES))
    def test_clamping_invariant(self, field: str) -> None:
        lo, hi = FIELD_RANGES[field]
        p = Patch()
        for value in (-1e9, -1.5, -1.0, -0.3, 0.0, 0.5, 1.0, 1.5, 1e9, math.inf, -math.inf):
            p.set(field, value)
            stored = getattr(p, field)
            assert lo <= stored <= hi
            assert p.is_valid()


class TestCopyWith:
    def test_returns_new(self) -> None:
        p = Patch()
        q = p.copy_with(sustain_time=0.3)
        assert q.sustain_time == 0.3
        assert p.sustain_time == 0.0

    def test_clamps(self) -> None:
        assert Patch().copy_with(duty=4.0).duty == 1.0

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            Patch().copy_with(nope=1.0)


class TestSerialization:
    def test_json_roundtrip(self) -> None:
        p = Patch(wave_shape="sine", base_frequency=0.55, decay_time=0.25, sample_size=8)
        assert Patch.model_validate_json(p.model_dump_json()) == p

    def test_dump_has_all_fields(self) -> None:
        data = Patch().model_dump()
        assert set(data) == set(FIELD_RANGES) | {"wave_shape"}
