from __future__ import annotations

import json

import pytest

from sfx_synth import (
    Patch,
    PatchValidationError,
    dump_patch,
    load_patch,
    validate_patch,
    validate_patch_data,
)

# ---------------------------------------------------------------------------
# validate_patch
# ---------------------------------------------------------------------------


class TestValidPatches:
    def test_square_patch_valid(self, square_patch: Patch) -> None:
        assert validate_patch(square_patch) == []

    def test_silent_patch_warns(self) -> None:
        errors = validate_patch(Patch())
        assert len(errors) == 1
        assert errors[0].kind == "silent"
        assert errors[0].severity == "warning"

    def test_silent_patch_still_valid(self) -> None:
        assert Patch().is_valid()

    @pytest.mark.parametrize("code", range(5))
    def test_shape_codes(self, code: int) -> None:
        p = Patch.model_construct(wave_shape=code, sustain_time=0.1)
        assert validate_patch(p) == []


class TestInvalidPatches:
    def test_out_of_range(self) -> None:
        p = Patch.model_construct(base_frequency=3.0, sustain_time=0.1)
        errors = validate_patch(p)
        assert len(errors) == 1
        assert errors[0].kind == "out_of_range"
        assert errors[0].field_name == "base_frequency"
        assert "outside" in errors[0]
        assert not p.is_valid()

    def test_not_finite(self) -> None:
        p = Patch.model_construct(duty=float("nan"), sustain_time=0.1)
        errors = validate_patch(p)
        assert [e.kind for e in errors] == ["not_finite"]

    def test_unknown_shape(self) -> None:
        p = Patch.model_construct(wave_shape="organ", sustain_time=0.1)
        errors = validate_patch(p)
        assert errors[0].kind == "unknown_shape"
        assert errors[0].field_name == "wave_shape"

    def test_shape_code_out_of_range(self) -> None:
        p = Patch.model_construct(wave_shape=7, sustain_time=0.1)
        errors = validate_patch(p)
        assert [e.kind for e in errors] == ["out_of_range"]
        assert errors[0].field_name == "wave_shape"

    def test_fractional_int_field(self) -> None:
        p = Patch.model_construct(sample_rate=44100.5, sustain_time=0.1)
        errors = validate_patch(p)
        assert [e.kind for e in errors] == ["bad_type"]

    def test_non_numeric(self) -> None:
        p = Patch.model_construct(decay_time="long", sustain_time=0.1)
        errors = validate_patch(p)
        assert errors[0].kind == "bad_type"
        assert errors[0].field_name == "decay_time"

    def test_multiple_errors(self) -> None:
        p = Patch.model_construct(duty=2.0, phaser_offset=-2.0, sustain_time=0.1)
        fields = {e.field_name for e in validate_patch(p)}
        assert fields == {"duty", "phaser_offset"}

    def test_no_silent_warning_with_errors(self) -> None:
        p = Patch.model_construct(duty=2.0)
        assert all(e.severity == "error" for e in validate_patch(p))


class TestPatchData:
    def test_valid_data(self) -> None:
        assert validate_patch_data({"wave_shape": "sine", "sustain_time": 0.2}) == []

    def test_not_clamped(self) -> None:
        errors = validate_patch_data({"duty": 1.5, "sustain_time": 0.2})
        assert [e.kind for e in errors] == ["out_of_range"]

    def test_shape_code(self) -> None:
        assert validate_patch_data({"wave_shape": 2, "sustain_time": 0.2}) == []

    def test_unknown_key_warns(self) -> None:
        errors = validate_patch_data({"sustain_tme": 0.2, "decay_time": 0.1})
        assert len(errors) == 1
        assert errors[0].kind == "unknown_field"
        assert errors[0].field_name == "sustain_tme"
        assert errors[0].severity == "warning"

    def test_unknown_key_with_errors(self) -> None:
        kinds = {e.kind for e in validate_patch_data({"duty": 3.0, "volume": 1.0})}
        assert kinds == {"out_of_range", "unknown_field"}


class TestErrorType:
    def test_is_str(self) -> None:
        err = PatchValidationError("out_of_range", "bad value", field_name="duty")
        assert isinstance(err, str)
        assert err == "bad value"
        assert err.kind == "out_of_range"
        assert err.field_name == "duty"
        assert err.severity == "error"

    def test_join(self) -> None:
        errs = [PatchValidationError("a", "one"), PatchValidationError("b", "two")]
        assert "; ".join(errs) == "one; two"


# ---------------------------------------------------------------------------
# Loading and dumping
# ---------------------------------------------------------------------------


class TestLoadPatch:
    def test_from_text_clamps(self) -> None:
        p = load_patch('{"base_frequency": 5, "decay_time": -1}')
        assert p.base_frequency == 1.0
        assert p.decay_time == 0.0

    def test_from_dict(self) -> None:
        p = load_patch({"wave_shape": "sine", "sustain_time": 0.3})
        assert p.wave_shape == "sine"
        assert p.sustain_time == 0.3

    def test_from_bytes(self) -> None:
        assert load_patch(b'{"duty": 0.25}').duty == 0.25

    def test_missing_fields_default(self) -> None:
        assert load_patch("{}") == Patch()

    def test_shape_code_loads(self) -> None:
        assert load_patch('{"wave_shape": 2}').wave_shape == "sine"

    def test_unknown_key_dropped(self) -> None:
        p = load_patch({"sustain_tme": 0.2, "decay_time": 0.1})
        assert p == Patch(decay_time=0.1)

    def test_not_object(self) -> None:
        with pytest.raises(ValueError, match="JSON object"):
            load_patch("[1, 2]")

    def test_bad_json(self) -> None:
        with pytest.raises(json.JSONDecodeError):
            load_patch("{bad")

    def test_roundtrip(self, short_patch: Patch) -> None:
        assert load_patch(dump_patch(short_patch)) == short_patch

    def test_dump_compact(self, square_patch: Patch) -> None:
        text = dump_patch(square_patch, indent=None)
        assert "\n" not in text
        assert json.loads(text)["sustain_time"] == 0.2
