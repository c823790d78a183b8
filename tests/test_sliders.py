import pytest

from finalsay.style.sliders import (
    CONTENT_SLIDERS,
    StyleCompiler,
    ToneSliders,
    bucket_units,
    clamp_slider,
    directive_for,
    sampling_temperature,
)


@pytest.mark.parametrize(
    "raw,expected",
    [(-20, 0.0), (150, 100.0), ("abc", 0.0), (None, 0.0), (True, 0.0), (float("nan"), 0.0), ("75", 75.0), (42, 42.0)],
)
def test_clamp_slider(raw, expected):
    assert clamp_slider(raw) == expected


def test_out_of_range_values_are_clamped_before_thresholds():
    sliders = ToneSliders.from_mapping({"heat": 500, "humor": -30, "roast": "lots"})
    assert sliders.heat == 100
    assert sliders.humor == 0
    assert sliders.roast == 0
    assert directive_for("heat", sliders.heat).level == "high"
    assert directive_for("humor", sliders.humor).level == "low"


def test_missing_sliders_default_to_neutral():
    sliders = ToneSliders.from_mapping({"heat": 80, "unknown": 3})
    assert sliders.heat == 80
    assert sliders.formality == 50
    assert sliders.length == 50


def test_every_content_slider_emits_one_directive_in_order():
    style = StyleCompiler().compile(ToneSliders())
    assert [d.slider for d in style.directives] == list(CONTENT_SLIDERS)
    assert all(d.level == "neutral" for d in style.directives)
    assert "length" not in [d.slider for d in style.directives]


def test_thresholds_are_strict():
    assert directive_for("formality", 39.9).level == "low"
    assert directive_for("formality", 40).level == "neutral"
    assert directive_for("formality", 60).level == "neutral"
    assert directive_for("formality", 60.5).level == "high"


@pytest.mark.parametrize("length,paragraphs,sentences", [(0, 1, 2), (29, 1, 2), (30, 3, 4), (59, 3, 4), (60, 5, 6), (79, 5, 6), (80, 6, 8), (100, 6, 8)])
def test_length_buckets(length, paragraphs, sentences):
    assert bucket_units(length, "paragraph") == paragraphs
    assert bucket_units(length, "sentence") == sentences


def test_temperature_rules():
    assert sampling_temperature(ToneSliders(length=71)) == 0.95
    assert sampling_temperature(ToneSliders(humor=61)) == 0.95
    assert sampling_temperature(ToneSliders(roast=90, heat=90)) == 0.95
    assert sampling_temperature(ToneSliders(heat=61)) == 0.9
    assert sampling_temperature(ToneSliders()) == 0.7


def test_max_tokens_uses_mode_base():
    params = StyleCompiler(base_tokens=600).compile(ToneSliders(length=37.6)).params
    assert params.max_tokens == 600 + 75


def test_compile_is_deterministic():
    sliders = ToneSliders.from_mapping({"politics": 10, "heat": 90, "length": 85})
    compiler = StyleCompiler(unit="sentence", base_tokens=700)
    assert compiler.compile(sliders) == compiler.compile(sliders)


def test_unknown_unit_is_rejected():
    with pytest.raises(ValueError):
        StyleCompiler(unit="words")
