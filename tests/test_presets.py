"""Tests for the preset registry."""

import pytest

from batchconv.presets import DEFAULT_PRESETS, Preset, PresetRegistry, UnknownPresetError


def test_default_preset_names_in_order():
    assert DEFAULT_PRESETS.names() == ["conv0_5", "conv0_25s", "conv256s", "web_h264", "extract_audio"]


def test_extract_audio_preset():
    preset = DEFAULT_PRESETS.lookup("extract_audio")
    assert preset.args == ("-vn", "-c:a", "libmp3lame", "-q:a", "2")
    assert preset.output_extension == ".mp3"


def test_web_preset_uses_faststart():
    args = DEFAULT_PRESETS.require("web_h264").args
    assert args[args.index("-movflags") + 1] == "+faststart"


def test_every_preset_extension_has_leading_dot():
    assert all(p.output_extension.startswith(".") for p in DEFAULT_PRESETS)


def test_lookup_unknown_returns_none():
    assert DEFAULT_PRESETS.lookup("nope") is None
    assert "nope" not in DEFAULT_PRESETS


def test_require_unknown_lists_available():
    with pytest.raises(UnknownPresetError) as excinfo:
        DEFAULT_PRESETS.require("nope")
    assert excinfo.value.name == "nope"
    assert excinfo.value.available == DEFAULT_PRESETS.names()
    for name in DEFAULT_PRESETS.names():
        assert name in str(excinfo.value)


def test_duplicate_names_rejected():
    with pytest.raises(ValueError):
        PresetRegistry([Preset("a", (), ".mp4"), Preset("a", (), ".mkv")])
