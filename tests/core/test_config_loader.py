"""Tests for settings loading."""

import pytest

from meshforge.constants import EMBOSS_DEFAULT_RATIO, UV_SPLIT_SEPARATOR
from meshforge.core.config_loader import get_setting, load_settings


def test_packaged_defaults_load():
    settings = load_settings()
    assert settings["emboss_ratio"] == EMBOSS_DEFAULT_RATIO
    assert settings["uv_split_separator"] == UV_SPLIT_SEPARATOR
    assert settings["uv_image_line_color"] == [0, 255, 0, 255]


def test_get_setting_fallback():
    assert get_setting("no_such_key", 42) == 42
    assert get_setting("uv_image_size") == 512


def test_load_settings_from_path(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text('{"emboss_ratio": 0.5}')
    assert load_settings(path) == {"emboss_ratio": 0.5}
    assert load_settings(str(path))["emboss_ratio"] == 0.5


def test_load_settings_rejects_non_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError, match="JSON object"):
        load_settings(path)
