"""Tests for the style catalog."""

import dataclasses

import pytest

from headshot_studio import styles
from headshot_studio.styles import EDGE_KERNEL, STYLE_KEYS, lookup


class TestLookup:
    @pytest.mark.parametrize("key", ["corporate", "creative", "executive"])
    def test_known_keys(self, key):
        assert lookup(key).key == key

    def test_bogus_key_returns_corporate(self):
        assert lookup("bogus") is lookup("corporate")

    @pytest.mark.parametrize("key", [None, "", "   "])
    def test_empty_key_returns_corporate(self, key):
        assert lookup(key).key == "corporate"

    def test_key_is_trimmed_and_case_folded(self):
        assert lookup("  Executive ").key == "executive"

    def test_style_keys(self):
        assert STYLE_KEYS == ("corporate", "creative", "executive")


class TestProfiles:
    def test_corporate_params(self):
        local = lookup("corporate").local
        assert local.brightness == 1.08
        assert local.saturation == 0.98
        assert local.hue == 0
        assert local.normalize is True
        assert local.greyscale is False
        assert local.kernel is None
        assert local.quality == 95
        assert "neutral studio background" in lookup("corporate").directive.lower()

    def test_creative_params(self):
        local = lookup("creative").local
        assert (local.brightness, local.saturation, local.hue) == (1.15, 1.2, 8)
        assert local.normalize is False
        assert local.quality == 92
        assert "bokeh" in lookup("creative").directive

    def test_executive_params(self):
        local = lookup("executive").local
        assert local.greyscale is True
        assert local.saturation == 0.0
        assert local.gamma == 1.3
        assert local.kernel == EDGE_KERNEL
        assert local.sharpen.sigma > lookup("corporate").local.sharpen.sigma
        assert "black and white" in lookup("executive").directive

    def test_profiles_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            lookup("corporate").local.brightness = 2.0
        with pytest.raises(TypeError):
            styles.STYLES["corporate"] = None
