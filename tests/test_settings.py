"""Unit tests for environment-driven settings."""

from unittest.mock import patch

import pytest

from pricing_engine.config import (
    get_app_name,
    get_app_version,
    get_default_precision,
    get_default_profile_name,
)


class TestPrecision:
    """PRICING_PRECISION handling."""

    def test_default(self):
        with patch.dict("os.environ", {}, clear=True):
            assert get_default_precision() == 2

    def test_from_environment(self):
        with patch.dict("os.environ", {"PRICING_PRECISION": "3"}):
            assert get_default_precision() == 3

    @pytest.mark.parametrize("value", ["two", "-1", "1.5"])
    def test_invalid_value_ignored(self, value):
        with patch.dict("os.environ", {"PRICING_PRECISION": value}):
            assert get_default_precision() == 2


class TestProfileName:
    """PRICING_PROFILE handling."""

    def test_default(self):
        with patch.dict("os.environ", {}, clear=True):
            assert get_default_profile_name() == "default"

    def test_from_environment(self):
        with patch.dict("os.environ", {"PRICING_PROFILE": "packs"}):
            assert get_default_profile_name() == "packs"


def test_app_identity():
    assert get_app_name() == "Pricing Engine"
    assert get_app_version() == "0.1.0"
