"""Tests for studio configuration."""

import pytest
from pydantic import ValidationError

from core.config import StudioConfig, load_config


class TestDefaults:

    def test_stock_defaults(self):
        config = StudioConfig()

        assert config.storage_backend == "local"
        assert config.storage_key == "studioData"
        assert config.initial_credits == 500
        assert config.timezone == "Asia/Kolkata"
        assert config.high_value_threshold == 30000
        assert config.reminder_window_days == 7


class TestLoadConfig:

    def test_reads_studio_variables(self):
        config = load_config({
            "STUDIO_STORAGE_BACKEND": "valkey",
            "STUDIO_VALKEY_URL": "redis://cache:6379/2",
            "STUDIO_INITIAL_CREDITS": "1000",
            "STUDIO_HIGH_VALUE_THRESHOLD": "50000",
        })

        assert config.storage_backend == "valkey"
        assert config.valkey_url == "redis://cache:6379/2"
        assert config.initial_credits == 1000
        assert config.high_value_threshold == 50000

    def test_empty_variables_keep_defaults(self):
        config = load_config({"STUDIO_TIMEZONE": ""})
        assert config.timezone == "Asia/Kolkata"

    def test_ignores_unrelated_variables(self):
        assert load_config({"HOME": "/root"}) == StudioConfig()

    @pytest.mark.parametrize("var, value", [
        ("STUDIO_STORAGE_BACKEND", "postgres"),
        ("STUDIO_INITIAL_CREDITS", "-5"),
        ("STUDIO_REMINDER_WINDOW_DAYS", "0"),
        ("STUDIO_STORAGE_KEY", "../escape"),
    ])
    def test_invalid_values_rejected(self, var, value):
        with pytest.raises(ValidationError):
            load_config({var: value})
