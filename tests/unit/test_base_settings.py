"""Tests for the shared settings base: log level handling."""

import pytest
from pydantic import ValidationError

from ragchat.configs.base import BaseSettings


class TestBaseSettings:
    """Test suite for BaseSettings."""

    def test_log_level_should_be_normalized(self) -> None:
        settings = BaseSettings(_env_file=None, log_level=" warning ", debug=False)
        assert settings.log_level == "WARNING"
        assert settings.effective_log_level == "WARNING"

    def test_debug_should_force_debug_level(self) -> None:
        settings = BaseSettings(_env_file=None, log_level="ERROR", debug=True)
        assert settings.effective_log_level == "DEBUG"

    def test_unknown_log_level_should_be_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown log level"):
            BaseSettings(_env_file=None, log_level="chatty")
