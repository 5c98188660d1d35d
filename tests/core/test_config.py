# tests/core/test_config.py
"""
Tests for the Config class: secret resolution, connection settings and
the consistency checks of validate_instance.
"""

import os
from unittest.mock import patch

import pytest

from kubegate.core.config import Config


class TestGetSecret:
    """Tests for the Config._get_secret method."""

    def test_get_secret_from_env_var(self):
        """Test that _get_secret falls back to environment variable when no file exists."""
        with patch.dict(os.environ, {"TEST_SECRET": "env_value"}):
            with patch("kubegate.core.config.os.path.exists", return_value=False):
                assert Config._get_secret("TEST_SECRET") == "env_value"

    def test_get_secret_with_default(self):
        with patch.dict(os.environ, {}, clear=True):
            with patch("kubegate.core.config.os.path.exists", return_value=False):
                assert Config._get_secret("NONEXISTENT_SECRET", default="default_value") == "default_value"

    def test_get_secret_file_takes_precedence_over_env(self):
        """Test that file-based secrets take precedence over environment variables."""
        with patch.dict(os.environ, {"PRISM_PASSWORD": "env_value"}):
            with patch("kubegate.core.config.os.path.exists") as mock_exists:
                mock_exists.return_value = True
                with patch("builtins.open", create=True) as mock_open:
                    mock_open.return_value.__enter__.return_value.read.return_value = "  file_value\n"
                    assert Config._get_secret("PRISM_PASSWORD") == "file_value"
                    mock_exists.assert_called_with("/etc/kubegate/secrets/PRISM_PASSWORD")

    def test_get_secret_permission_error(self):
        with patch("kubegate.core.config.os.path.exists", return_value=True):
            with patch("builtins.open", side_effect=PermissionError("Permission denied")):
                with pytest.raises(PermissionError) as exc_info:
                    Config._get_secret("PRISM_PASSWORD")

                assert "exists but cannot be read due to permission denied" in str(exc_info.value)


class TestConnectionSettings:
    def test_values_are_read_at_access_time(self, monkeypatch):
        cfg = Config()
        monkeypatch.setenv("PRISM_HOST", "pc.lab.local")
        monkeypatch.setenv("PRISM_PORT", "9443")
        monkeypatch.setenv("PRISM_INSECURE", "yes")
        assert cfg.PRISM_HOST == "pc.lab.local"
        assert cfg.PRISM_PORT == 9443
        assert cfg.PRISM_INSECURE is True

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PRISM_PORT", raising=False)
        monkeypatch.delenv("PRISM_INSECURE", raising=False)
        cfg = Config()
        assert cfg.PRISM_PORT == 9440
        assert cfg.PRISM_INSECURE is False
        assert cfg.QUOTA_WARNING_THRESHOLD == 80.0
        assert cfg.QUOTA_CRITICAL_THRESHOLD == 95.0


class TestValidateInstance:
    def test_default_config_is_valid(self):
        Config().validate_instance()

    def test_warning_above_critical_is_rejected(self):
        cfg = Config()
        cfg.QUOTA_WARNING_THRESHOLD = 96.0
        with pytest.raises(ValueError, match="must not be greater than"):
            cfg.validate_instance()

    def test_threshold_out_of_range_is_rejected(self):
        cfg = Config()
        cfg.QUOTA_CRITICAL_THRESHOLD = 120.0
        with pytest.raises(ValueError, match="between 0 and 100"):
            cfg.validate_instance()

    def test_worker_count_must_be_positive(self):
        cfg = Config()
        cfg.VALIDATION_MAX_WORKERS = 0
        with pytest.raises(ValueError, match="at least 1"):
            cfg.validate_instance()
