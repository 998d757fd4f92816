"""
Tests for configuration models, the resolve-once loader and app settings files.
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from serverless_compat.core.config import (
    CompatConfig,
    app_environ,
    clear_cache,
    load_app_config,
    load_config,
    read_app_settings,
    resolve_log_threshold,
)


class TestResolveLogThreshold:
    """Tests for resolve_log_threshold."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("trace", 20),
            ("debug", 20),
            ("info", 30),
            ("warn", 40),
            ("error", 50),
            ("critical", 50),
            ("off", 100),
            ("OFF", 100),
            ("  Debug ", 20),
            ("warning", 30),
            ("", 30),
            (None, 30),
        ],
    )
    def test_mapping(self, value, expected) -> None:
        """Test level names map to thresholds, unknown values to info."""
        assert resolve_log_threshold(value) == expected


class TestCompatConfig:
    """Tests for the CompatConfig model."""

    def test_defaults(self) -> None:
        """Test an empty config leaves every input unset."""
        config = CompatConfig()
        assert config.log_level is None
        assert config.trace_pipe_name is None
        assert config.log_threshold == 30

    def test_from_env(self) -> None:
        """Test every launcher variable is read from the mapping."""
        config = CompatConfig.from_env(
            {
                "DD_LOG_LEVEL": "debug",
                "DD_TRACE_WINDOWS_PIPE_NAME": "trace_base",
                "DD_DOGSTATSD_WINDOWS_PIPE_NAME": "stats_base",
                "DD_SERVERLESS_PIPE_ADDRESS": "\\\\.\\pipe\\addr",
                "DD_TRACE_PIPE_NAME": "trace_alias",
                "DD_DOGSTATSD_PIPE_NAME": "stats_alias",
            }
        )
        assert config.log_threshold == 20
        assert config.trace_pipe_name == "trace_base"
        assert config.dogstatsd_pipe_name == "stats_base"
        assert config.pipe_address == "\\\\.\\pipe\\addr"
        assert config.trace_pipe_alias == "trace_alias"
        assert config.dogstatsd_pipe_alias == "stats_alias"

    def test_from_os_environ_by_default(self) -> None:
        """Test os.environ is read when no mapping is given."""
        with patch.dict(os.environ, {"DD_LOG_LEVEL": "error"}, clear=True):
            assert CompatConfig.from_env().log_threshold == 50

    def test_blank_values_are_unset(self) -> None:
        """Test empty and whitespace-only values count as unset."""
        config = CompatConfig.from_env(
            {"DD_TRACE_WINDOWS_PIPE_NAME": "", "DD_DOGSTATSD_WINDOWS_PIPE_NAME": "  "}
        )
        assert config.trace_pipe_name is None
        assert config.dogstatsd_pipe_name is None

    def test_values_are_stripped(self) -> None:
        """Test surrounding whitespace never reaches a pipe name."""
        config = CompatConfig.from_env(
            {
                "DD_TRACE_WINDOWS_PIPE_NAME": " svc ",
                "DD_SERVERLESS_PIPE_ADDRESS": "\t\\\\.\\pipe\\addr\n",
            }
        )
        assert config.trace_pipe_name == "svc"
        assert config.pipe_address == "\\\\.\\pipe\\addr"

    def test_is_frozen(self) -> None:
        """Test a resolved config cannot be changed."""
        config = CompatConfig()
        with pytest.raises(ValidationError):
            config.log_level = "debug"  # type: ignore[misc]


class TestLoadConfig:
    """Tests for the cached loader."""

    def test_caches_first_result(self) -> None:
        """Test later environment changes are not picked up."""
        with patch.dict(os.environ, {"DD_LOG_LEVEL": "warn"}, clear=True):
            first = load_config()
        with patch.dict(os.environ, {"DD_LOG_LEVEL": "debug"}, clear=True):
            second = load_config()

        assert second is first
        assert second.log_threshold == 40

    def test_clear_cache_rereads(self) -> None:
        """Test clear_cache forces the environment to be read again."""
        with patch.dict(os.environ, {"DD_LOG_LEVEL": "warn"}, clear=True):
            load_config()
        clear_cache()
        with patch.dict(os.environ, {"DD_LOG_LEVEL": "debug"}, clear=True):
            assert load_config().log_threshold == 20

    def test_bypass_cache_with_explicit_environ(self) -> None:
        """Test an explicit mapping with use_cache=False is read directly."""
        config = load_config({"DD_LOG_LEVEL": "off"}, use_cache=False)
        assert config.log_threshold == 100


class TestReadAppSettings:
    """Tests for reading launcher variables from an app settings file."""

    def test_reads_launcher_variables_only(self, tmp_path) -> None:
        """Test unrelated keys in the file are ignored."""
        settings = tmp_path / "app.env"
        settings.write_text(
            "DD_TRACE_WINDOWS_PIPE_NAME=from_file\n"
            "DD_LOG_LEVEL=debug\n"
            "DD_SITE=datadoghq.eu\n"
            "FUNCTIONS_WORKER_RUNTIME=python\n"
        )

        assert read_app_settings(settings) == {
            "DD_TRACE_WINDOWS_PIPE_NAME": "from_file",
            "DD_LOG_LEVEL": "debug",
        }

    def test_key_without_value_is_empty(self, tmp_path) -> None:
        """Test a bare key reads as an empty string."""
        settings = tmp_path / "app.env"
        settings.write_text("DD_SERVERLESS_PIPE_ADDRESS\n")

        assert read_app_settings(settings) == {"DD_SERVERLESS_PIPE_ADDRESS": ""}

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing file is reported, not treated as empty."""
        with pytest.raises(FileNotFoundError, match="nope.env"):
            read_app_settings(tmp_path / "nope.env")


class TestAppEnviron:
    """Tests for layering an app settings file over an environment."""

    def test_file_wins_over_base(self, tmp_path) -> None:
        """Test file values replace the base environment's values."""
        settings = tmp_path / "app.env"
        settings.write_text("DD_TRACE_WINDOWS_PIPE_NAME=from_file\n")
        base = {"DD_TRACE_WINDOWS_PIPE_NAME": "from_os", "DD_LOG_LEVEL": "warn"}

        environ = app_environ(settings, base)

        assert environ == {"DD_TRACE_WINDOWS_PIPE_NAME": "from_file", "DD_LOG_LEVEL": "warn"}
        assert base["DD_TRACE_WINDOWS_PIPE_NAME"] == "from_os"

    def test_empty_value_clears_base(self, tmp_path) -> None:
        """Test an empty file value unsets the variable for the app."""
        settings = tmp_path / "app.env"
        settings.write_text("DD_TRACE_WINDOWS_PIPE_NAME=\n")

        environ = app_environ(settings, {"DD_TRACE_WINDOWS_PIPE_NAME": "from_os"})

        assert CompatConfig.from_env(environ).trace_pipe_name is None

    def test_no_file_copies_os_environ(self) -> None:
        """Test os.environ is copied, never returned itself."""
        with patch.dict(os.environ, {"DD_LOG_LEVEL": "error"}, clear=True):
            environ = app_environ(None)
            environ["DD_LOG_LEVEL"] = "debug"
            assert os.environ["DD_LOG_LEVEL"] == "error"


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_without_file_uses_cached_config(self) -> None:
        """Test no file means the process-wide cached config."""
        with patch.dict(os.environ, {"DD_LOG_LEVEL": "warn"}, clear=True):
            assert load_app_config() is load_config()

    def test_with_file_is_not_cached(self, tmp_path) -> None:
        """Test a settings file never replaces the process-wide config."""
        settings = tmp_path / "app.env"
        settings.write_text("DD_LOG_LEVEL=debug\n")

        with patch.dict(os.environ, {"DD_LOG_LEVEL": "warn"}, clear=True):
            app_config = load_app_config(settings)
            process_config = load_config()

        assert app_config.log_threshold == 20
        assert process_config.log_threshold == 40
