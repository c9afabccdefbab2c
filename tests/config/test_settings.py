from pathlib import Path

from pydantic import ValidationError
import pytest

from ksvc_compiler.config.settings import get_settings, reload_settings_cache


def test_settings_read_prefixed_env(monkeypatch, tmp_path):
    monkeypatch.setenv("KSVC_COMPILER_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("KSVC_COMPILER_OUTPUT_FORMAT", "json")
    monkeypatch.setenv("KSVC_COMPILER_HOME", str(tmp_path))
    monkeypatch.delenv("KSVC_COMPILER_DEFAULTS")
    reload_settings_cache()

    s = get_settings()

    assert s.log_level == "DEBUG"
    assert s.output_format == "json"
    assert s.home == tmp_path
    # defaults_file is derived from home when not given explicitly
    assert s.defaults_file == tmp_path / "defaults.yaml"


def test_settings_defaults_alias(monkeypatch, tmp_path):
    target = tmp_path / "mine.yaml"
    monkeypatch.setenv("KSVC_COMPILER_DEFAULTS", str(target))
    reload_settings_cache()

    assert get_settings().defaults_file == Path(target)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_log_level_is_normalised(monkeypatch):
    monkeypatch.setenv("KSVC_COMPILER_LOG_LEVEL", "warning")
    reload_settings_cache()

    assert get_settings().log_level == "WARNING"


def test_unknown_log_level_is_rejected(monkeypatch):
    monkeypatch.setenv("KSVC_COMPILER_LOG_LEVEL", "chatty")
    reload_settings_cache()

    with pytest.raises(ValidationError):
        get_settings()
