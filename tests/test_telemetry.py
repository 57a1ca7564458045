import pytest

from jujutsu_engine.runtime.telemetry import LogSettings


def test_settings_from_environment() -> None:
    settings = LogSettings.from_env(
        {
            "JUJUTSU_ENGINE_LOG_LEVEL": "debug",
            "JUJUTSU_ENGINE_DISABLE_CONSOLE": "1",
            "JUJUTSU_ENGINE_LOG_FILE": "/tmp/jj.log",
            "JUJUTSU_ENGINE_LOG_BUFFERED": "yes",
        }
    )

    assert settings.level == "DEBUG"
    assert settings.console is False
    assert settings.file == "/tmp/jj.log"
    assert settings.buffered is True


def test_default_settings_are_quiet() -> None:
    settings = LogSettings.from_env({})

    assert settings == LogSettings()
    assert settings.level == "WARNING"


def test_presets() -> None:
    assert LogSettings.preset("development").level == "DEBUG"
    assert LogSettings.preset("production", log_file="x.log").file == "x.log"
    assert LogSettings.preset("performance").json is True

    with pytest.raises(ValueError):
        LogSettings.preset("verbose")
