"""Tests for infrastructure settings."""

from unittest.mock import MagicMock

import pytest

from finexplorer.domain.models.optimization import OptimizationConfig
from finexplorer.infrastructure import settings as settings_module
from finexplorer.infrastructure.settings import ExplorerSettings

_ENV_VARS = (
    "FINEXPLORER_LANGUAGE",
    "FINEXPLORER_DIMENSION",
    "FINEXPLORER_MODEL",
    "FINEXPLORER_CACHE_TTL",
    "FINEXPLORER_R2_THRESHOLD",
    "FINEXPLORER_CV_THRESHOLD",
    "FINEXPLORER_MAX_ITERATIONS",
    "FINEXPLORER_MIN_ENTITIES",
)


@pytest.fixture
def logger(monkeypatch) -> MagicMock:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    fake_logger = MagicMock()
    monkeypatch.setattr(settings_module, "get_app_logger", lambda: fake_logger)
    return fake_logger


def test_from_env_uses_defaults(logger) -> None:
    settings = ExplorerSettings.from_env()

    assert settings == ExplorerSettings()
    assert settings.language == "de"
    logger.warning.assert_not_called()


def test_from_env_reads_values(monkeypatch, logger) -> None:
    monkeypatch.setenv("FINEXPLORER_LANGUAGE", " FR ")
    monkeypatch.setenv("FINEXPLORER_DIMENSION", "functions")
    monkeypatch.setenv("FINEXPLORER_MODEL", "hrm2")
    monkeypatch.setenv("FINEXPLORER_CACHE_TTL", "60")

    settings = ExplorerSettings.from_env()

    assert settings.language == "fr"
    assert settings.dimension == "functions"
    assert settings.model == "hrm2"
    assert settings.cache_ttl_seconds == 60.0


def test_from_env_falls_back_on_unsupported_language(monkeypatch, logger):
    monkeypatch.setenv("FINEXPLORER_LANGUAGE", "rm")

    settings = ExplorerSettings.from_env()

    assert settings.language == "de"
    logger.warning.assert_called_once()


def test_optimization_config_applies_overrides(monkeypatch, logger) -> None:
    monkeypatch.setenv("FINEXPLORER_R2_THRESHOLD", "0.9")
    monkeypatch.setenv("FINEXPLORER_CV_THRESHOLD", "0.05")
    monkeypatch.setenv("FINEXPLORER_MAX_ITERATIONS", "50")
    monkeypatch.setenv("FINEXPLORER_MIN_ENTITIES", "1")

    config = ExplorerSettings.optimization_config()

    assert config.r_squared_threshold == 0.9
    assert config.cv_threshold == 0.05
    assert config.max_iterations == 50
    assert config.min_entity_count == 1


def test_optimization_config_ignores_invalid_values(monkeypatch, logger):
    """Invalid numbers should log a warning and keep the defaults."""
    monkeypatch.setenv("FINEXPLORER_MAX_ITERATIONS", "many")
    monkeypatch.setenv("FINEXPLORER_R2_THRESHOLD", "-1")

    config = ExplorerSettings.optimization_config()

    assert config == OptimizationConfig()
    assert logger.warning.call_count == 2
