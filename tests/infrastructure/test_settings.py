"""Tests for infrastructure settings."""

from unittest.mock import MagicMock

from src.infrastructure import settings as settings_module
from src.infrastructure.settings import NetWorthSettings


def _no_dotenv(monkeypatch) -> None:
    monkeypatch.setattr(settings_module.dotenv, "load_dotenv", lambda: None)


def test_from_env_uses_defaults(monkeypatch) -> None:
    """Unset variables should fall back to defaults."""
    _no_dotenv(monkeypatch)
    monkeypatch.delenv("NETWORTH_INCLUDE_BREAKDOWN", raising=False)
    monkeypatch.delenv("NETWORTH_GROWTH_PERIOD", raising=False)

    settings = NetWorthSettings.from_env()

    assert settings.include_breakdown is True
    assert settings.growth_period == "All Time"


def test_from_env_reads_values(monkeypatch) -> None:
    """Explicit values should be parsed."""
    _no_dotenv(monkeypatch)
    monkeypatch.setenv("NETWORTH_INCLUDE_BREAKDOWN", "off")
    monkeypatch.setenv("NETWORTH_GROWTH_PERIOD", " YTD ")

    settings = NetWorthSettings.from_env()

    assert settings.include_breakdown is False
    assert settings.growth_period == "YTD"


def test_invalid_boolean_keeps_default_and_warns(monkeypatch) -> None:
    """Unknown boolean spellings should be reported."""
    _no_dotenv(monkeypatch)
    logger = MagicMock()
    monkeypatch.setattr(settings_module, "get_app_logger", lambda: logger)
    monkeypatch.setenv("NETWORTH_INCLUDE_BREAKDOWN", "maybe")

    settings = NetWorthSettings.from_env()

    assert settings.include_breakdown is True
    logger.warning.assert_called_once()
