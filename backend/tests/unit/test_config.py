import pytest

from app.config import SettingsError, load_settings


def _set_required_envs(monkeypatch):
    monkeypatch.setenv("SHEET_API_URL", "https://script.google.com/macros/s/abc/exec")
    for name in ["PASS_THRESHOLD", "SCORE_STRATEGY", "SHEET_API_TIMEOUT_SECONDS", "SHEET_API_RETRIES"]:
        monkeypatch.delenv(name, raising=False)


def test_missing_required_envs_raise_actionable_error(monkeypatch):
    monkeypatch.delenv("SHEET_API_URL", raising=False)

    with pytest.raises(SettingsError) as exc:
        load_settings()

    message = str(exc.value)
    assert "Missing required environment variable" in message
    assert "SHEET_API_URL" in message


def test_invalid_urls_are_rejected(monkeypatch):
    _set_required_envs(monkeypatch)
    monkeypatch.setenv("SHEET_API_URL", "not-a-url")

    with pytest.raises(SettingsError) as exc:
        load_settings()

    assert "Invalid URL for SHEET_API_URL" in str(exc.value)


def test_defaults(monkeypatch):
    _set_required_envs(monkeypatch)

    settings = load_settings()

    assert settings.pass_threshold == 80.0
    assert settings.score_strategy == "auto"
    assert settings.sheet_api_timeout_seconds == 10.0
    assert settings.sheet_api_retries == 2


def test_threshold_and_strategy_are_configurable(monkeypatch):
    _set_required_envs(monkeypatch)
    monkeypatch.setenv("PASS_THRESHOLD", "50")
    monkeypatch.setenv("SCORE_STRATEGY", "Weighted")

    settings = load_settings()

    assert settings.pass_threshold == 50.0
    assert settings.score_strategy == "weighted"


@pytest.mark.parametrize(
    ("name", "value", "fragment"),
    [
        ("PASS_THRESHOLD", "eighty", "Invalid number for PASS_THRESHOLD"),
        ("SCORE_STRATEGY", "median", "Invalid SCORE_STRATEGY"),
        ("SHEET_API_RETRIES", "-1", "SHEET_API_RETRIES must be >= 0"),
        ("SHEET_API_TIMEOUT_SECONDS", "0", "must be positive"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch, name, value, fragment):
    _set_required_envs(monkeypatch)
    monkeypatch.setenv(name, value)

    with pytest.raises(SettingsError) as exc:
        load_settings()

    assert fragment in str(exc.value)
