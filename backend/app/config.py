from __future__ import annotations

from dataclasses import dataclass
import os
from urllib.parse import urlparse

SCORE_STRATEGIES = {"auto", "explicit", "weighted"}
DEFAULT_PASS_THRESHOLD = 80.0


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    sheet_api_url: str
    pass_threshold: float
    score_strategy: str
    sheet_api_timeout_seconds: float
    sheet_api_retries: int


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise SettingsError(f"Missing required environment variable: {name}")
    return value


def _optional_env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _require_url(name: str, value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise SettingsError(f"Invalid URL for {name}: {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = _optional_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise SettingsError(f"Invalid number for {name}: {raw}") from exc


def _int_env(name: str, default: int, *, minimum: int = 0) -> int:
    raw = _optional_env(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise SettingsError(f"Invalid integer for {name}: {raw}") from exc
    if value < minimum:
        raise SettingsError(f"{name} must be >= {minimum}: {raw}")
    return value


def load_settings() -> Settings:
    sheet_api_url = _require_url("SHEET_API_URL", _require_env("SHEET_API_URL"))
    pass_threshold = _float_env("PASS_THRESHOLD", DEFAULT_PASS_THRESHOLD)
    score_strategy = (_optional_env("SCORE_STRATEGY") or "auto").lower()
    if score_strategy not in SCORE_STRATEGIES:
        raise SettingsError(
            "Invalid SCORE_STRATEGY: "
            f"{score_strategy} (expected one of {', '.join(sorted(SCORE_STRATEGIES))})"
        )
    timeout = _float_env("SHEET_API_TIMEOUT_SECONDS", 10.0)
    if timeout <= 0:
        raise SettingsError(f"SHEET_API_TIMEOUT_SECONDS must be positive: {timeout}")
    retries = _int_env("SHEET_API_RETRIES", 2)

    return Settings(
        sheet_api_url=sheet_api_url,
        pass_threshold=pass_threshold,
        score_strategy=score_strategy,
        sheet_api_timeout_seconds=timeout,
        sheet_api_retries=retries,
    )
