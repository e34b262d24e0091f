# buildpilot/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

class ConfigError(ValueError):
    pass

def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value

def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None

@dataclass(frozen=True)
class Settings:
    store_backend: str = "memory"
    rest_url: str = ""
    rest_key: str = ""
    rest_timeout: float = 10.0
    autosave_ms: int = 1000
    assistant_delay_ms: int = 1500
    rate_limit_max: int = 10
    rate_limit_window_s: int = 60
    session_idle_s: int = 1800
    log_level: str = "INFO"

    @property
    def autosave_seconds(self) -> float:
        return self.autosave_ms / 1000.0

    @property
    def assistant_delay_seconds(self) -> float:
        return self.assistant_delay_ms / 1000.0

    @staticmethod
    def from_env() -> "Settings":
        backend = os.getenv("BUILDPILOT_STORE", "memory").strip().lower()
        if backend not in ("memory", "rest"):
            raise ConfigError(f"BUILDPILOT_STORE must be 'memory' or 'rest', got {backend!r}")

        rest_url = os.getenv("BUILDPILOT_REST_URL", "").rstrip("/")
        if backend == "rest" and not rest_url:
            raise ConfigError("BUILDPILOT_REST_URL is required when BUILDPILOT_STORE=rest")

        return Settings(
            store_backend=backend,
            rest_url=rest_url,
            rest_key=os.getenv("BUILDPILOT_REST_KEY", ""),
            rest_timeout=_env_float("BUILDPILOT_REST_TIMEOUT", 10.0),
            autosave_ms=_env_int("BUILDPILOT_AUTOSAVE_MS", 1000),
            assistant_delay_ms=_env_int("BUILDPILOT_ASSISTANT_DELAY_MS", 1500),
            rate_limit_max=_env_int("BUILDPILOT_RATE_LIMIT_MAX", 10),
            rate_limit_window_s=_env_int("BUILDPILOT_RATE_LIMIT_WINDOW_S", 60),
            session_idle_s=_env_int("BUILDPILOT_SESSION_IDLE_S", 1800),
            log_level=os.getenv("BUILDPILOT_LOG_LEVEL", "INFO").upper(),
        )
