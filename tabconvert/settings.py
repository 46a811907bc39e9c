from __future__ import annotations

import os
from dataclasses import dataclass


def _truthy(v: str | None) -> bool:
    return str(v or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass
class Settings:
    # HTTP client
    http_timeout_seconds: float = 30.0
    http_follow_redirects: bool = True

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        timeout = _float_env("TABCONVERT_HTTP_TIMEOUT", 30.0)
        redirects = _truthy(os.getenv("TABCONVERT_FOLLOW_REDIRECTS", "true"))
        level = (os.getenv("TABCONVERT_LOG_LEVEL") or "INFO").strip().upper()
        return cls(
            http_timeout_seconds=timeout,
            http_follow_redirects=redirects,
            log_level=level,
        )
