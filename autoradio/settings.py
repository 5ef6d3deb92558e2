# autoradio/settings.py
"""
Settings read from the environment (and a local .env file, if present).

  LASTFM_API_KEY              Last.fm API key (required to talk to Last.fm)
  AUTORADIO_CRAZINESS         0-100, how far the radio strays (default 10)
  AUTORADIO_PROVIDER_TIMEOUT  seconds per provider call, 0 or "none" = no timeout (default 15)
  AUTORADIO_MAX_WORKERS       parallel similarity lookups (default 8)
  LOG_LEVEL                   DEBUG / INFO / WARNING / ERROR (default INFO)
"""

from __future__ import annotations
import math
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    if raw.strip().lower() == "none":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def parse_craziness(raw: str, name: str = "AUTORADIO_CRAZINESS") -> float:
    """A finite number. "none", "nan" and "inf" are rejected."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {raw!r}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class Settings:
    lastfm_api_key: Optional[str] = None
    autoradio_craziness: float = 10
    provider_timeout: Optional[float] = 15.0
    max_workers: int = 8
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        timeout = _env_float("AUTORADIO_PROVIDER_TIMEOUT", 15.0)
        raw_craziness = os.getenv("AUTORADIO_CRAZINESS")
        return cls(
            lastfm_api_key=os.getenv("LASTFM_API_KEY") or None,
            autoradio_craziness=parse_craziness(raw_craziness) if raw_craziness and raw_craziness.strip() else 10,
            provider_timeout=timeout if timeout else None,
            max_workers=_env_int("AUTORADIO_MAX_WORKERS", 8),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )

    def require_api_key(self) -> str:
        if not self.lastfm_api_key:
            raise RuntimeError("No Last.fm API key found. Set LASTFM_API_KEY (env or .env).")
        return self.lastfm_api_key
