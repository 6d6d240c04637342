"""Centralized configuration for environment variables and external APIs.

This module is the single source of truth for configuration used across the
application. Import getters from here rather than calling os.getenv directly
in multiple places. Getters read the environment on every call so values can
be overridden per process (and per test).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()


# --- Geocoding (Nominatim) ---
DEFAULT_NOMINATIM_BASE_URL: Final[str] = "https://nominatim.openstreetmap.org"
DEFAULT_NOMINATIM_USER_AGENT: Final[str] = "RoadTripOrganizer/1.0"

# --- Routing (OSRM) ---
DEFAULT_OSRM_BASE_URL: Final[str] = "https://router.project-osrm.org"

# --- Travel assistant (Gemini) ---
DEFAULT_GEMINI_MODEL: Final[str] = "gemini-2.5-flash"
DEFAULT_GEMINI_BASE_URL: Final[str] = "https://generativelanguage.googleapis.com/v1beta"

# --- Navigation tuning ---
DEFAULT_ROUTE_REFRESH_INTERVAL_SECONDS: Final[float] = 10.0
DEFAULT_ARRIVAL_THRESHOLD_METERS: Final[float] = 1000.0

# --- Storage ---
DEFAULT_LOCAL_CACHE_DIR: Final[str] = ".roadtrip_cache"
DEFAULT_AUTOSAVE_DELAY_SECONDS: Final[float] = 2.0


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_nominatim_base_url() -> str:
    return (
        os.getenv("NOMINATIM_BASE_URL", "").strip().rstrip("/")
        or DEFAULT_NOMINATIM_BASE_URL
    )


def get_nominatim_search_url() -> str:
    return f"{get_nominatim_base_url()}/search"


def get_nominatim_user_agent() -> str:
    return os.getenv("NOMINATIM_USER_AGENT", "").strip() or DEFAULT_NOMINATIM_USER_AGENT


def get_osrm_base_url() -> str:
    return os.getenv("OSRM_BASE_URL", "").strip().rstrip("/") or DEFAULT_OSRM_BASE_URL


def get_route_refresh_interval_seconds() -> float:
    """Minimum seconds between two live route re-fetches while tracking."""
    return _get_float(
        "ROUTE_REFRESH_INTERVAL_SECONDS",
        DEFAULT_ROUTE_REFRESH_INTERVAL_SECONDS,
    )


def get_arrival_threshold_meters() -> float:
    """Remaining distance under which a trip counts as arriving."""
    return _get_float("ARRIVAL_THRESHOLD_METERS", DEFAULT_ARRIVAL_THRESHOLD_METERS)


def get_local_cache_dir() -> Path:
    return Path(os.getenv("LOCAL_CACHE_DIR", "").strip() or DEFAULT_LOCAL_CACHE_DIR)


def get_autosave_delay_seconds() -> float:
    return _get_float("AUTOSAVE_DELAY_SECONDS", DEFAULT_AUTOSAVE_DELAY_SECONDS)


def get_gemini_api_key() -> str | None:
    """API key for the travel assistant; None leaves the assistant disabled."""
    return os.getenv("GEMINI_API_KEY", "").strip() or None


def get_gemini_model() -> str:
    return os.getenv("GEMINI_MODEL", "").strip() or DEFAULT_GEMINI_MODEL


def get_gemini_base_url() -> str:
    return (
        os.getenv("GEMINI_BASE_URL", "").strip().rstrip("/") or DEFAULT_GEMINI_BASE_URL
    )


def get_forbidden_hosts() -> set[str]:
    """Hosts the HTTP clients must never contact (comma separated)."""
    raw = os.getenv("FORBIDDEN_HOSTS", "")
    return {host.strip().lower() for host in raw.split(",") if host.strip()}


__all__ = [
    "DEFAULT_ARRIVAL_THRESHOLD_METERS",
    "DEFAULT_AUTOSAVE_DELAY_SECONDS",
    "DEFAULT_GEMINI_BASE_URL",
    "DEFAULT_GEMINI_MODEL",
    "DEFAULT_LOCAL_CACHE_DIR",
    "DEFAULT_NOMINATIM_BASE_URL",
    "DEFAULT_OSRM_BASE_URL",
    "DEFAULT_ROUTE_REFRESH_INTERVAL_SECONDS",
    "get_arrival_threshold_meters",
    "get_autosave_delay_seconds",
    "get_forbidden_hosts",
    "get_gemini_api_key",
    "get_gemini_base_url",
    "get_gemini_model",
    "get_local_cache_dir",
    "get_nominatim_base_url",
    "get_nominatim_search_url",
    "get_nominatim_user_agent",
    "get_osrm_base_url",
    "get_route_refresh_interval_seconds",
]
