"""Configuration from environment and the checker's config file."""

import os
from functools import lru_cache
from typing import List

from baseline_checker.config import Settings, load_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings for the API process, loaded once."""
    return load_config(os.environ.get("BASELINE_CONFIG") or None)


def get_host() -> str:
    return get_settings().dashboard.host


def get_port() -> int:
    return get_settings().dashboard.port


def get_cors_origins() -> List[str]:
    return list(get_settings().dashboard.cors_origins)


def get_default_scan_path() -> str:
    """Directory scanned when GET /scan has no path."""
    return os.environ.get("BASELINE_SCAN_PATH", "./src").strip()
