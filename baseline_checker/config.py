"""
Configuration: defaults, discovered config file, environment overrides.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import pydantic
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .errors import ValidationError
from .lru_cache import DEFAULT_BCD_CACHE_SIZE, DEFAULT_FEATURE_CACHE_SIZE
from .provider import WEB_FEATURES_DATA_URL
from .validation import validate_level

logger = logging.getLogger(__name__)

load_dotenv()

CONFIG_FILES = (
    "baseline-lint.json",
    ".baseline-lintrc",
    ".baseline-lintrc.json",
    "package.json",
)


class _Section(BaseModel):
    model_config = {"populate_by_name": True, "extra": "ignore"}


class CacheSettings(_Section):
    enabled: bool = True
    bcd_cache_size: int = Field(default=DEFAULT_BCD_CACHE_SIZE, alias="bcdCacheSize", gt=0)
    feature_cache_size: int = Field(default=DEFAULT_FEATURE_CACHE_SIZE, alias="featureCacheSize", gt=0)


class PatternSettings(_Section):
    css: List[str] = Field(default_factory=lambda: ["**/*.css"])
    js: List[str] = Field(default_factory=lambda: [
        "**/*.js", "**/*.jsx", "**/*.mjs", "**/*.cjs", "**/*.ts", "**/*.tsx",
    ])
    ignore: List[str] = Field(default_factory=lambda: [
        "**/node_modules/**", "**/dist/**", "**/build/**", "**/.git/**",
    ])


class AnalysisSettings(_Section):
    strict_mode: bool = Field(default=False, alias="strictMode")
    check_at_rules: bool = Field(default=False, alias="checkAtRules")
    max_file_size: int = Field(default=50 * 1024 * 1024, alias="maxFileSize", gt=0)
    # seconds per file
    timeout: float = Field(default=30.0, gt=0)
    batch_size: int = Field(default=25, alias="batchSize", gt=0)


class DashboardSettings(_Section):
    host: str = "localhost"
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        alias="corsOrigins",
    )


class ProviderSettings(_Section):
    data_path: Optional[str] = Field(default=None, alias="dataPath")
    data_url: Optional[str] = Field(default=WEB_FEATURES_DATA_URL, alias="dataUrl")
    timeout: float = Field(default=10.0, gt=0)


class Settings(_Section):
    """Complete runtime configuration."""

    required_level: str = Field(default="low", alias="requiredLevel")
    format: Literal["text", "json", "markdown"] = "text"
    no_warnings: bool = Field(default=False, alias="noWarnings")
    fail_on_error: bool = Field(default=False, alias="failOnError")
    css_only: bool = Field(default=False, alias="cssOnly")
    js_only: bool = Field(default=False, alias="jsOnly")
    cache: CacheSettings = Field(default_factory=CacheSettings)
    patterns: PatternSettings = Field(default_factory=PatternSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)

    @field_validator("required_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        return validate_level(value).value

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ValidationError(f"Failed to load config from {path}: {e}", "config", str(path)) from e
    if not isinstance(data, dict):
        raise ValidationError(f"Config in {path} must be a JSON object", "config", str(path))
    return data


def discover_config(cwd: Optional[Path] = None) -> Optional[Dict[str, Any]]:
    """First config found in the working directory, or None."""
    cwd = Path(cwd or Path.cwd())
    for name in CONFIG_FILES:
        path = cwd / name
        if not path.is_file():
            continue
        data = _read_json(path)
        if name == "package.json":
            section = data.get("baseline-lint")
            if section is None:
                continue
            logger.debug("Using baseline-lint section of %s", path)
            return section
        logger.debug("Using config file %s", path)
        return data
    return None


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if os.environ.get("BASELINE_REQUIRED_LEVEL"):
        overrides["requiredLevel"] = os.environ["BASELINE_REQUIRED_LEVEL"].strip()
    provider: Dict[str, Any] = {}
    if os.environ.get("BASELINE_DATA_PATH"):
        provider["dataPath"] = os.environ["BASELINE_DATA_PATH"].strip()
    if "BASELINE_DATA_URL" in os.environ:
        # empty value disables the download
        provider["dataUrl"] = os.environ["BASELINE_DATA_URL"].strip() or None
    if provider:
        overrides["provider"] = provider
    dashboard: Dict[str, Any] = {}
    if os.environ.get("HOST"):
        dashboard["host"] = os.environ["HOST"].strip()
    if os.environ.get("PORT"):
        dashboard["port"] = os.environ["PORT"].strip()
    if dashboard:
        overrides["dashboard"] = dashboard
    return overrides


def build_settings(data: Dict[str, Any]) -> Settings:
    """Validate a raw config mapping, raising our ValidationError."""
    try:
        return Settings.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationError(f"Invalid configuration: {field}: {first.get('msg')}", field, first.get("input")) from None


def load_config(config_path: Optional[str] = None, cwd: Optional[Path] = None) -> Settings:
    """Load settings: defaults <- config file <- environment."""
    data: Dict[str, Any] = {}
    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise ValidationError(f"Config file not found: {config_path}", "config", config_path)
        data = _read_json(path)
        if path.name == "package.json":
            data = data.get("baseline-lint") or {}
    else:
        data = discover_config(cwd) or {}
    return build_settings(_merge(data, _env_overrides()))


def create_sample_config(file_path: str = "baseline-lint.json") -> str:
    """Write a sample config file with every setting at its default."""
    sample = Settings().to_dict()
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(sample, f, indent=2)
        f.write("\n")
    return file_path
