"""
Baseline compatibility checker for CSS and JavaScript sources.
"""

from .config import Settings, load_config
from .errors import BaselineCheckError, FileError, ParseError, ProviderError, ValidationError
from .issue import AvailabilityStatus, FeatureRecord, Issue, RequiredLevel, Severity, Tier, UsageKind, UsageRecord
from .lru_cache import LRUCache
from .main_checker import BaselineChecker, FileResult, discover_files
from .provider import PlatformDataProvider, StaticProvider, WebFeaturesProvider
from .report import calculate_score, generate_report, meets_level
from .resolver import StatusResolver

__version__ = "0.1.0"

__all__ = [
    "AvailabilityStatus",
    "BaselineCheckError",
    "BaselineChecker",
    "FeatureRecord",
    "FileError",
    "FileResult",
    "Issue",
    "LRUCache",
    "ParseError",
    "PlatformDataProvider",
    "ProviderError",
    "RequiredLevel",
    "Settings",
    "Severity",
    "StaticProvider",
    "StatusResolver",
    "Tier",
    "UsageKind",
    "UsageRecord",
    "ValidationError",
    "WebFeaturesProvider",
    "calculate_score",
    "discover_files",
    "generate_report",
    "load_config",
    "meets_level",
]
