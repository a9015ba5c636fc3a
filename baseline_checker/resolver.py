"""
Tiered availability lookup: platform data provider, then the static fallback
table, then unknown. Every outcome, including a confirmed miss, is memoized in
the injected caches.
"""

import logging
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from .catalog import api_path_to_feature_key, fallback_table
from .errors import BaselineCheckError
from .issue import AvailabilityStatus, FeatureRecord, Tier
from .lru_cache import DEFAULT_BCD_CACHE_SIZE, DEFAULT_FEATURE_CACHE_SIZE, LRUCache
from .provider import PlatformDataProvider

logger = logging.getLogger(__name__)

_MISSING = object()


class Resolution(NamedTuple):
    """The key that was looked up last and what it resolved to."""
    feature_key: str
    status: Optional[AvailabilityStatus]


class StatusResolver:
    """Resolves feature keys to availability statuses."""

    def __init__(
        self,
        provider: Optional[PlatformDataProvider] = None,
        bcd_cache: Optional[LRUCache] = None,
        feature_cache: Optional[LRUCache] = None,
        fallbacks: Optional[Mapping[str, AvailabilityStatus]] = None,
    ):
        self.provider = provider
        self.bcd_cache = bcd_cache if bcd_cache is not None else LRUCache(DEFAULT_BCD_CACHE_SIZE)
        self.feature_cache = feature_cache if feature_cache is not None else LRUCache(DEFAULT_FEATURE_CACHE_SIZE)
        self.fallbacks = fallbacks if fallbacks is not None else fallback_table()

    def resolve_status(self, feature_key: str) -> Optional[AvailabilityStatus]:
        """Return the status for a key, or None when no source knows it."""
        cached = self.bcd_cache.get(feature_key, _MISSING)
        if cached is not _MISSING:
            logger.debug("Cache hit: %s", feature_key)
            return cached
        logger.debug("Cache miss: %s", feature_key)

        status = self._from_provider(feature_key)
        if status is None:
            status = self.fallbacks.get(feature_key)
            if status is not None:
                logger.debug("Using fallback data for %s", feature_key)
            else:
                logger.debug("No availability data for %s", feature_key)

        self.bcd_cache.set(feature_key, status)
        return status

    def _from_provider(self, feature_key: str) -> Optional[AvailabilityStatus]:
        if self.provider is None:
            return None
        try:
            return self.provider.get_status(feature_key)
        except BaselineCheckError as e:
            logger.debug("Provider lookup failed for %s: %s", feature_key, e.message)
        except Exception as e:
            logger.warning("Provider lookup failed for %s: %s", feature_key, e)
        return None

    def check_css_property_value(self, prop: str, value: Optional[str] = None) -> Resolution:
        """Resolve a CSS property, preferring the property.value key.

        The bare property key is used only when the specific key has no data.
        """
        if value:
            key = f"css.properties.{prop}.{value}"
            status = self.resolve_status(key)
            if status is not None:
                return Resolution(key, status)
        key = f"css.properties.{prop}"
        return Resolution(key, self.resolve_status(key))

    def check_javascript_api(self, api_path: str) -> Resolution:
        key = api_path_to_feature_key(api_path)
        return Resolution(key, self.resolve_status(key))

    # Whole-feature queries

    def get_feature_status(self, feature_id: str) -> Optional[FeatureRecord]:
        cached = self.feature_cache.get(feature_id, _MISSING)
        if cached is not _MISSING:
            return cached
        record = None
        if self.provider is not None:
            try:
                record = self.provider.get_feature(feature_id)
            except BaselineCheckError as e:
                logger.warning("Feature lookup failed for %s: %s", feature_id, e.message)
            except Exception as e:
                logger.warning("Feature lookup failed for %s: %s", feature_id, e)
        if record is None:
            logger.debug("Feature not found: %s", feature_id)
        self.feature_cache.set(feature_id, record)
        return record

    def _all_features(self) -> List[FeatureRecord]:
        if self.provider is None:
            return []
        try:
            return list(self.provider.iter_features())
        except BaselineCheckError as e:
            logger.warning("Feature listing unavailable: %s", e.message)
        except Exception as e:
            logger.warning("Feature listing unavailable: %s", e)
        return []

    def features_by_status(self, tier: Tier) -> List[FeatureRecord]:
        return [f for f in self._all_features() if f.status.tier is tier]

    def features_by_group(self, group: str) -> List[FeatureRecord]:
        matches = []
        for feature in self._all_features():
            groups = feature.group if isinstance(feature.group, list) else [feature.group]
            if group in groups:
                matches.append(feature)
        return matches

    def search_features(self, query: str) -> List[FeatureRecord]:
        """Case-insensitive substring match on id, name and description."""
        needle = query.lower()
        return [
            f for f in self._all_features()
            if needle in f.id.lower() or needle in f.name.lower() or needle in (f.description or "").lower()
        ]

    def clear_cache(self) -> None:
        self.bcd_cache.clear()
        self.feature_cache.clear()

    def get_cache_stats(self) -> Dict[str, Any]:
        return {
            "bcdCache": self.bcd_cache.get_stats(),
            "featureCache": self.feature_cache.get_stats(),
        }
