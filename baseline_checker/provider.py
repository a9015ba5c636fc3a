"""
Platform compatibility data providers.

The resolver talks to a provider through `get_status(feature_key)`. The live
provider reads a `web-features` data.json snapshot from disk or over HTTP;
`StaticProvider` serves a fixed in-memory table and is what tests inject.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional

import requests

from .errors import ProviderError
from .issue import AvailabilityStatus, FeatureRecord

logger = logging.getLogger(__name__)

WEB_FEATURES_DATA_URL = "https://unpkg.com/web-features/data.json"


class PlatformDataProvider:
    """Base class for platform data sources."""

    name = "base"

    def get_status(self, feature_key: str) -> Optional[AvailabilityStatus]:
        """Status for a compat key, or None when the source has no data."""
        raise NotImplementedError

    def get_feature(self, feature_id: str) -> Optional[FeatureRecord]:
        """Whole-feature record by web-features id."""
        return None

    def iter_features(self) -> Iterator[FeatureRecord]:
        return iter(())


class StaticProvider(PlatformDataProvider):
    """Deterministic provider backed by plain mappings."""

    name = "static"

    def __init__(
        self,
        statuses: Optional[Mapping[str, Any]] = None,
        features: Optional[Mapping[str, FeatureRecord]] = None,
    ):
        self._statuses: Dict[str, AvailabilityStatus] = {}
        for key, value in (statuses or {}).items():
            if isinstance(value, AvailabilityStatus):
                self._statuses[key] = value
            else:
                self._statuses[key] = AvailabilityStatus.from_baseline_record(value)
        self._features: Dict[str, FeatureRecord] = dict(features or {})
        self.lookups = 0

    def get_status(self, feature_key: str) -> Optional[AvailabilityStatus]:
        self.lookups += 1
        return self._statuses.get(feature_key)

    def get_feature(self, feature_id: str) -> Optional[FeatureRecord]:
        return self._features.get(feature_id)

    def iter_features(self) -> Iterator[FeatureRecord]:
        return iter(list(self._features.values()))


class WebFeaturesProvider(PlatformDataProvider):
    """Provider backed by the web-features data.json snapshot.

    The snapshot is loaded lazily on first use, from `data_path` when given,
    otherwise from `data_url`. A failed load is remembered and every later
    call raises `ProviderError` straight away, so callers fall back without
    paying for a retry per key.
    """

    name = "web-features"

    def __init__(
        self,
        data_path: Optional[str] = None,
        data_url: Optional[str] = None,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.data_path = data_path
        self.data_url = data_url
        self.timeout = timeout
        self._session = session
        self._lock = threading.Lock()
        self._loaded = False
        self._load_error: Optional[str] = None
        self._by_key: Dict[str, AvailabilityStatus] = {}
        self._features: Dict[str, FeatureRecord] = {}

    @property
    def source(self) -> str:
        return self.data_path or self.data_url or "<none>"

    def _fetch(self) -> Dict[str, Any]:
        if self.data_path:
            path = Path(self.data_path)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except (OSError, ValueError) as e:
                raise ProviderError(f"Could not read web-features data from {path}: {e}", str(path)) from e
        if self.data_url:
            http = self._session or requests
            try:
                response = http.get(self.data_url, timeout=self.timeout)
                response.raise_for_status()
                return response.json()
            except (requests.exceptions.RequestException, ValueError) as e:
                raise ProviderError(f"Could not download web-features data: {e}", self.data_url) from e
        raise ProviderError("No web-features data source configured")

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self._lock:
            if self._loaded:
                return
            if self._load_error:
                raise ProviderError(self._load_error, self.source)
            try:
                data = self._fetch()
                try:
                    self._index(data)
                except (AttributeError, KeyError, TypeError, ValueError) as e:
                    raise ProviderError(f"Malformed web-features data: {e}", self.source) from e
            except ProviderError as e:
                # never serve a partial index
                self._by_key = {}
                self._features = {}
                self._load_error = e.message
                logger.warning("Platform data unavailable, using fallback table: %s", e.message)
                raise
            self._loaded = True
            logger.debug("Loaded %d features (%d compat keys) from %s",
                         len(self._features), len(self._by_key), self.source)

    def _index(self, data: Dict[str, Any]) -> None:
        features = data.get("features")
        if not isinstance(features, dict):
            raise ProviderError("web-features data has no 'features' table", self.source)

        for feature_id, feature in features.items():
            status = feature.get("status")
            # moved/split entries only redirect to other ids
            if not isinstance(status, dict):
                continue
            feature_status = AvailabilityStatus.from_baseline_record(status)
            compat_features = tuple(feature.get("compat_features") or ())
            self._features[feature_id] = FeatureRecord(
                id=feature_id,
                name=feature.get("name", feature_id),
                status=feature_status,
                description=feature.get("description", ""),
                group=feature.get("group"),
                compat_features=compat_features,
            )
            by_compat_key = status.get("by_compat_key") or {}
            for key in compat_features:
                if key in by_compat_key:
                    self._by_key[key] = AvailabilityStatus.from_baseline_record(by_compat_key[key])
                else:
                    self._by_key.setdefault(key, feature_status)

    def get_status(self, feature_key: str) -> Optional[AvailabilityStatus]:
        self._ensure_loaded()
        return self._by_key.get(feature_key)

    def get_feature(self, feature_id: str) -> Optional[FeatureRecord]:
        self._ensure_loaded()
        return self._features.get(feature_id)

    def iter_features(self) -> Iterator[FeatureRecord]:
        self._ensure_loaded()
        return iter(list(self._features.values()))
