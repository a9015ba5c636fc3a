import pytest

from baseline_checker.config import ProviderSettings, Settings
from baseline_checker.issue import AvailabilityStatus, FeatureRecord, Tier
from baseline_checker.lru_cache import LRUCache
from baseline_checker.main_checker import BaselineChecker
from baseline_checker.provider import StaticProvider
from baseline_checker.resolver import StatusResolver

SUPPORT = {"chrome": "120", "edge": "120", "firefox": "121", "safari": "17.2"}

STATUSES = {
    "css.properties.anchor-name": {"baseline": False, "support": {"chrome": "125", "edge": "125"}},
    "css.properties.text-wrap.balance": {
        "baseline": "low", "baseline_low_date": "2024-05-13", "support": SUPPORT,
    },
    "javascript.builtins.Array.findLast": {
        "baseline": "high", "baseline_low_date": "2022-08-23", "baseline_high_date": "2025-02-23",
        "support": SUPPORT,
    },
}


def _feature(feature_id, name, tier, group, description="", since_low=None, since_high=None):
    return FeatureRecord(
        id=feature_id,
        name=name,
        status=AvailabilityStatus(tier=tier, since_low=since_low, since_high=since_high, support=SUPPORT),
        description=description,
        group=group,
    )


FEATURES = {
    "grid": _feature("grid", "Grid", Tier.WIDELY, "css", "Two-dimensional layout.",
                     since_low="2017-10-17", since_high="2020-04-17"),
    "text-wrap-balance": _feature("text-wrap-balance", "text-wrap: balance", Tier.NEWLY, "css",
                                  "Balanced line lengths for headings.", since_low="2024-05-13"),
    "anchor-positioning": _feature("anchor-positioning", "Anchor positioning", Tier.LIMITED, "css",
                                   "Position elements relative to an anchor."),
    "array-findlast": _feature("array-findlast", "findLast()", Tier.WIDELY, ["javascript", "array"],
                               "Search an array from the end.", since_low="2022-08-23", since_high="2025-02-23"),
}


@pytest.fixture
def offline_settings():
    """Settings that never reach the network."""
    return Settings(provider=ProviderSettings(data_url=None))


@pytest.fixture
def provider():
    return StaticProvider(STATUSES, FEATURES)


@pytest.fixture
def resolver(provider):
    return StatusResolver(provider=provider, bcd_cache=LRUCache(100), feature_cache=LRUCache(100))


@pytest.fixture
def fallback_resolver():
    """Resolver with no provider: fallback table only."""
    return StatusResolver(bcd_cache=LRUCache(100), feature_cache=LRUCache(100))


@pytest.fixture
def checker(offline_settings, resolver):
    return BaselineChecker(offline_settings, resolver=resolver)


@pytest.fixture(autouse=True)
def _no_colors(monkeypatch):
    monkeypatch.setenv("BASELINE_NO_COLORS", "1")
