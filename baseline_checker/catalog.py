"""
Static data assets: fallback availability table, CSS keyword allowlist and
the JavaScript API catalog. Loaded once into immutable structures.
"""

import json
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, NamedTuple, Tuple

from .issue import AvailabilityStatus, Tier

# Support map used for properties that predate every tracked browser release.
COMMON_PROPERTY_SUPPORT = {
    "chrome": "1",
    "chrome_android": "18",
    "edge": "12",
    "firefox": "1",
    "firefox_android": "4",
    "safari": "1",
    "safari_ios": "1",
}
COMMON_PROPERTY_SINCE = "2012-01-01"


def _load_json(name: str):
    with resources.files("baseline_checker").joinpath("data").joinpath(name).open("r", encoding="utf-8") as f:
        return json.load(f)


class CSSKeywords(NamedTuple):
    keywords: FrozenSet[str]
    common_properties: FrozenSet[str]


class JSCatalog(NamedTuple):
    """API paths plus the lookup maps the JS extractor matches against."""
    apis: Tuple[str, ...]
    # method name -> API paths, for prototype methods matched by name alone
    prototype_methods: Mapping[str, Tuple[str, ...]]
    # (owner global, member) -> API path
    owner_members: Mapping[Tuple[str, str], str]
    # bare global names (functions, constructors, values)
    globals: FrozenSet[str]


@lru_cache(maxsize=None)
def css_keywords() -> CSSKeywords:
    data = _load_json("css_keywords.json")
    return CSSKeywords(
        keywords=frozenset(k.lower() for k in data["keywords"]),
        common_properties=frozenset(data["common_properties"]),
    )


@lru_cache(maxsize=None)
def js_catalog() -> JSCatalog:
    data = _load_json("js_apis.json")
    apis = tuple(dict.fromkeys(data["apis"]))
    proto_owners = set(data["prototype_method_owners"])
    owner_globals = set(data["owner_globals"])

    prototype_methods: Dict[str, list] = {}
    owner_members: Dict[Tuple[str, str], str] = {}
    bare = set()
    for path in apis:
        parts = path.split(".")
        if len(parts) == 1:
            bare.add(path)
            continue
        owner, member = parts[0], parts[-1]
        if owner in proto_owners and parts[1] == "prototype":
            prototype_methods.setdefault(member, []).append(path)
        elif owner in owner_globals:
            owner_members.setdefault((owner, member), path)

    return JSCatalog(
        apis=apis,
        prototype_methods=MappingProxyType({k: tuple(v) for k, v in prototype_methods.items()}),
        owner_members=MappingProxyType(owner_members),
        globals=frozenset(bare),
    )


@lru_cache(maxsize=None)
def fallback_table() -> Mapping[str, AvailabilityStatus]:
    """Fallback statuses keyed by feature key.

    Common CSS properties without an explicit entry are treated as widely
    available since the earliest tracked date.
    """
    table: Dict[str, AvailabilityStatus] = {}
    for prop in css_keywords().common_properties:
        table[f"css.properties.{prop}"] = AvailabilityStatus(
            tier=Tier.WIDELY,
            since_high=COMMON_PROPERTY_SINCE,
            support=COMMON_PROPERTY_SUPPORT,
        )
    for key, record in _load_json("fallbacks.json").items():
        table[key] = AvailabilityStatus.from_baseline_record(record)
    return MappingProxyType(table)


def api_path_to_feature_key(api_path: str) -> str:
    """Translate a catalog API path into a feature key.

    Array.prototype.at -> javascript.builtins.Array.at
    Promise.allSettled -> javascript.builtins.Promise.allSettled
    structuredClone    -> javascript.builtins.structuredClone
    """
    if ".prototype." in api_path:
        owner, _, method = api_path.split(".", 2)
        return f"javascript.builtins.{owner}.{method}"
    return f"javascript.builtins.{api_path}"
