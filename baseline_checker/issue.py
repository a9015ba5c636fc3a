"""
Issue data models for the Baseline compatibility checker.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union


class Severity(Enum):
    """Issue severity levels."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Tier(Enum):
    """Cross-browser availability tier of a web feature."""
    WIDELY = "high"
    NEWLY = "low"
    LIMITED = "limited"
    UNKNOWN = "unknown"

    @property
    def wire_value(self) -> Union[str, bool, None]:
        """Value written to the `baseline` field of JSON output."""
        if self is Tier.LIMITED:
            return False
        if self is Tier.UNKNOWN:
            return None
        return self.value

    @classmethod
    def from_baseline(cls, baseline: Any) -> "Tier":
        """Map a web-features `baseline` value ("high", "low", false) to a tier."""
        if baseline == "high":
            return cls.WIDELY
        if baseline == "low":
            return cls.NEWLY
        if baseline is False:
            return cls.LIMITED
        return cls.UNKNOWN


class RequiredLevel(Enum):
    """Minimum tier a feature must reach to count as compatible."""
    LOW = "low"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Union[str, "RequiredLevel"]) -> "RequiredLevel":
        """Accept `low`/`high` as well as the CLI spellings `newly`/`widely`."""
        if isinstance(value, cls):
            return value
        aliases = {"newly": cls.LOW, "widely": cls.HIGH}
        text = str(value).strip().lower()
        if text in aliases:
            return aliases[text]
        return cls(text)


class UsageKind(Enum):
    """What shape of source construct produced a usage."""
    CSS_PROPERTY = "css-property"
    CSS_VALUE = "css-value"
    CSS_AT_RULE = "css-at-rule"
    JS_API = "javascript-api"


@dataclass(frozen=True)
class AvailabilityStatus:
    """Resolved availability of one feature key."""
    tier: Tier
    since_low: Optional[str] = None
    since_high: Optional[str] = None
    support: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "support", MappingProxyType(dict(self.support)))

    @classmethod
    def from_baseline_record(cls, record: Mapping[str, Any]) -> "AvailabilityStatus":
        """Build a status from a web-features style record."""
        return cls(
            tier=Tier.from_baseline(record.get("baseline")),
            since_low=record.get("baseline_low_date"),
            since_high=record.get("baseline_high_date"),
            support=record.get("support") or {},
        )


@dataclass(frozen=True)
class UsageRecord:
    """One occurrence of a feature in source text."""
    feature_key: str
    line: Optional[int]
    column: Optional[int]
    display_name: str
    kind: UsageKind
    property: Optional[str] = None
    value: Optional[str] = None
    api: Optional[str] = None


@dataclass
class Issue:
    """Represents a classified feature usage."""
    severity: Severity
    message: str
    tier: Tier
    support: Optional[Mapping[str, str]]
    feature_key: str
    compatible: bool
    line: Optional[int]
    column: Optional[int]
    property: Optional[str] = None
    value: Optional[str] = None
    api: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the field names downstream tooling reads."""
        data: Dict[str, Any] = {"line": self.line, "column": self.column}
        if self.api is not None:
            data["api"] = self.api
        else:
            data["property"] = self.property
            data["value"] = self.value
        data.update({
            "severity": self.severity.value,
            "message": self.message,
            "baseline": self.tier.wire_value,
            "support": dict(self.support) if self.support is not None else None,
            "bcdKey": self.feature_key,
            "compatible": self.compatible,
        })
        return data


@dataclass
class FeatureRecord:
    """A whole web feature as listed by the platform data provider."""
    id: str
    name: str
    status: AvailabilityStatus
    description: str = ""
    group: Optional[Union[str, list]] = None
    compat_features: tuple = ()
