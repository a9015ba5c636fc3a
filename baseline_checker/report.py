"""
Classification of resolved usages into issues, and the compatibility score.
"""

import math
from typing import Dict, Iterable, List, Optional, Union

from .issue import AvailabilityStatus, Issue, RequiredLevel, Severity, Tier, UsageRecord

UNKNOWN_MESSAGE = "Unknown Baseline status - feature may not be widely supported"
LIMITED_MESSAGE = "Limited availability - Not yet Baseline"

SCORE_WEIGHTS = {
    Tier.WIDELY: 1.0,
    Tier.NEWLY: 0.7,
    Tier.LIMITED: 0.3,
    Tier.UNKNOWN: 0.5,
}


def meets_level(tier: Tier, required_level: Union[RequiredLevel, str]) -> bool:
    """`high` accepts only widely available; `low` also accepts newly available."""
    level = RequiredLevel.parse(required_level)
    if level is RequiredLevel.HIGH:
        return tier is Tier.WIDELY
    return tier in (Tier.WIDELY, Tier.NEWLY)


def _since(date: Optional[str]) -> str:
    return date or "unknown date"


def classify(status: Optional[AvailabilityStatus], required_level: Union[RequiredLevel, str]):
    """Return (severity, message, compatible) for a status under a level."""
    if status is None or status.tier is Tier.UNKNOWN:
        return Severity.WARNING, UNKNOWN_MESSAGE, False

    compatible = meets_level(status.tier, required_level)
    if compatible:
        if status.tier is Tier.WIDELY:
            return Severity.INFO, f"Widely available (since {_since(status.since_high)})", True
        return Severity.INFO, f"Newly available (since {_since(status.since_low)})", True

    if status.tier is Tier.LIMITED:
        return Severity.ERROR, LIMITED_MESSAGE, False
    # only remaining incompatible case: newly available under `high`
    return Severity.WARNING, f"Newly available - Use with caution (since {_since(status.since_low)})", False


def generate_report(
    usage: UsageRecord,
    status: Optional[AvailabilityStatus],
    required_level: Union[RequiredLevel, str] = RequiredLevel.LOW,
) -> Issue:
    """Turn one resolved usage into an Issue."""
    severity, message, compatible = classify(status, required_level)
    return Issue(
        severity=severity,
        message=message,
        tier=status.tier if status is not None else Tier.UNKNOWN,
        support=status.support if status is not None else None,
        feature_key=usage.feature_key,
        compatible=compatible,
        line=usage.line,
        column=usage.column,
        property=usage.property,
        value=usage.value,
        api=usage.api,
    )


def calculate_score(issues: Iterable[Issue]) -> int:
    """Weighted mean of issue tiers scaled to 0-100, rounded half up."""
    issues = list(issues)
    if not issues:
        return 100
    total = sum(SCORE_WEIGHTS[issue.tier] for issue in issues)
    return int(math.floor(total / len(issues) * 100 + 0.5))


def summarize(issues: List[Issue]) -> Dict[str, int]:
    return {
        "total": len(issues),
        "errors": sum(1 for i in issues if i.severity is Severity.ERROR),
        "warnings": sum(1 for i in issues if i.severity is Severity.WARNING),
    }
