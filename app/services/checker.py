"""Checker service: wraps baseline_checker and maps to API models."""

import logging
from typing import List, Optional

from baseline_checker.config import Settings
from baseline_checker.issue import FeatureRecord, Tier
from baseline_checker.main_checker import BaselineChecker, FileResult, discover_files
from baseline_checker.validation import CSS_EXTENSIONS, validate_content_length, validate_level

from ..schemas import CacheStatsOut, FeatureOut, FileResultOut, IssueOut, ScanResponse

logger = logging.getLogger(__name__)

_LANGUAGE_TYPES = {
    "css": "css",
    "js": "js",
    "jsx": "js",
    "javascript": "js",
    "typescript": "js",
    "tsx": "js",
}


def _result_to_out(result: FileResult) -> FileResultOut:
    data = result.to_dict()
    return FileResultOut(
        file=data["file"],
        type=data["type"],
        issues=[IssueOut.model_validate(i) for i in data["issues"]],
        summary=data["summary"],
        failed=result.failed,
        error=result.error,
    )


def _feature_to_out(feature: FeatureRecord) -> FeatureOut:
    status = feature.status
    return FeatureOut(
        id=feature.id,
        name=feature.name,
        description=feature.description or "",
        group=feature.group,
        baseline=status.tier.wire_value,
        baseline_low_date=status.since_low,
        baseline_high_date=status.since_high,
        support=dict(status.support),
    )


class CheckerService:
    """Wraps BaselineChecker for use by the API.

    One service per process, so the resolver caches are shared across
    requests.
    """

    def __init__(self, settings: Optional[Settings] = None, checker: Optional[BaselineChecker] = None):
        self.checker = checker or BaselineChecker(settings)
        self.settings = self.checker.settings

    def check_code(self, code: str, language: str, filename: str = "input",
                   level: Optional[str] = None) -> FileResultOut:
        """Analyze source text. ParseError and ValidationError propagate."""
        validate_content_length(code, self.settings.analysis.max_file_size)
        if level is not None:
            level = validate_level(level)
        issues = self.checker.analyze_content(code, language, filename, level)
        result = FileResult(file=filename, type=_LANGUAGE_TYPES.get(language.lower()), issues=issues)
        return _result_to_out(result)

    def scan(self, path: str, level: Optional[str] = None) -> ScanResponse:
        """Analyze every matching file under `path`."""
        if level is not None:
            level = validate_level(level)
        files = discover_files([path], self.settings.patterns, self.settings.css_only, self.settings.js_only)
        logger.info("Scanning %s: %d files", path, len(files))
        results = self.checker.check_files(files, level=level)
        aggregate = BaselineChecker.aggregate(results)
        css_files = sum(1 for f in files if f.suffix.lower() in CSS_EXTENSIONS)
        return ScanResponse(
            results=[_result_to_out(r) for r in results],
            score=aggregate["score"],
            total_files=len(files),
            css_files=css_files,
            js_files=len(files) - css_files,
            failed_files=sum(1 for r in results if r.failed),
        )

    def feature(self, feature_id: str) -> Optional[FeatureOut]:
        record = self.checker.resolver.get_feature_status(feature_id)
        return _feature_to_out(record) if record is not None else None

    def features(self, status: Optional[Tier] = None, group: Optional[str] = None,
                 query: Optional[str] = None) -> List[FeatureOut]:
        """Features filtered by tier, group and search text (all optional)."""
        resolver = self.checker.resolver
        # an empty query matches every feature
        records = resolver.search_features(query or "")
        if status is not None:
            records = [f for f in records if f.status.tier is status]
        if group:
            ids = {f.id for f in resolver.features_by_group(group)}
            records = [f for f in records if f.id in ids]
        return [_feature_to_out(f) for f in records]

    def provider_name(self) -> str:
        provider = self.checker.resolver.provider
        return provider.name if provider is not None else "fallback"

    def cache_stats(self) -> CacheStatsOut:
        return CacheStatsOut.model_validate(self.checker.resolver.get_cache_stats())

    def clear_cache(self) -> None:
        self.checker.resolver.clear_cache()
        logger.info("Resolver caches cleared")

