"""
Main checker class that coordinates extraction, resolution and reporting.
"""

import dataclasses
import fnmatch
import glob
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .checkers import CSSChecker, JavaScriptChecker
from .config import PatternSettings, Settings
from .errors import BaselineCheckError, FileError
from .issue import Issue, RequiredLevel, Severity, UsageKind, UsageRecord
from .lru_cache import LRUCache
from .parsing import CSS, JAVASCRIPT, TSX, TYPESCRIPT
from .provider import WebFeaturesProvider
from .report import calculate_score, generate_report, summarize
from .resolver import Resolution, StatusResolver
from .utils import detect_language, file_type
from .validation import CSS_EXTENSIONS, JS_EXTENSIONS, validate_file_extension, validate_level

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class FileResult:
    """Analysis outcome for one file. Failed files carry no issues."""
    file: str
    type: Optional[str]
    issues: List[Issue] = field(default_factory=list)
    failed: bool = False
    error: Optional[str] = None

    @property
    def summary(self) -> Dict[str, int]:
        return summarize(self.issues)

    def visible_issues(self, errors_only: bool = False) -> List[Issue]:
        if not errors_only:
            return list(self.issues)
        return [i for i in self.issues if i.severity is Severity.ERROR]

    def to_dict(self, errors_only: bool = False) -> Dict[str, Any]:
        issues = self.visible_issues(errors_only)
        data: Dict[str, Any] = {
            "file": self.file,
            "type": self.type,
            "issues": [i.to_dict() for i in issues],
            "summary": summarize(issues),
        }
        if self.failed:
            data["failed"] = True
            data["error"] = self.error
        return data


def create_resolver(settings: Settings) -> StatusResolver:
    """Build a resolver with caches and provider sized from settings."""
    provider = None
    if settings.provider.data_path or settings.provider.data_url:
        provider = WebFeaturesProvider(
            data_path=settings.provider.data_path,
            data_url=settings.provider.data_url,
            timeout=settings.provider.timeout,
        )
    return StatusResolver(
        provider=provider,
        bcd_cache=LRUCache(settings.cache.bcd_cache_size),
        feature_cache=LRUCache(settings.cache.feature_cache_size),
    )


class BaselineChecker:
    """Main checker class for Baseline compatibility."""

    def __init__(self, settings: Optional[Settings] = None, resolver: Optional[StatusResolver] = None):
        self.settings = settings or Settings()
        self.resolver = resolver or create_resolver(self.settings)
        self.required_level = validate_level(self.settings.required_level)

    def _level(self, level: Optional[Union[RequiredLevel, str]]) -> RequiredLevel:
        return self.required_level if level is None else validate_level(level)

    def _resolve(self, usage: UsageRecord) -> Resolution:
        if usage.kind is UsageKind.JS_API:
            return self.resolver.check_javascript_api(usage.api)
        if usage.kind is UsageKind.CSS_AT_RULE:
            return Resolution(usage.feature_key, self.resolver.resolve_status(usage.feature_key))
        return self.resolver.check_css_property_value(usage.property, usage.value)

    def _report(self, usages: Iterable[UsageRecord], level: RequiredLevel) -> List[Issue]:
        issues = []
        for usage in usages:
            resolution = self._resolve(usage)
            if resolution.feature_key != usage.feature_key:
                usage = dataclasses.replace(usage, feature_key=resolution.feature_key)
            issues.append(generate_report(usage, resolution.status, level))
        return issues

    def analyze_css(self, text: str, file_path: Optional[str] = None,
                    level: Optional[Union[RequiredLevel, str]] = None) -> List[Issue]:
        """Issues for CSS source text. Raises ParseError on invalid CSS."""
        usages = CSSChecker().extract(text, file_path)
        if not self.settings.analysis.check_at_rules:
            usages = [u for u in usages if u.kind is not UsageKind.CSS_AT_RULE]
        return self._report(usages, self._level(level))

    def analyze_js(self, text: str, dialect: str = TSX, file_path: Optional[str] = None,
                   level: Optional[Union[RequiredLevel, str]] = None) -> List[Issue]:
        """Issues for JavaScript/TypeScript source text."""
        checker = JavaScriptChecker(dialect=dialect, strict=self.settings.analysis.strict_mode)
        usages = checker.extract(text, file_path)
        return self._report(usages, self._level(level))

    def analyze_content(self, text: str, language: str, file_path: Optional[str] = None,
                        level: Optional[Union[RequiredLevel, str]] = None) -> List[Issue]:
        """Dispatch on language: css, js/javascript, typescript or tsx."""
        language = language.lower()
        if language == CSS:
            return self.analyze_css(text, file_path, level)
        if language in ("js", "jsx"):
            language = TSX
        if language in (JAVASCRIPT, TYPESCRIPT, TSX):
            return self.analyze_js(text, language, file_path, level)
        raise FileError(f"Unsupported language: {language}", file_path, "analyze")

    def analyze_file(self, file_path: PathLike, level: Optional[Union[RequiredLevel, str]] = None) -> FileResult:
        """Check a file. Raises FileError, ValidationError or ParseError."""
        path = Path(file_path)
        validate_file_extension(str(path))
        if not path.is_file():
            raise FileError(f"File not found: {path}", str(path), "read")
        size = path.stat().st_size
        max_size = self.settings.analysis.max_file_size
        if size > max_size:
            raise FileError(f"File too large: {size} bytes. Maximum: {max_size}", str(path), "read")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileError(f"Could not read file: {e}", str(path), "read") from e

        language = detect_language(path)
        issues = self.analyze_content(text, language, str(path), level)
        return FileResult(file=str(path), type=file_type(language), issues=issues)

    def _analyze_safely(self, file_path: PathLike, level: Optional[Union[RequiredLevel, str]]) -> FileResult:
        try:
            return self.analyze_file(file_path, level)
        except BaselineCheckError as e:
            logger.error("Error analyzing %s: %s", file_path, e.message)
            return FileResult(str(file_path), file_type(detect_language(file_path)), failed=True, error=e.message)
        except Exception as e:
            logger.exception("Unexpected error analyzing %s", file_path)
            return FileResult(str(file_path), file_type(detect_language(file_path)), failed=True, error=str(e))

    def check_file(self, file_path: PathLike, level: Optional[Union[RequiredLevel, str]] = None) -> FileResult:
        """Like analyze_file, but failures become a failed FileResult."""
        return self._analyze_safely(file_path, level)

    def check_files(
        self,
        file_paths: Sequence[PathLike],
        batch_size: Optional[int] = None,
        level: Optional[Union[RequiredLevel, str]] = None,
    ) -> List[FileResult]:
        """Check files concurrently in fixed-size batches.

        Results come back in input order. A file that fails to read or parse,
        or runs past `analysis.timeout`, gets a failure marker instead of
        aborting the batch.
        """
        batch_size = batch_size or self.settings.analysis.batch_size
        timeout = self.settings.analysis.timeout
        paths = list(file_paths)
        results: List[FileResult] = []
        if not paths:
            return results

        for start in range(0, len(paths), batch_size):
            batch = paths[start:start + batch_size]
            results.extend(self._check_batch(batch, level, timeout))
            logger.debug("Processed %d/%d files", min(start + batch_size, len(paths)), len(paths))
        return results

    def _check_batch(self, batch: Sequence[PathLike], level, timeout: float) -> List[FileResult]:
        # one worker per file; a worker stuck past the deadline stays with this batch
        executor = ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix="baseline")
        results: List[FileResult] = []
        try:
            futures = [executor.submit(self._analyze_safely, p, level) for p in batch]
            deadline = time.monotonic() + timeout
            for path, future in zip(batch, futures):
                try:
                    results.append(future.result(timeout=max(0.0, deadline - time.monotonic())))
                except FutureTimeoutError:
                    logger.error("Analysis of %s timed out after %ss", path, timeout)
                    results.append(FileResult(
                        str(path), file_type(detect_language(path)),
                        failed=True, error=f"Analysis timed out after {timeout}s",
                    ))
        finally:
            executor.shutdown(wait=False)
        return results

    @staticmethod
    def aggregate(results: Sequence[FileResult], with_score: bool = True, errors_only: bool = False) -> Dict[str, Any]:
        """`{results, score}` wire format. The score counts every issue."""
        score = None
        if with_score:
            score = calculate_score(i for r in results if not r.failed for i in r.issues)
        return {
            "results": [r.to_dict(errors_only) for r in results],
            "score": score,
        }


def _matches(rel_posix: str, patterns: Iterable[str]) -> bool:
    target = "/" + rel_posix
    return any(fnmatch.fnmatch(target, p) or fnmatch.fnmatch(rel_posix, p) for p in patterns)


def discover_files(
    paths: Sequence[PathLike],
    patterns: Optional[PatternSettings] = None,
    css_only: bool = False,
    js_only: bool = False,
) -> List[Path]:
    """Expand files, directories and globs into analyzable source files."""
    patterns = patterns or PatternSettings()
    include: List[str] = []
    extensions: tuple = ()
    if not js_only:
        include += patterns.css
        extensions += CSS_EXTENSIONS
    if not css_only:
        include += patterns.js
        extensions += JS_EXTENSIONS

    found: Dict[Path, None] = {}
    for raw in paths:
        path = Path(raw)
        if path.is_file():
            if path.suffix.lower() in extensions:
                found[path] = None
            continue
        if path.is_dir():
            for dirpath, dirnames, filenames in os.walk(path):
                base = Path(dirpath)
                rel_dir = base.relative_to(path).as_posix()
                rel_dir = "" if rel_dir == "." else rel_dir + "/"
                dirnames[:] = sorted(
                    d for d in dirnames if not _matches(f"{rel_dir}{d}/", patterns.ignore)
                )
                for name in sorted(filenames):
                    rel = f"{rel_dir}{name}"
                    if _matches(rel, include) and not _matches(rel, patterns.ignore):
                        found[base / name] = None
            continue
        if any(ch in str(raw) for ch in "*?["):
            for name in sorted(glob.glob(str(raw), recursive=True)):
                match = Path(name)
                if match.is_file() and match.suffix.lower() in extensions:
                    if not _matches(match.as_posix(), patterns.ignore):
                        found[match] = None
            continue
        logger.warning("Path not found: %s", raw)
    return list(found)
