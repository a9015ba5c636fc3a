"""
Base extractor class for web-platform feature usage.
"""

from typing import List, Optional

from .issue import UsageKind, UsageRecord
from .parsing import SourceText


class BaseChecker:
    """Base class for all usage extractors."""

    language: str = ""

    def __init__(self):
        self.usages: List[UsageRecord] = []
        self.source: Optional[SourceText] = None
        self.file_path: Optional[str] = None

    def extract(self, text: str, file_path: Optional[str] = None) -> List[UsageRecord]:
        """Parse the text and return its feature usages in document order."""
        self.source = SourceText(text)
        self.file_path = file_path
        self.usages = []
        self._run_checks()
        return self.usages

    def _run_checks(self):
        """Override in subclasses to implement specific extraction."""
        pass

    def _add_usage(
        self,
        feature_key: str,
        line: Optional[int],
        column: Optional[int],
        display_name: str,
        kind: UsageKind,
        property: Optional[str] = None,
        value: Optional[str] = None,
        api: Optional[str] = None,
    ):
        """Add a usage to the list."""
        self.usages.append(
            UsageRecord(feature_key, line, column, display_name, kind, property, value, api)
        )
