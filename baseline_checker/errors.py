"""
Error types for the Baseline compatibility checker.
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class BaselineCheckError(Exception):
    """Base class for all checker errors."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()


class ParseError(BaselineCheckError):
    """Source text could not be parsed; fatal to that file's analysis."""

    def __init__(self, message: str, file: Optional[str] = None, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message, "PARSE_ERROR", {"file": file, "line": line, "column": column})

    @property
    def line(self) -> Optional[int]:
        return self.context.get("line")

    @property
    def column(self) -> Optional[int]:
        return self.context.get("column")


class ValidationError(BaselineCheckError):
    """Bad policy or configuration value."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, "VALIDATION_ERROR", {"field": field, "value": value})


class FileError(BaselineCheckError):
    """File could not be read or is unsuitable for analysis."""

    def __init__(self, message: str, file_path: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message, "FILE_ERROR", {"filePath": file_path, "operation": operation})


class ProviderError(BaselineCheckError):
    """Platform data provider failed. Caught by the resolver, never surfaced."""

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message, "PROVIDER_ERROR", {"source": source})


def format_error(error: BaseException) -> str:
    """Format an error for display."""
    if not isinstance(error, BaselineCheckError):
        return f"{type(error).__name__}: {error}"

    output = f"{type(error).__name__}: {error.message}"
    ctx = error.context
    file = ctx.get("file") or ctx.get("filePath")
    if file:
        output += f"\n  File: {file}"
    if ctx.get("line"):
        output += f"\n  Line: {ctx['line']}"
        if ctx.get("column") is not None:
            output += f", Column: {ctx['column']}"
    if ctx.get("field"):
        output += f"\n  Field: {ctx['field']}"
    if os.environ.get("BASELINE_DEBUG") and error.__traceback__ is not None:
        import traceback
        output += "\n\nStack trace:\n" + "".join(traceback.format_tb(error.__traceback__))
    return output
