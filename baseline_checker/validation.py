"""
Input validation for levels, formats, content and file types.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .errors import ValidationError
from .issue import RequiredLevel

CSS_EXTENSIONS = (".css",)
JS_EXTENSIONS = (".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx")
OUTPUT_FORMATS = ("text", "json", "markdown")
MAX_CONTENT_LENGTH = 50 * 1024 * 1024


def validate_level(level: Any) -> RequiredLevel:
    """Parse `low`/`high`/`newly`/`widely` or raise ValidationError."""
    try:
        return RequiredLevel.parse(level)
    except ValueError:
        raise ValidationError(
            f"Invalid baseline level '{level}'. Must be one of: low, high, newly, widely",
            "requiredLevel", level,
        ) from None


def validate_output_format(fmt: str) -> str:
    if fmt not in OUTPUT_FORMATS:
        raise ValidationError(
            f"Invalid output format '{fmt}'. Must be one of: {', '.join(OUTPUT_FORMATS)}",
            "format", fmt,
        )
    return fmt


def validate_content_length(content: Any, max_length: int = MAX_CONTENT_LENGTH) -> str:
    if not isinstance(content, str):
        raise ValidationError("Content must be a string", "content", type(content).__name__)
    if len(content) > max_length:
        raise ValidationError(
            f"Content too large: {len(content)} characters. Maximum: {max_length}",
            "contentLength", len(content),
        )
    return content


def validate_file_extension(file_path: str, allowed: Optional[Iterable[str]] = None) -> str:
    """Return the lowercased extension if it is one we analyze."""
    allowed = tuple(allowed) if allowed is not None else CSS_EXTENSIONS + JS_EXTENSIONS
    ext = Path(file_path).suffix.lower()
    if ext not in allowed:
        raise ValidationError(
            f"File extension '{ext}' not allowed. Allowed: {', '.join(allowed)}",
            "extension", ext,
        )
    return ext


def validate_options(options: Dict[str, Any]) -> Dict[str, Any]:
    """Validate CLI/API options before any analysis starts."""
    validated = dict(options)
    if options.get("level") is not None:
        validated["level"] = validate_level(options["level"])
    if options.get("format") is not None:
        validated["format"] = validate_output_format(options["format"])
    if options.get("css_only") and options.get("js_only"):
        raise ValidationError("--css-only and --js-only are mutually exclusive", "cssOnly", True)
    batch_size = options.get("batch_size")
    if batch_size is not None and (not isinstance(batch_size, int) or batch_size <= 0):
        raise ValidationError("Batch size must be a positive integer", "batchSize", batch_size)
    return validated
