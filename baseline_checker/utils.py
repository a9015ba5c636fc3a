"""
Utility functions for the Baseline compatibility checker.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

from .parsing import CSS, JAVASCRIPT, TSX, TYPESCRIPT

_LEVEL_PREFIXES = {
    logging.DEBUG: ("\033[1m", "[DEBUG]"),
    logging.INFO: ("\033[1;34m", "[INFO]"),
    logging.WARNING: ("\033[1;33m", "[WARNING]"),
    logging.ERROR: ("\033[1;31m", "[ERROR]"),
    logging.CRITICAL: ("\033[1;31m", "[ERROR]"),
}
_RESET = "\033[0m"


def colors_enabled() -> bool:
    return not os.environ.get("BASELINE_NO_COLORS") and not os.environ.get("NO_COLOR")


def colorize(text: str, code: str) -> str:
    """Wrap text in an ANSI color sequence when colors are on."""
    if not colors_enabled():
        return text
    return f"{code}{text}{_RESET}"


class PrefixFormatter(logging.Formatter):
    """`[LEVEL] message` lines, bold/colored prefix on terminals."""

    def format(self, record: logging.LogRecord) -> str:
        color, prefix = _LEVEL_PREFIXES.get(record.levelno, ("", f"[{record.levelname}]"))
        if colors_enabled():
            prefix = f"{color}{prefix}{_RESET}"
        return f"{prefix} {super().format(record)}"


def configure_logging(level: Optional[int] = None) -> None:
    """Install the stderr handler on the package logger."""
    if level is None:
        level = logging.DEBUG if os.environ.get("BASELINE_DEBUG") else logging.WARNING
    logger = logging.getLogger("baseline_checker")
    for handler in list(logger.handlers):
        if getattr(handler, "_baseline_handler", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(PrefixFormatter("%(message)s"))
    handler._baseline_handler = True
    logger.addHandler(handler)
    logger.setLevel(level)


def detect_language(file_path: Union[str, Path]) -> str:
    """Detect the source grammar from the file extension."""
    ext = Path(file_path).suffix.lower()
    lang_map = {
        '.css': CSS,
        '.js': JAVASCRIPT,
        '.jsx': JAVASCRIPT,
        '.mjs': JAVASCRIPT,
        '.cjs': JAVASCRIPT,
        '.ts': TYPESCRIPT,
        '.tsx': TSX,
    }
    return lang_map.get(ext, 'unknown')


def file_type(language: str) -> Optional[str]:
    """Short result type: `css` or `js`."""
    if language == CSS:
        return "css"
    if language in (JAVASCRIPT, TYPESCRIPT, TSX):
        return "js"
    return None
