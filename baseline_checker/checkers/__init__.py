"""
Checkers package: per-language feature usage extractors.
"""

from .css_checker import CSSChecker
from .js_checker import JavaScriptChecker

__all__ = [
    'CSSChecker',
    'JavaScriptChecker',
]
