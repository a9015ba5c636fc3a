"""
CSS usage extractor: declarations, allowlisted keyword values and at-rules.
"""

import logging
from typing import Optional, Set, Tuple

from ..catalog import css_keywords
from ..checker_base import BaseChecker
from ..errors import ParseError
from ..issue import UsageKind
from ..parsing import CSS, error_nodes, walk

logger = logging.getLogger(__name__)

_BODY_TYPES = ("block", "keyframe_block_list")


class CSSChecker(BaseChecker):
    """Extracts `css.properties.*` and `css.at-rules.*` usages.

    Positions are those of the declaration (or at-rule): 1-based line,
    1-based character column.
    """

    language = CSS

    def __init__(self, keywords: Optional[Set[str]] = None):
        super().__init__()
        self.keywords = frozenset(keywords) if keywords is not None else css_keywords().keywords

    def _run_checks(self):
        tree = self.source.parse(CSS)
        root = tree.root_node
        if root.has_error:
            self._handle_syntax_errors(root)

        seen: Set[Tuple[int, str]] = set()
        for node in walk(root):
            if node.type == "declaration":
                self._check_declaration(node, seen)
            elif self._is_at_rule(node):
                self._check_at_rule(node)

    def _handle_syntax_errors(self, root):
        """Raise for broken rule structure; log and skip prelude or selector errors.

        The grammar lags behind newer at-rule preludes (named container
        queries, media ranges, `@import ... layer()`, page selectors), which
        show up as ERROR nodes ahead of an otherwise well-formed block.
        """
        errors = list(error_nodes(root))
        for bad in errors:
            if not self._in_prelude(bad):
                snippet = self.source.node_text(bad)[:40].strip()
                raise ParseError(f"CSS parsing failed: unexpected input {snippet!r}", self.file_path)
        for bad in errors:
            line, column = self.source.position(bad, one_based_column=True)
            logger.warning(
                "Unsupported CSS syntax in %s at %d:%d (%r); skipped",
                self.file_path or "<content>", line, column, self.source.node_text(bad)[:40].strip(),
            )

    def _in_prelude(self, error) -> bool:
        """True when the error sits in a selector or at-rule prelude."""
        start = error.start_byte
        node = error.parent
        while node is not None:
            kind = node.type
            if kind in _BODY_TYPES or kind in ("declaration", "stylesheet"):
                return False
            if kind == "selectors":
                return True
            if kind == "rule_set" or self._is_at_rule(node):
                body = next((c for c in node.children if c.type in _BODY_TYPES), None)
                if body is None:
                    # statement at-rules such as @import end at ";"
                    return kind != "rule_set"
                return start < body.start_byte
            node = node.parent
        return False

    def _check_declaration(self, node, seen: Set[Tuple[int, str]]):
        name_node = next((c for c in node.children if c.type == "property_name"), None)
        if name_node is None:
            return
        prop = self.source.node_text(name_node).strip().lower()
        # custom properties are author-defined, not platform features
        if prop.startswith("--"):
            return
        line, column = self.source.position(node, one_based_column=True)

        for value_node in walk(node):
            if value_node.type != "plain_value":
                continue
            value = self.source.node_text(value_node).lower()
            if value not in self.keywords:
                continue
            self._add_usage(
                f"css.properties.{prop}.{value}", line, column, f"{prop}: {value}",
                UsageKind.CSS_VALUE, property=prop, value=value,
            )
            seen.add((line, prop))

        if (line, prop) in seen:
            return
        self._add_usage(
            f"css.properties.{prop}", line, column, prop,
            UsageKind.CSS_PROPERTY, property=prop,
        )
        seen.add((line, prop))

    def _is_at_rule(self, node) -> bool:
        if node.type != "at_rule" and not node.type.endswith("_statement"):
            return False
        return bool(node.children) and self.source.node_text(node.children[0]).startswith("@")

    def _check_at_rule(self, node):
        name = self.source.node_text(node.children[0])[1:].lower()
        line, column = self.source.position(node, one_based_column=True)
        logger.debug("Found at-rule @%s at %d:%d", name, line, column)
        self._add_usage(
            f"css.at-rules.{name}", line, column, f"@{name}",
            UsageKind.CSS_AT_RULE, property=f"@{name}",
        )
