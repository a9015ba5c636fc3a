"""
JavaScript/TypeScript usage extractor.

Matches syntax against the JS API catalog:

- ``x.method`` where ``method`` is an Array/String prototype method (name only)
- ``Owner.member`` for catalog owner globals (Promise, Object, Map, ...)
- ``name(...)`` calls of catalog globals
- ``new Name(...)`` of catalog globals
- bare referenced identifiers naming catalog globals

Each API path is reported once per file, at its first occurrence in document
order. Lines are 1-based, columns 0-based.
"""

import logging
from typing import Optional, Set

from ..catalog import JSCatalog, api_path_to_feature_key, js_catalog
from ..checker_base import BaseChecker
from ..errors import ParseError
from ..issue import UsageKind
from ..parsing import JAVASCRIPT, TSX, TYPESCRIPT, first_error, walk

logger = logging.getLogger(__name__)

DIALECTS = (JAVASCRIPT, TYPESCRIPT, TSX)

# (parent type, field) pairs where an identifier declares a name
_BINDING_FIELDS = {
    ("variable_declarator", "name"),
    ("function_declaration", "name"),
    ("function_expression", "name"),
    ("function", "name"),
    ("generator_function_declaration", "name"),
    ("generator_function", "name"),
    ("class_declaration", "name"),
    ("class", "name"),
    ("arrow_function", "parameter"),
    ("catch_clause", "parameter"),
    ("assignment_pattern", "left"),
    ("for_in_statement", "left"),
    ("required_parameter", "pattern"),
    ("optional_parameter", "pattern"),
    ("pair_pattern", "value"),
    ("labeled_statement", "label"),
}

# Parents whose identifier children are always bindings or non-references
_BINDING_PARENTS = {
    "formal_parameters",
    "array_pattern",
    "object_pattern",
    "rest_pattern",
    "import_specifier",
    "import_clause",
    "namespace_import",
    "namespace_export",
    "jsx_opening_element",
    "jsx_closing_element",
    "jsx_self_closing_element",
    "nested_identifier",
}


class JavaScriptChecker(BaseChecker):
    """Extracts `javascript.builtins.*` usages."""

    def __init__(self, dialect: str = TSX, strict: bool = False, catalog: Optional[JSCatalog] = None):
        super().__init__()
        if dialect not in DIALECTS:
            raise ValueError(f"Unknown JavaScript dialect: {dialect}")
        self.language = dialect
        self.strict = strict
        self.catalog = catalog or js_catalog()
        self._seen: Set[str] = set()

    def _run_checks(self):
        tree = self.source.parse(self.language)
        root = tree.root_node
        if root.has_error:
            self._handle_syntax_errors(root)

        self._seen = set()
        for node in walk(root):
            kind = node.type
            if kind == "member_expression":
                self._check_member(node)
            elif kind == "call_expression":
                self._check_callee(node, "function")
            elif kind == "new_expression":
                self._check_callee(node, "constructor")
            elif kind == "identifier":
                self._check_identifier(node)
            elif kind == "shorthand_property_identifier":
                name = self.source.node_text(node)
                if name in self.catalog.globals:
                    self._emit(name, node)

    def _handle_syntax_errors(self, root):
        bad = first_error(root)
        line, column = self.source.position(bad)
        statements = [c for c in root.named_children if c.type != "comment"]
        unrecoverable = root.type == "ERROR" or (
            bool(statements) and all(c.type == "ERROR" for c in statements)
        )
        if unrecoverable or self.strict:
            raise ParseError(
                f"JavaScript parsing failed: unexpected token at ({line}:{column})",
                self.file_path, line, column,
            )
        logger.warning(
            "Syntax errors in %s (first at %d:%d); analyzing recovered code",
            self.file_path or "<content>", line, column,
        )

    def _emit(self, api_path: str, node):
        if api_path in self._seen:
            return
        self._seen.add(api_path)
        line, column = self.source.position(node)
        self._add_usage(
            api_path_to_feature_key(api_path), line, column, api_path,
            UsageKind.JS_API, api=api_path,
        )

    def _check_member(self, node):
        prop = node.child_by_field_name("property")
        obj = node.child_by_field_name("object")
        if prop is None or prop.type != "property_identifier":
            return
        member = self.source.node_text(prop)

        for api_path in self.catalog.prototype_methods.get(member, ()):
            self._emit(api_path, node)

        if obj is not None and obj.type == "identifier":
            owner = self.source.node_text(obj)
            api_path = self.catalog.owner_members.get((owner, member))
            if api_path:
                self._emit(api_path, node)

    def _check_callee(self, node, field: str):
        callee = node.child_by_field_name(field)
        if callee is None or callee.type != "identifier":
            return
        name = self.source.node_text(callee)
        if name in self.catalog.globals:
            self._emit(name, node)

    def _check_identifier(self, node):
        name = self.source.node_text(node)
        if name not in self.catalog.globals:
            return
        if self._is_binding(node):
            return
        self._emit(name, node)

    @staticmethod
    def _is_binding(node) -> bool:
        parent = node.parent
        if parent is None:
            return False
        if parent.type in _BINDING_PARENTS:
            return True
        for field in ("name", "parameter", "left", "pattern", "value", "label"):
            if (parent.type, field) not in _BINDING_FIELDS:
                continue
            target = parent.child_by_field_name(field)
            if target is not None and target.id == node.id:
                return True
        return False
