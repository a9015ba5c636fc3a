"""
tree-sitter setup and source position helpers shared by the extractors.
"""

import threading
from functools import lru_cache
from typing import Iterator, List, Tuple

import tree_sitter_css
import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

CSS = "css"
JAVASCRIPT = "javascript"
TYPESCRIPT = "typescript"
TSX = "tsx"

_GRAMMARS = {
    CSS: tree_sitter_css.language,
    JAVASCRIPT: tree_sitter_javascript.language,
    TYPESCRIPT: tree_sitter_typescript.language_typescript,
    TSX: tree_sitter_typescript.language_tsx,
}

# Parser objects are not shared between threads.
_local = threading.local()


@lru_cache(maxsize=None)
def get_language(grammar: str) -> Language:
    if grammar not in _GRAMMARS:
        raise ValueError(f"Unknown grammar: {grammar}")
    return Language(_GRAMMARS[grammar]())


def get_parser(grammar: str) -> Parser:
    parsers = getattr(_local, "parsers", None)
    if parsers is None:
        parsers = _local.parsers = {}
    if grammar not in parsers:
        parsers[grammar] = Parser(get_language(grammar))
    return parsers[grammar]


class SourceText:
    """Source string plus its UTF-8 encoding, for mapping tree-sitter offsets.

    tree-sitter reports byte offsets. Columns handed to users are counted in
    characters, so they are recomputed from the start of the line.
    """

    def __init__(self, text: str):
        self.text = text
        self.data = text.encode("utf-8")
        self._line_starts: List[int] = [0]
        for i, b in enumerate(self.data):
            if b == 0x0A:
                self._line_starts.append(i + 1)

    def parse(self, grammar: str) -> Tree:
        return get_parser(grammar).parse(self.data)

    def node_text(self, node: Node) -> str:
        return self.data[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def position(self, node: Node, one_based_column: bool = False) -> Tuple[int, int]:
        """1-based line and character column of the node start."""
        row = node.start_point[0]
        line_start = self._line_starts[row] if row < len(self._line_starts) else 0
        column = len(self.data[line_start:node.start_byte].decode("utf-8", errors="replace"))
        return row + 1, column + (1 if one_based_column else 0)


def walk(root: Node) -> Iterator[Node]:
    """Pre-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def error_nodes(root: Node) -> Iterator[Node]:
    """ERROR and MISSING nodes in document order."""
    for node in walk(root):
        if node.type == "ERROR" or node.is_missing:
            yield node


def first_error(root: Node) -> Node:
    """First ERROR or MISSING node, else the root."""
    return next(error_nodes(root), root)
