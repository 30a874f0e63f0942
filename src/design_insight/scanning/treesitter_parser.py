"""Tree-sitter parser wrapper for Rust source.

Usage:
    parser = RustParser()
    tree = parser.parse(source, path="src/lib.rs")
    for node in walk(tree.root_node):
        ...

A parser instance owns a tree-sitter ``Parser`` and must not be shared
between threads; create one per worker.
"""

from __future__ import annotations

from typing import Iterator, Union

import tree_sitter
import tree_sitter_rust

from ..exceptions import ParsingError

LANGUAGE_NAME = "rust"
RUST_LANGUAGE = tree_sitter.Language(tree_sitter_rust.language())

COMMENT_NODE_TYPES = frozenset({"line_comment", "block_comment"})


class RustParser:
    """Wrapper around tree-sitter for parsing Rust source units."""

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(RUST_LANGUAGE)

    def parse(self, source: Union[str, bytes], path: str = "<memory>") -> tree_sitter.Tree:
        """Parse source and return its syntax tree.

        Args:
            source: Source text (str) or UTF-8 bytes
            path: Path used in error reports

        Returns:
            The parsed tree

        Raises:
            ParsingError: If the source cannot be encoded or contains
                syntax errors
        """
        if isinstance(source, str):
            try:
                code = source.encode("utf-8")
            except UnicodeEncodeError as e:
                raise ParsingError(path, LANGUAGE_NAME, f"cannot encode source: {e}")
        else:
            code = source

        tree = self._parser.parse(code)
        if tree.root_node.has_error:
            line = _first_error_line(tree.root_node)
            raise ParsingError(path, LANGUAGE_NAME, f"syntax error near line {line}")
        return tree


def node_text(node: tree_sitter.Node) -> str:
    """Decode the source text covered by a node."""
    if node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def walk(node: tree_sitter.Node) -> Iterator[tree_sitter.Node]:
    """Yield a node and all of its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def named_statements(block: tree_sitter.Node) -> list[tree_sitter.Node]:
    """Return the statements of a block, ignoring comments."""
    return [child for child in block.named_children if child.type not in COMMENT_NODE_TYPES]


def _first_error_line(root: tree_sitter.Node) -> int:
    for node in walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return root.start_point[0] + 1
