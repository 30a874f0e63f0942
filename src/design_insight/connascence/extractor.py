"""Connascence fact extraction from Rust source.

Walks a tree-sitter tree and feeds a ``ConnascenceAnalyzer``:
    - ``use`` declarations            -> Name
    - signature type names            -> Type
    - function arities                -> Position (flagged at 4+)
    - literals outside const/static   -> Meaning (unless acceptable;
                                         format-macro strings skipped)
    - algorithm keyword pairs (text)  -> Algorithm

The classifier never sees the tree, so this stage can be replaced
without touching classification.
"""

from __future__ import annotations

import logging
from typing import Optional

import tree_sitter

from ..exceptions import ParsingError
from ..scanning import RustParser, count_params, node_text, signature_type_names, walk
from .analyzer import ConnascenceAnalyzer, detect_algorithm_patterns

logger = logging.getLogger(__name__)

LITERAL_NODE_TYPES = frozenset(
    {
        "integer_literal",
        "float_literal",
        "boolean_literal",
        "string_literal",
        "raw_string_literal",
        "char_literal",
    }
)

# Literals under these nodes are already named or are metadata
NAMED_VALUE_CONTEXTS = frozenset({"const_item", "static_item", "attribute_item", "inner_attribute_item"})

# Format and log macros: their string arguments are messages, not values
FORMAT_MACROS = frozenset(
    {
        "format", "format_args", "print", "println", "eprint", "eprintln",
        "write", "writeln", "panic", "unreachable", "todo", "unimplemented",
        "assert", "assert_eq", "assert_ne", "debug_assert", "debug_assert_eq",
        "debug_assert_ne", "trace", "debug", "info", "warn", "error", "bail", "anyhow",
    }
)
STRING_NODE_TYPES = frozenset({"string_literal", "raw_string_literal"})


def extract_connascence_facts(
    analyzer: ConnascenceAnalyzer,
    source: str,
    module: str,
    parser: Optional[RustParser] = None,
) -> ConnascenceAnalyzer:
    """Record the connascence facts of one source unit.

    Args:
        analyzer: Recorder to feed (module context is set to ``module``)
        source: Raw Rust source
        module: Module name recorded as the source of every instance
        parser: Parser to reuse (one per thread)

    Returns:
        The same analyzer, for chaining
    """
    parser = parser or RustParser()
    analyzer.set_module(module)

    try:
        tree = parser.parse(source, path=module)
    except ParsingError as e:
        logger.warning(f"Connascence facts for {module} limited to text scan: {e}")
    else:
        _record_tree_facts(analyzer, tree.root_node, module)

    for pattern, advisory in detect_algorithm_patterns(source):
        analyzer.record_algorithm_dependency(pattern, advisory)

    return analyzer


def _record_tree_facts(analyzer: ConnascenceAnalyzer, root: tree_sitter.Node, module: str) -> None:
    for node in walk(root):
        node_type = node.type
        line = node.start_point[0] + 1

        if node_type == "use_declaration":
            argument = node.child_by_field_name("argument")
            if argument is not None:
                target = "".join(node_text(argument).split())
                analyzer.record_name_dependency(target, "use declaration", line)

        elif node_type == "function_item":
            name_node = node.child_by_field_name("name")
            if name_node is None:
                continue
            fn_name = node_text(name_node)
            for type_name in sorted(signature_type_names(node)):
                analyzer.record_type_dependency(type_name, f"signature of {fn_name}", line)
            analyzer.record_position_dependency(fn_name, count_params(node), line)

        elif (
            node_type in LITERAL_NODE_TYPES
            and not _in_named_context(node)
            and not _is_format_argument(node)
        ):
            analyzer.record_magic_number(f"{module}:{line}", _literal_value(node), line)


def _in_named_context(node: tree_sitter.Node) -> bool:
    current = node.parent
    while current is not None:
        if current.type in NAMED_VALUE_CONTEXTS:
            return True
        if current.type in ("function_item", "source_file"):
            return False
        current = current.parent
    return False


def _is_format_argument(node: tree_sitter.Node) -> bool:
    """True for a string literal in the token tree of a format or log macro."""
    if node.type not in STRING_NODE_TYPES:
        return False
    current = node.parent
    while current is not None and current.type == "token_tree":
        current = current.parent
    if current is None or current.type != "macro_invocation":
        return False
    macro = current.child_by_field_name("macro")
    if macro is None:
        return False
    # `log::info!` and `info!` both resolve to the last path segment
    return node_text(macro).rsplit("::", 1)[-1] in FORMAT_MACROS


def _literal_value(node: tree_sitter.Node) -> str:
    """Literal text, with the sign of a negated number folded in."""
    text = node_text(node)
    if node.type not in ("integer_literal", "float_literal"):
        return text
    parent = node.parent
    if parent is None:
        return text
    # `-7` in an expression is a unary minus; in a pattern it is a negative_literal
    if parent.type == "negative_literal" or (
        parent.type == "unary_expression" and node_text(parent).startswith("-")
    ):
        return f"-{text}"
    return text
