"""Helpers over tree-sitter-rust item nodes shared by the analyzers."""

from __future__ import annotations

import tree_sitter

from .treesitter_parser import node_text, walk

PRIMITIVE_TYPES = frozenset(
    {
        "bool", "char", "str", "u8", "u16", "u32", "u64", "u128", "usize",
        "i8", "i16", "i32", "i64", "i128", "isize", "f32", "f64", "Self",
    }
)


def is_public(item: tree_sitter.Node) -> bool:
    """True for bare ``pub``; restricted visibility counts as private."""
    for child in item.children:
        if child.type == "visibility_modifier":
            return node_text(child).strip() == "pub"
    return False


def count_params(fn_node: tree_sitter.Node) -> int:
    """Count declared parameters, excluding the ``self`` receiver."""
    params = fn_node.child_by_field_name("parameters")
    if params is None:
        return 0
    return sum(1 for child in params.named_children if child.type == "parameter")


def signature_type_names(fn_node: tree_sitter.Node) -> set[str]:
    """Distinct non-primitive type names in parameters and return type."""
    names: set[str] = set()
    for field_name in ("parameters", "return_type"):
        part = fn_node.child_by_field_name(field_name)
        if part is None:
            continue
        for node in walk(part):
            if node.type == "type_identifier":
                name = node_text(node)
                if name not in PRIMITIVE_TYPES:
                    names.add(name)
    return names
