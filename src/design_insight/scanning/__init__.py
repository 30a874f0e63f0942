"""Source parsing: tree-sitter wrapper for Rust units."""

from .rust_nodes import PRIMITIVE_TYPES, count_params, is_public, signature_type_names
from .treesitter_parser import RustParser, named_statements, node_text, walk

__all__ = [
    "PRIMITIVE_TYPES",
    "RustParser",
    "count_params",
    "is_public",
    "named_statements",
    "node_text",
    "signature_type_names",
    "walk",
]
