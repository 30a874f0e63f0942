"""Syntax-tree visitor for module depth counts and pass-through detection.

One walk over a parsed Rust unit collects:
    - public/private function counts (free functions and inherent methods)
    - public parameter, generic, trait-bound and const counts
    - a branching-construct count (complexity estimate) and max nesting
    - distinct type names used by public signatures
    - pass-through candidates: methods whose body is one delegating call

The visitor copies every fact it needs out of the tree as plain strings
and integers, so the tree can be dropped as soon as ``visit`` returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import tree_sitter

from ..config import AposdConfig
from ..scanning import (
    count_params,
    is_public,
    named_statements,
    node_text,
    signature_type_names,
    walk,
)

BRANCH_NODE_TYPES = frozenset(
    {
        "if_expression",
        "if_let_expression",
        "match_expression",
        "while_expression",
        "while_let_expression",
        "for_expression",
        "loop_expression",
    }
)

GENERIC_PARAM_TYPES = frozenset(
    {
        "type_identifier",
        "constrained_type_parameter",
        "optional_type_parameter",
        "type_parameter",
        "lifetime",
        "lifetime_parameter",
    }
)

CALL_WRAPPER_TYPES = frozenset({"try_expression", "await_expression"})
DELEGATION_TYPES = frozenset({"call_expression"}) | CALL_WRAPPER_TYPES

# Rust idioms that are simple delegations on purpose
IDIOM_PREFIXES = ("as_", "into_", "from_", "to_", "get_", "set_", "with_", "and_")
IDIOM_SUFFIXES = ("_ref", "_mut")
IDIOM_NAMES = frozenset(
    {
        # trait methods
        "deref", "deref_mut", "as_ref", "as_mut", "borrow", "borrow_mut", "clone",
        "default", "eq", "ne", "partial_cmp", "cmp", "hash", "fmt", "drop", "index",
        "index_mut",
        # iterator adaptors
        "iter", "iter_mut", "into_iter",
        # simple accessors
        "len", "is_empty", "capacity", "inner", "get", "new",
    }
)


@dataclass
class PassThroughCandidate:
    method_name: str
    delegated_to: str
    params_passed_through: int
    total_params: int
    is_passthrough: bool
    confidence: float


@dataclass
class FileAposdMetrics:
    """Counts collected from one source unit."""

    pub_function_count: int = 0
    private_function_count: int = 0
    total_pub_params: int = 0
    generic_param_count: int = 0
    trait_bound_count: int = 0
    pub_const_count: int = 0
    complexity_estimate: int = 0
    max_nesting_depth: int = 0
    public_type_names: set[str] = field(default_factory=set)
    passthrough_candidates: list[PassThroughCandidate] = field(default_factory=list)

    @property
    def type_variety(self) -> int:
        return len(self.public_type_names)


def count_generics(fn_node: tree_sitter.Node) -> int:
    """Count type and lifetime parameters (const generics excluded)."""
    type_params = fn_node.child_by_field_name("type_parameters")
    if type_params is None:
        return 0
    return sum(1 for child in type_params.named_children if child.type in GENERIC_PARAM_TYPES)


def count_trait_bounds(fn_node: tree_sitter.Node) -> int:
    """Count bounds in the generic parameter list and where clause."""
    total = 0
    for child in fn_node.children:
        if child.type not in ("type_parameters", "where_clause"):
            continue
        for node in walk(child):
            if node.type == "trait_bounds":
                total += len(named_statements(node))
    return total


class AposdVisitor:
    """Single-pass visitor collecting depth counts and pass-through candidates."""

    def __init__(self, config: Optional[AposdConfig] = None) -> None:
        self.config = config or AposdConfig()
        self.metrics = FileAposdMetrics()

    def visit(self, root: tree_sitter.Node) -> FileAposdMetrics:
        self._visit_node(root, depth=0)
        return self.metrics

    def _visit_node(self, node: tree_sitter.Node, depth: int) -> None:
        # Explicit stack: deeply nested sources must not hit the recursion limit
        stack: list[tuple[tree_sitter.Node, int]] = [(node, depth)]
        while stack:
            current, nesting = stack.pop()
            node_type = current.type

            if node_type in BRANCH_NODE_TYPES:
                self.metrics.complexity_estimate += 1
                # `else if` continues its chain at the same level
                parent = current.parent
                if parent is None or parent.type != "else_clause":
                    nesting += 1
                if nesting > self.metrics.max_nesting_depth:
                    self.metrics.max_nesting_depth = nesting
            elif node_type == "function_item":
                self._visit_function(current)
            elif node_type in ("const_item", "static_item") and self._is_module_level(current):
                if is_public(current):
                    self.metrics.pub_const_count += 1

            for child in reversed(current.children):
                stack.append((child, nesting))

    def _visit_function(self, fn_node: tree_sitter.Node) -> None:
        container = self._impl_container(fn_node)
        if container is not None and container.child_by_field_name("trait") is not None:
            return  # trait impl methods are not part of the module surface
        if container is None and self._inside_trait(fn_node):
            return

        if is_public(fn_node):
            self.metrics.pub_function_count += 1
            self.metrics.total_pub_params += count_params(fn_node)
            self.metrics.generic_param_count += count_generics(fn_node)
            self.metrics.trait_bound_count += count_trait_bounds(fn_node)
            self.metrics.public_type_names |= signature_type_names(fn_node)
        else:
            self.metrics.private_function_count += 1

        name_node = fn_node.child_by_field_name("name")
        body = fn_node.child_by_field_name("body")
        if name_node is not None and body is not None:
            self.check_passthrough(node_text(name_node), fn_node, body)

    @staticmethod
    def _impl_container(fn_node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        parent = fn_node.parent
        if parent is not None and parent.type == "declaration_list":
            grandparent = parent.parent
            if grandparent is not None and grandparent.type == "impl_item":
                return grandparent
        return None

    @staticmethod
    def _inside_trait(fn_node: tree_sitter.Node) -> bool:
        parent = fn_node.parent
        return (
            parent is not None
            and parent.type == "declaration_list"
            and parent.parent is not None
            and parent.parent.type == "trait_item"
        )

    @staticmethod
    def _is_module_level(item: tree_sitter.Node) -> bool:
        parent = item.parent
        if parent is None:
            return False
        if parent.type == "source_file":
            return True
        return (
            parent.type == "declaration_list"
            and parent.parent is not None
            and parent.parent.type == "mod_item"
        )

    # ── pass-through detection ─────────────────────────────────────

    def is_idiomatic_method(self, name: str) -> bool:
        """True if the name follows a Rust idiom or a configured exclusion."""
        if self.config.exclude_rust_idioms:
            if name.startswith(IDIOM_PREFIXES) or name.endswith(IDIOM_SUFFIXES):
                return True
            if name in IDIOM_NAMES:
                return True
        return self.is_custom_excluded_method(name)

    def is_custom_excluded_method(self, name: str) -> bool:
        if any(name.startswith(prefix) for prefix in self.config.exclude_prefixes):
            return True
        return name in self.config.exclude_methods

    def check_passthrough(
        self, name: str, fn_node: tree_sitter.Node, body: tree_sitter.Node
    ) -> None:
        """Record a candidate if the body is a single delegating call."""
        if self.is_idiomatic_method(name):
            return

        statements = named_statements(body)
        if len(statements) != 1:
            return

        expr = _statement_expression(statements[0])
        if expr is None or expr.type not in DELEGATION_TYPES:
            return

        # `inner()?` on its own is idiomatic error forwarding
        if expr.type == "try_expression":
            return

        delegation = analyze_delegation(expr)
        if delegation is None:
            return
        delegated_to, passed_through = delegation

        total_params = count_params(fn_node)
        ratio = passed_through / total_params if total_params > 0 else 1.0
        is_passthrough = ratio >= self.config.passthrough_ratio_threshold and total_params > 0

        self.metrics.passthrough_candidates.append(
            PassThroughCandidate(
                method_name=name,
                delegated_to=delegated_to,
                params_passed_through=passed_through,
                total_params=total_params,
                is_passthrough=is_passthrough,
                confidence=ratio,
            )
        )


def _statement_expression(statement: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    """The expression of a body statement (tail expression or `expr;`)."""
    if statement.type == "expression_statement":
        inner = named_statements(statement)
        return inner[0] if inner else None
    if statement.type in ("let_declaration", "empty_statement", "macro_invocation"):
        return None
    if statement.type.endswith("_item") or statement.type == "attribute_item":
        return None
    return statement


def analyze_delegation(expr: tree_sitter.Node) -> Optional[tuple[str, int]]:
    """Return (target, argument count) of the innermost delegating call."""
    while expr.type in CALL_WRAPPER_TYPES:
        inner = named_statements(expr)
        if not inner:
            return None
        expr = inner[0]

    if expr.type != "call_expression":
        return None

    function = expr.child_by_field_name("function")
    arguments = expr.child_by_field_name("arguments")
    args_count = 0
    if arguments is not None:
        args_count = sum(1 for a in named_statements(arguments) if a.type != "attribute_item")

    return _callee_name(function), args_count


def _callee_name(function: Optional[tree_sitter.Node]) -> str:
    if function is None:
        return "unknown"

    if function.type == "field_expression":
        receiver = function.child_by_field_name("value")
        method = function.child_by_field_name("field")
        receiver_text = _compact(node_text(receiver)) if receiver is not None else "_"
        method_text = node_text(method) if method is not None else "unknown"
        return f"{receiver_text}.{method_text}"

    if function.type == "generic_function":
        inner = function.child_by_field_name("function")
        return _callee_name(inner) if inner is not None else "unknown"

    if function.type in ("identifier", "scoped_identifier", "self", "super", "crate"):
        return _path_name(function)

    if function.type == "parenthesized_expression":
        inner = named_statements(function)
        if inner and inner[0].type == "field_expression":
            member = inner[0].child_by_field_name("field")
            if member is not None:
                return f"_.{node_text(member)}"

    return "unknown"


def _path_name(path: tree_sitter.Node) -> str:
    """Join the segment names of a path with ``::``, dropping generic args."""
    segments = [
        node_text(node)
        for node in walk(path)
        if node.type in ("identifier", "self", "super", "crate", "type_identifier")
        and not _inside_type_arguments(node, path)
    ]
    return "::".join(segments) if segments else _compact(node_text(path))


def _inside_type_arguments(node: tree_sitter.Node, stop: tree_sitter.Node) -> bool:
    current = node.parent
    while current is not None and current != stop:
        if current.type == "type_arguments":
            return True
        current = current.parent
    return False


def _compact(text: str) -> str:
    return "".join(text.split())
