"""Tests for the depth-count and pass-through visitor."""

import pytest

from design_insight.aposd import AposdVisitor
from design_insight.config import AposdConfig


def _visit(parser, source, config=None):
    tree = parser.parse(source)
    return AposdVisitor(config).visit(tree.root_node)


def _candidates(metrics):
    return {c.method_name: c for c in metrics.passthrough_candidates}


class TestDepthCounts:
    """Surface and implementation counts from one source unit."""

    def test_function_visibility(self, parser, deep_source):
        metrics = _visit(parser, deep_source)
        assert metrics.pub_function_count == 2
        assert metrics.private_function_count == 1
        assert metrics.total_pub_params == 2

    def test_public_constants(self, parser, deep_source):
        assert _visit(parser, deep_source).pub_const_count == 1

    def test_branches_and_nesting(self, parser, deep_source):
        metrics = _visit(parser, deep_source)
        # if, for, match, if let
        assert metrics.complexity_estimate == 4
        assert metrics.max_nesting_depth == 2

    def test_else_if_chain_stays_flat(self, parser):
        source = """\
fn classify(n: i32) -> u8 {
    if n < 0 {
        0
    } else if n == 0 {
        1
    } else if n < 10 {
        2
    } else if n < 100 {
        3
    } else {
        4
    }
}
"""
        metrics = _visit(parser, source)
        assert metrics.complexity_estimate == 4
        assert metrics.max_nesting_depth == 1

    def test_if_inside_else_block_nests(self, parser):
        source = """\
fn pick(a: bool, b: bool) -> u8 {
    if a {
        1
    } else {
        if b { 2 } else { 3 }
    }
}
"""
        metrics = _visit(parser, source)
        assert metrics.complexity_estimate == 2
        assert metrics.max_nesting_depth == 2

    def test_public_signature_types(self, parser, deep_source):
        metrics = _visit(parser, deep_source)
        assert metrics.public_type_names == {"String", "Option"}
        assert metrics.type_variety == 2

    def test_trait_impls_and_restricted_visibility(self, parser, delegating_source):
        metrics = _visit(parser, delegating_source)
        # `handle` lives in a trait impl and is not counted; pub(crate) is private
        assert metrics.pub_function_count == 9
        assert metrics.private_function_count == 2
        assert metrics.total_pub_params == 12

    def test_generics_and_bounds(self, parser):
        source = """\
pub fn merge<'a, T: Clone + Send, U>(left: &'a T, right: U) -> T
where
    U: Into<T> + Debug,
{
    left.clone()
}

fn private_generic<T: Clone>(value: T) -> T {
    value
}
"""
        metrics = _visit(parser, source)
        assert metrics.generic_param_count == 3
        assert metrics.trait_bound_count == 4

    def test_trait_default_methods_are_skipped(self, parser):
        source = """\
pub trait Store {
    fn get(&self, key: u32) -> u32;

    fn get_or_zero(&self, key: u32) -> u32 {
        self.get(key)
    }
}
"""
        metrics = _visit(parser, source)
        assert metrics.pub_function_count == 0
        assert metrics.private_function_count == 0
        assert metrics.passthrough_candidates == []


class TestPassThroughDetection:
    """Single-call bodies, idiom exclusions and target naming."""

    def test_receiver_call(self, parser, delegating_source):
        candidate = _candidates(_visit(parser, delegating_source))["find_user"]
        assert candidate.delegated_to == "self.repo.find_user"
        assert candidate.params_passed_through == 1
        assert candidate.total_params == 1
        assert candidate.is_passthrough
        assert candidate.confidence == 1.0

    def test_await_is_unwrapped(self, parser, delegating_source):
        candidate = _candidates(_visit(parser, delegating_source))["fetch"]
        assert candidate.delegated_to == "self.client.fetch"
        assert candidate.params_passed_through == 2
        assert candidate.is_passthrough

    def test_bare_error_forwarding_is_skipped(self, parser, delegating_source):
        candidates = _candidates(_visit(parser, delegating_source))
        assert "load" not in candidates
        assert "save" not in candidates

    def test_partial_forwarding(self, parser, delegating_source):
        candidate = _candidates(_visit(parser, delegating_source))["partial"]
        assert candidate.delegated_to == "compute"
        assert candidate.confidence == pytest.approx(1 / 3)
        assert not candidate.is_passthrough

    def test_no_params_is_never_a_passthrough(self, parser, delegating_source):
        candidate = _candidates(_visit(parser, delegating_source))["ping"]
        assert candidate.confidence == 1.0
        assert not candidate.is_passthrough

    def test_call_through_field(self, parser, delegating_source):
        candidate = _candidates(_visit(parser, delegating_source))["dispatch"]
        assert candidate.delegated_to == "_.handler"
        assert candidate.is_passthrough

    def test_path_calls(self, parser, delegating_source):
        candidates = _candidates(_visit(parser, delegating_source))
        assert candidates["parse_config"].delegated_to == "config::parse"
        assert candidates["decode_all"].delegated_to == "codec::decode"

    def test_trait_impl_methods_are_not_checked(self, parser, delegating_source):
        assert "handle" not in _candidates(_visit(parser, delegating_source))

    def test_idiomatic_names_are_skipped(self, parser, delegating_source):
        assert "as_str" not in _candidates(_visit(parser, delegating_source))

    def test_idioms_can_be_disabled(self, parser, delegating_source):
        config = AposdConfig(exclude_rust_idioms=False)
        candidate = _candidates(_visit(parser, delegating_source, config))["as_str"]
        assert candidate.delegated_to == "self.name.as_str"

    def test_custom_exclusions(self, parser, delegating_source):
        config = AposdConfig(
            exclude_rust_idioms=False, exclude_prefixes=["parse_"], exclude_methods=["find_user"]
        )
        candidates = _candidates(_visit(parser, delegating_source, config))
        assert "find_user" not in candidates
        assert "parse_config" not in candidates
        assert "fetch" in candidates

    def test_idiom_rules(self):
        visitor = AposdVisitor()
        assert visitor.is_idiomatic_method("into_inner")
        assert visitor.is_idiomatic_method("value_mut")
        assert visitor.is_idiomatic_method("clone")
        assert not visitor.is_idiomatic_method("forward")
