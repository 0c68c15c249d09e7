"""Unit tests for join_conditions."""

from __future__ import annotations

import pytest

from prepsql.compile.conditions import join_conditions
from prepsql.errors import ConfigurationError
from prepsql.schema.conditions import ConditionFragment


def test_single_condition_gets_where_prefix():
    clause = join_conditions([ConditionFragment(query="u.active = :active", binding={"active": True})])
    assert clause.where == " WHERE (u.active = :active)"
    assert clause.bindings == {"active": True}


def test_conditions_parenthesized_and_anded_in_order():
    clause = join_conditions(
        [
            ConditionFragment(query="a = 1 OR b = 2"),
            ConditionFragment(query="c = :c", binding={"c": 3}),
        ]
    )
    assert clause.where == " WHERE (a = 1 OR b = 2) AND (c = :c)"


def test_do_not_add_where_uses_and_prefix():
    clause = join_conditions([ConditionFragment(query="x = 1")], do_not_add_where=True)
    assert clause.where == " AND (x = 1)"


@pytest.mark.parametrize("do_not_add_where", [False, True])
def test_empty_list_produces_empty_clause(do_not_add_where):
    clause = join_conditions([], do_not_add_where)
    assert clause.where == ""
    assert clause.bindings == {}


def test_none_conditions_produce_empty_clause():
    assert join_conditions(None).where == ""


@pytest.mark.parametrize("do_not_add_where", [False, True])
def test_binding_only_fragments_produce_no_clause_text(do_not_add_where):
    clause = join_conditions(
        [ConditionFragment(binding={"defaultLanguage": "en"})], do_not_add_where
    )
    assert clause.where == ""
    assert clause.bindings == {"defaultLanguage": "en"}


def test_later_binding_overrides_earlier_one():
    clause = join_conditions(
        [
            ConditionFragment(query="u.locale = :lang", binding={"lang": "en"}),
            ConditionFragment(binding={"lang": "de"}),
        ]
    )
    assert clause.bindings == {"lang": "de"}


def test_plain_mappings_and_none_entries_accepted():
    clause = join_conditions([{"query": "a = :a", "binding": {"a": 1}}, None, {"query": "b"}])
    assert clause.where == " WHERE (a = :a) AND (b)"
    assert clause.bindings == {"a": 1}


def test_null_binding_treated_as_empty():
    clause = join_conditions([{"query": "a = 1", "binding": None}, ConditionFragment(binding=None)])
    assert clause.where == " WHERE (a = 1)"
    assert clause.bindings == {}


def test_malformed_fragment_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        join_conditions([{"query": "a = 1", "values": {"a": 1}}])
