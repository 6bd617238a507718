# tests/test_query.py
"""
Filtering behaviour of the query engine.
"""

import pytest

from domra.core.models import Examples, MatchResult, QueryState, Term
from domra.core.query import category_counts, category_matches, compute_stats, query, text_matches


def test_empty_query_returns_everything_in_order(lexicon):
    result = query(lexicon.terms, lexicon.categories, QueryState())

    assert isinstance(result, MatchResult)
    assert list(result) == lexicon.terms
    assert result.count == 3


def test_category_filter_is_exact(lexicon):
    result = query(lexicon.terms, lexicon.categories, QueryState(selected_category="networking"))

    assert [t.english for t in result] == ["API Gateway"]
    assert all(t.category == "networking" for t in result)


def test_unknown_category_matches_nothing(lexicon):
    result = query(lexicon.terms, lexicon.categories, QueryState(selected_category="Storage"))
    assert result.count == 0
    assert result.is_empty()


def test_all_category_returns_unfiltered_set(lexicon):
    unfiltered = query(lexicon.terms, lexicon.categories, QueryState(search_text="a"))
    filtered = query(lexicon.terms, lexicon.categories,
                     QueryState(search_text="a", selected_category="all"))
    assert filtered == unfiltered


def test_english_name_is_case_insensitive(lexicon):
    result = query(lexicon.terms, lexicon.categories, QueryState(search_text="api"))
    assert [t.english for t in result] == ["API Gateway"]

    term = Term(english="api gateway", khmer="ច្រកទ្វារ", category="networking")
    assert text_matches(term, "API")


def test_khmer_name_is_exact_substring(lexicon):
    result = query(lexicon.terms, lexicon.categories, QueryState(search_text="ឃ្លាំង"))
    assert [t.english for t in result] == ["Cache"]


def test_khmer_name_is_not_case_folded():
    term = Term(english="Gateway", khmer="ច្រកទ្វារ API", category="networking")
    # The Latin part of a Khmer name only matches with its exact case
    assert text_matches(term, "API")
    assert not text_matches(Term(english="x", khmer="ច្រកទ្វារ API", category="c"), "api")


def test_description_tags_and_examples_are_searched(lexicon):
    def englishes(text):
        return [t.english for t in query(lexicon.terms, lexicon.categories, QueryState(search_text=text))]

    assert englishes("BACKEND") == ["API Gateway"]        # description
    assert englishes("cloud") == ["API Gateway"]          # tag, case-folded
    assert englishes("Throttles") == ["API Gateway"]      # English example
    assert englishes("កំណត់ល្បឿន") == ["API Gateway"]      # Khmer example
    assert englishes("PERFORMANCE") == ["Cache"]


def test_missing_optional_fields_do_not_match_or_raise():
    term = Term(english="Scheduler", khmer="សឈេឌ", category="compute",
                examples=Examples(english=None, khmer=None))
    assert not text_matches(term, "description")
    assert text_matches(term, "sched")


def test_search_and_category_both_narrow(lexicon):
    state = QueryState(search_text="storage", selected_category="networking")
    assert query(lexicon.terms, lexicon.categories, state).count == 0

    state = QueryState(search_text="storage", selected_category="storage")
    assert [t.english for t in query(lexicon.terms, lexicon.categories, state)] == ["Cache"]


def test_whitespace_only_search_is_empty(lexicon):
    result = query(lexicon.terms, lexicon.categories, QueryState(search_text="   "))
    assert result.count == len(lexicon.terms)


def test_query_is_pure(lexicon):
    state = QueryState(search_text="a", selected_category="all")
    before = list(lexicon.terms)

    first = query(lexicon.terms, lexicon.categories, state)
    second = query(lexicon.terms, lexicon.categories, state)

    assert first == second
    assert lexicon.terms == before


@pytest.mark.parametrize("text,category", [
    ("", "all"), ("a", "all"), ("e", "storage"), ("zzz", "all"), ("", "compute"),
])
def test_result_is_ordered_subset(lexicon, text, category):
    result = query(lexicon.terms, lexicon.categories, QueryState(search_text=text, selected_category=category))
    positions = [lexicon.terms.index(t) for t in result]
    assert positions == sorted(positions)


def test_cache_and_scheduler_scenario():
    terms = [
        Term(english="Cache", khmer="឴ឃាស", category="storage"),
        Term(english="Scheduler", khmer="឴សឈេឌ", category="compute"),
    ]
    state = QueryState()

    state = state.with_category("storage")
    assert list(query(terms, {}, state)) == [terms[0]]

    state = state.with_category("all").with_search("sched")
    assert list(query(terms, {}, state)) == [terms[1]]

    state = state.with_search("")
    assert list(query(terms, {}, state)) == terms


def test_category_matches_sentinel():
    term = Term(english="Cache", khmer="ឃាស", category="storage")
    assert category_matches(term, "all")
    assert category_matches(term, "storage")
    assert not category_matches(term, "compute")


def test_category_counts(lexicon):
    counts = category_counts(lexicon.terms, lexicon.categories)
    assert counts == {"storage": 1, "networking": 1, "compute": 1, "all": 3}


def test_compute_stats(lexicon):
    stats = compute_stats(lexicon.terms, lexicon.categories)
    assert stats == {
        "total_terms": 3,
        "total_categories": 3,
        "total_contributors": 2,
        "verified_terms": 2,
    }
