"""
Domra Lexicon Query Engine
Filters the loaded terms by category and free text
"""

from typing import Dict, Iterable, Mapping, Optional, Sequence
import logging

from .models import ALL_CATEGORIES, Category, MatchResult, QueryState, Term

logger = logging.getLogger(__name__)


def category_matches(term: Term, selected_category: str) -> bool:
    """Exact key match, or everything for the "all" sentinel"""
    return selected_category == ALL_CATEGORIES or term.category == selected_category


def _contains_folded(value: Optional[str], needle_lower: str) -> bool:
    return isinstance(value, str) and needle_lower in value.lower()


def _contains_exact(value: Optional[str], needle: str) -> bool:
    return isinstance(value, str) and needle in value


def text_matches(term: Term, search_text: str) -> bool:
    """
    Check whether a term matches free-text search

    English fields are compared case-insensitively. Khmer fields are compared
    as-is since the script has no case and folding is not applied to it.

    Args:
        term: Term to test
        search_text: Trimmed search string; empty matches everything

    Returns:
        True if any searchable field contains the text
    """
    if not search_text:
        return True

    search_lower = search_text.lower()

    if _contains_folded(term.english, search_lower):
        return True
    if _contains_exact(term.khmer, search_text):
        return True
    if _contains_folded(term.description, search_lower):
        return True
    if any(_contains_folded(tag, search_lower) for tag in term.tags):
        return True
    if term.examples is not None:
        if _contains_folded(term.examples.english, search_lower):
            return True
        if _contains_exact(term.examples.khmer, search_text):
            return True

    return False


def query(terms: Sequence[Term],
          categories: Mapping[str, Category],
          state: QueryState) -> MatchResult:
    """
    Compute the visible subset of terms for a query state

    Args:
        terms: Loaded terms in source order
        categories: Category map (not needed for matching; unknown keys simply match nothing)
        state: Current search text and category selection

    Returns:
        MatchResult preserving source order
    """
    matched = tuple(
        term for term in terms
        if category_matches(term, state.selected_category)
        and text_matches(term, state.search_text)
    )
    logger.debug(
        f"Query search={state.search_text!r} category={state.selected_category!r}: "
        f"{len(matched)}/{len(terms)} terms"
    )
    return MatchResult(terms=matched)


def category_counts(terms: Iterable[Term], categories: Mapping[str, Category]) -> Dict[str, int]:
    """Number of terms per category key, with the overall total under 'all'"""
    terms = list(terms)
    counts = {key: 0 for key in categories}
    for term in terms:
        if term.category in counts:
            counts[term.category] += 1
    counts[ALL_CATEGORIES] = len(terms)
    return counts


def compute_stats(terms: Sequence[Term], categories: Mapping[str, Category]) -> Dict[str, int]:
    """Get headline statistics about the lexicon"""
    contributors = set()
    for term in terms:
        contributors.update(term.contributors)

    return {
        'total_terms': len(terms),
        'total_categories': len(categories),
        'total_contributors': len(contributors),
        'verified_terms': sum(1 for term in terms if term.status == 'verified'),
    }
