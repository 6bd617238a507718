from .errors import ExportError, LexiconError, LoadError
from .models import ALL_CATEGORIES, Category, Examples, Lexicon, MatchResult, QueryState, Term
from .query import category_counts, category_matches, compute_stats, query, text_matches

__all__ = [
    "ALL_CATEGORIES",
    "Category",
    "Examples",
    "ExportError",
    "Lexicon",
    "LexiconError",
    "LoadError",
    "MatchResult",
    "QueryState",
    "Term",
    "category_counts",
    "category_matches",
    "compute_stats",
    "query",
    "text_matches",
]
