"""
Domra Lexicon Data Model
Terms, categories, query state and the loaded lexicon bundle
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import copy
import logging

from .errors import LoadError

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"

# Keys understood by Term; anything else is kept in ``extra``
_TERM_KEYS = {
    "english", "khmer", "category", "description", "tags", "examples",
    "dateAdded", "reference", "contributors", "status",
}


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _str_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


@dataclass(frozen=True)
class Examples:
    """Usage examples in both languages; either side may be missing"""

    english: Optional[str] = None
    khmer: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional['Examples']:
        if not isinstance(data, dict):
            return None
        return cls(
            english=_optional_str(data.get("english")),
            khmer=_optional_str(data.get("khmer")),
        )

    def is_empty(self) -> bool:
        return not self.english and not self.khmer

    def to_dict(self) -> Dict[str, str]:
        data = {}
        if self.english is not None:
            data["english"] = self.english
        if self.khmer is not None:
            data["khmer"] = self.khmer
        return data


@dataclass(frozen=True)
class Term:
    """A single glossary entry pairing an English and a Khmer name"""

    english: str
    khmer: str
    category: str
    description: Optional[str] = None
    tags: Tuple[str, ...] = ()
    examples: Optional[Examples] = None
    date_added: Optional[str] = None
    reference: Optional[str] = None
    contributors: Tuple[str, ...] = ()
    status: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    source: Optional[Dict[str, Any]] = field(default=None, compare=False, hash=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> 'Term':
        """
        Build a term from its JSON object

        Args:
            data: Decoded JSON object for one term
            index: Position in the source collection, used in error messages

        Returns:
            Term instance

        Raises:
            LoadError: If the entry is not an object or lacks a required name
        """
        if not isinstance(data, dict):
            raise LoadError(f"Term #{index} is not an object", resource="terms")

        for key in ("english", "khmer", "category"):
            if not isinstance(data.get(key), str):
                raise LoadError(f"Term #{index} is missing required field '{key}'", resource="terms")

        return cls(
            english=data["english"],
            khmer=data["khmer"],
            category=data["category"],
            description=_optional_str(data.get("description")),
            tags=_str_tuple(data.get("tags")),
            examples=Examples.from_dict(data.get("examples")),
            date_added=_optional_str(data.get("dateAdded")),
            reference=_optional_str(data.get("reference")),
            contributors=_str_tuple(data.get("contributors")),
            status=_optional_str(data.get("status")),
            extra={k: v for k, v in data.items() if k not in _TERM_KEYS},
            source=copy.deepcopy(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize back to the source JSON shape

        Terms read from JSON return their decoded object unchanged; the typed
        fields above are a normalised view used for matching and display.
        """
        if self.source is not None:
            return copy.deepcopy(self.source)
        data: Dict[str, Any] = {
            "english": self.english,
            "khmer": self.khmer,
            "category": self.category,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.tags:
            data["tags"] = list(self.tags)
        if self.examples is not None:
            data["examples"] = self.examples.to_dict()
        if self.date_added is not None:
            data["dateAdded"] = self.date_added
        if self.reference is not None:
            data["reference"] = self.reference
        if self.contributors:
            data["contributors"] = list(self.contributors)
        if self.status is not None:
            data["status"] = self.status
        data.update(self.extra)
        return data


@dataclass(frozen=True)
class Category:
    """A named grouping of terms with a display icon"""

    key: str
    names: Dict[str, str] = field(default_factory=dict, hash=False)
    icon: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    source: Optional[Dict[str, Any]] = field(default=None, compare=False, hash=False, repr=False)

    @property
    def display_name(self) -> str:
        return self.names.get("english") or self.key

    @classmethod
    def from_dict(cls, key: str, data: Any) -> 'Category':
        if not isinstance(data, dict):
            raise LoadError(f"Category '{key}' is not an object", resource="categories")
        names = data.get("name")
        if isinstance(names, str):
            names = {"english": names}
        elif not isinstance(names, dict):
            names = {}
        return cls(
            key=key,
            names={k: v for k, v in names.items() if isinstance(v, str)},
            icon=_optional_str(data.get("icon")),
            extra={k: v for k, v in data.items() if k not in ("name", "icon")},
            source=copy.deepcopy(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.source is not None:
            return copy.deepcopy(self.source)
        data: Dict[str, Any] = {"name": dict(self.names)}
        if self.icon is not None:
            data["icon"] = self.icon
        data.update(self.extra)
        return data


@dataclass(frozen=True)
class QueryState:
    """The user's current search text and selected category filter"""

    search_text: str = ""
    selected_category: str = ALL_CATEGORIES

    def __post_init__(self):
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "search_text", (self.search_text or "").strip())
        object.__setattr__(self, "selected_category", self.selected_category or ALL_CATEGORIES)

    def with_search(self, text: str) -> 'QueryState':
        return QueryState(search_text=text, selected_category=self.selected_category)

    def with_category(self, category: str) -> 'QueryState':
        return QueryState(search_text=self.search_text, selected_category=category)


@dataclass(frozen=True)
class MatchResult:
    """Ordered subset of terms satisfying a query state"""

    terms: Tuple[Term, ...] = ()

    @property
    def count(self) -> int:
        return len(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def __iter__(self):
        return iter(self.terms)

    def is_empty(self) -> bool:
        return not self.terms


@dataclass
class Lexicon:
    """Everything loaded at startup: terms, category map and site metadata"""

    terms: List[Term] = field(default_factory=list)
    categories: Dict[str, Category] = field(default_factory=dict)
    site: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_documents(cls, terms_doc: Any, categories_doc: Any, site_doc: Any) -> 'Lexicon':
        """
        Build a lexicon from the three decoded JSON documents

        Args:
            terms_doc: ``{"terms": [...]}``
            categories_doc: ``{"categories": {...}}``
            site_doc: Arbitrary metadata object

        Returns:
            Lexicon instance

        Raises:
            LoadError: If a document has the wrong shape or a term is malformed
        """
        if not isinstance(terms_doc, dict):
            raise LoadError("Terms document must be a JSON object", resource="terms")
        if not isinstance(categories_doc, dict):
            raise LoadError("Categories document must be a JSON object", resource="categories")
        if site_doc is not None and not isinstance(site_doc, dict):
            raise LoadError("Site document must be a JSON object", resource="site")

        raw_terms = terms_doc.get("terms")
        if raw_terms is None:
            raw_terms = []
        if not isinstance(raw_terms, list):
            raise LoadError("'terms' must be an array", resource="terms")

        raw_categories = categories_doc.get("categories")
        if raw_categories is None:
            raw_categories = {}
        if not isinstance(raw_categories, dict):
            raise LoadError("'categories' must be an object", resource="categories")
        if ALL_CATEGORIES in raw_categories:
            raise LoadError(f"Category key '{ALL_CATEGORIES}' is reserved for the all-categories filter",
                            resource="categories")

        terms = [Term.from_dict(item, index) for index, item in enumerate(raw_terms)]
        categories = {key: Category.from_dict(key, value) for key, value in raw_categories.items()}

        unknown = {t.category for t in terms} - set(categories)
        if unknown:
            logger.warning(f"Terms reference unknown categories: {', '.join(sorted(unknown))}")

        return cls(terms=terms, categories=categories, site=site_doc or {})

    @property
    def version(self) -> Optional[str]:
        project = self.site.get("project")
        if isinstance(project, dict) and project.get("version") is not None:
            return str(project["version"])
        return None
