"""
Domra Lexicon Renderer
Projects match results into the card-grid markup
"""

from typing import Dict, Mapping, Optional, Sequence
import logging

from .models import ALL_CATEGORIES, Category, Examples, MatchResult, Term

logger = logging.getLogger(__name__)

DEFAULT_ICON = "📝"
ALL_ICON = "📚"

_ESCAPES = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#039;',
}


def escape_html(text) -> str:
    """Escape the five markup-significant characters; non-strings become ''"""
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def results_label(count: int) -> str:
    return f"{count} terms found"


def _category_label(term: Term, categories: Mapping[str, Category]):
    category = categories.get(term.category)
    if category is None:
        return DEFAULT_ICON, term.category
    return category.icon or DEFAULT_ICON, category.display_name


def render_examples(examples: Optional[Examples]) -> str:
    if examples is None or examples.is_empty():
        return ""

    parts = ['<div class="word-examples">', '<div class="example-label">Examples:</div>']
    if examples.english:
        parts.append(f'<div class="example-text">"{escape_html(examples.english)}"</div>')
    if examples.khmer:
        parts.append(f'<div class="example-text khmer">"{escape_html(examples.khmer)}"</div>')
    parts.append('</div>')
    return "\n".join(parts)


def render_tags(tags: Sequence[str]) -> str:
    if not tags:
        return ""
    spans = "".join(f'<span class="tag">{escape_html(tag)}</span>' for tag in tags)
    return f'<div class="word-tags">{spans}</div>'


def render_reference(reference: Optional[str]) -> str:
    # "#" is the placeholder used in the data for "no reference yet"
    if not reference or reference == "#":
        return ""
    return (
        f'<a href="{escape_html(reference)}" class="word-reference" target="_blank" rel="noopener">'
        f'<span>📂</span> Reference</a>'
    )


def render_card(term: Term, categories: Mapping[str, Category]) -> str:
    """
    Render one term as a card

    Args:
        term: Term to render
        categories: Category map used for the icon and display name

    Returns:
        HTML fragment with every user-facing field escaped
    """
    icon, category_name = _category_label(term, categories)

    return "\n".join(part for part in [
        '<div class="word-card slide-up">',
        f'<div class="word-english">{escape_html(term.english)}</div>',
        f'<div class="word-khmer">{escape_html(term.khmer)}</div>',
        f'<div class="word-category">{escape_html(icon)} {escape_html(category_name)}</div>',
        f'<div class="word-description">{escape_html(term.description or "No description available")}</div>',
        render_examples(term.examples),
        render_tags(term.tags),
        '<div class="word-footer">',
        f'<div class="word-date">Added: {escape_html(term.date_added or "Unknown")}</div>',
        render_reference(term.reference),
        '</div>',
        '</div>',
    ] if part)


def render_no_results() -> str:
    return (
        '<div class="no-results">'
        '<h3>No terms found</h3>'
        '<p>Try adjusting your search or filter criteria</p>'
        '<button type="button" class="btn btn-primary" data-action="open-modal">'
        '<span>➕</span> Contribute New Terms</button>'
        '</div>'
    )


def render_results(result: MatchResult, categories: Mapping[str, Category]) -> Dict[str, str]:
    """
    Render the results label and the grid body

    Returns:
        Dict with ``label`` and ``html``; the html is the no-results block
        exactly when the result is empty
    """
    if result.is_empty():
        grid = render_no_results()
    else:
        grid = "\n".join(render_card(term, categories) for term in result)
    return {"label": results_label(result.count), "html": grid}


def _filter_button(key: str, name: str, icon: str, active: bool) -> str:
    css = "filter-btn active" if active else "filter-btn"
    pressed = "true" if active else "false"
    return (
        f'<button type="button" class="{css}" data-category="{escape_html(key)}" aria-pressed="{pressed}">'
        f'{escape_html(icon)} {escape_html(name)}</button>'
    )


def render_filter_buttons(categories: Mapping[str, Category], selected: str = ALL_CATEGORIES) -> str:
    """'All Categories' first, then one button per category in map order"""
    buttons = [_filter_button(ALL_CATEGORIES, "All Categories", ALL_ICON, selected == ALL_CATEGORIES)]
    for key, category in categories.items():
        buttons.append(_filter_button(key, category.display_name, category.icon or DEFAULT_ICON, selected == key))
    return "\n".join(buttons)


def render_stats(stats: Mapping[str, int]) -> str:
    labels = [
        ('total_terms', 'Technical Terms'),
        ('total_categories', 'Categories'),
        ('total_contributors', 'Contributors'),
        ('verified_terms', 'Verified Terms'),
    ]
    return "\n".join(
        f'<div class="stat-card"><div class="stat-number">{int(stats.get(key, 0))}</div>'
        f'<div class="stat-label">{label}</div></div>'
        for key, label in labels
    )
