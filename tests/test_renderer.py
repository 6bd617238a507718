# tests/test_renderer.py
from domra.core.models import Category, Examples, MatchResult, Term
from domra.core.renderer import (
    escape_html, render_card, render_filter_buttons, render_no_results, render_reference,
    render_results, render_stats, results_label,
)


def test_escape_html():
    assert escape_html("<b>\"Tom\" & 'Jerry'</b>") == "&lt;b&gt;&quot;Tom&quot; &amp; &#039;Jerry&#039;&lt;/b&gt;"
    assert escape_html(None) == ""
    assert escape_html("ឃ្លាំង") == "ឃ្លាំង"


def test_results_label():
    assert results_label(0) == "0 terms found"
    assert results_label(12) == "12 terms found"


def test_card_contains_fields(lexicon):
    card = render_card(lexicon.terms[1], lexicon.categories)

    assert '<div class="word-english">API Gateway</div>' in card
    assert '<div class="word-khmer">ច្រកទ្វារ API</div>' in card
    assert "🌐 Networking" in card
    assert "Routes client requests" in card
    assert 'class="example-text khmer"' in card
    assert '<span class="tag">Cloud</span>' in card
    assert 'href="https://example.org/api-gateway"' in card
    assert "Added: Unknown" in card


def test_card_escapes_user_text():
    term = Term(
        english="<script>alert(1)</script>",
        khmer="ក\"",
        category="x",
        description="a & b",
        tags=("<i>",),
        reference="https://example.org/?a=1&b=\"2\"",
    )
    card = render_card(term, {})

    assert "<script>" not in card
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in card
    assert "a &amp; b" in card
    assert "&lt;i&gt;" in card
    assert 'href="https://example.org/?a=1&amp;b=&quot;2&quot;"' in card


def test_card_fallbacks_for_missing_fields():
    term = Term(english="Scheduler", khmer="សឈេឌ", category="unknown-key")
    card = render_card(term, {})

    assert "📝 unknown-key" in card
    assert "No description available" in card
    assert "word-examples" not in card
    assert "word-tags" not in card
    assert "word-reference" not in card


def test_empty_examples_block_is_omitted():
    term = Term(english="x", khmer="y", category="c", examples=Examples())
    assert "word-examples" not in render_card(term, {})


def test_placeholder_reference_is_omitted():
    assert render_reference("#") == ""
    assert render_reference(None) == ""
    assert "Reference" in render_reference("https://example.org")


def test_results_use_no_results_branch_only_when_empty(lexicon):
    empty = render_results(MatchResult(), lexicon.categories)
    assert empty["label"] == "0 terms found"
    assert empty["html"] == render_no_results()
    assert "word-card" not in empty["html"]

    full = render_results(MatchResult(terms=tuple(lexicon.terms)), lexicon.categories)
    assert full["label"] == "3 terms found"
    assert full["html"].count('class="word-card') == 3
    assert "no-results" not in full["html"]


def test_filter_buttons_mark_selected_category(lexicon):
    html = render_filter_buttons(lexicon.categories, "storage")
    buttons = html.split("\n")

    assert len(buttons) == 4
    assert 'data-category="all"' in buttons[0]
    assert 'aria-pressed="false"' in buttons[0]
    assert 'class="filter-btn active" data-category="storage" aria-pressed="true"' in buttons[1]
    assert all('aria-pressed="false"' in b for b in buttons[2:])
    assert "📝 Compute" in buttons[3]


def test_filter_buttons_default_to_all():
    categories = {"storage": Category(key="storage", names={"english": "Storage"})}
    html = render_filter_buttons(categories)
    assert html.startswith('<button type="button" class="filter-btn active" data-category="all" aria-pressed="true">')


def test_render_stats():
    html = render_stats({"total_terms": 3, "total_categories": 2, "total_contributors": 5, "verified_terms": 1})
    assert html.count('class="stat-card"') == 4
    assert '<div class="stat-number">5</div><div class="stat-label">Contributors</div>' in html
