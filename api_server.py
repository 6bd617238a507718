#!/usr/bin/env python3
"""
Domra Lexicon Web Server
Serves the lexicon documents, the rendered card grid and a small JSON API
"""

import argparse
import logging
from pathlib import Path

from flask import Flask, Response, abort, jsonify, redirect, render_template_string, request, send_from_directory
from flask_cors import CORS

from domra.core.config import DomraConfig
from domra.core.controller import LexiconController
from domra.core.errors import ExportError
from domra.core.export import export_filename, export_json
from domra.core.models import ALL_CATEGORIES, QueryState
from domra.core.query import query
from domra.core.renderer import render_filter_buttons, render_results

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

# Global controller (initialized once)
controller = None

DATA_FILES = {"lexicon.json", "categories.json", "website.json"}

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{{ title }}</title>
<style>
  body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Noto Sans Khmer", sans-serif; margin: 0; }
  body[data-theme="light"] { background: #ffffff; color: #374151; }
  body[data-theme="dark"] { background: #111827; color: #e5e7eb; }
  header, main { max-width: 1100px; margin: 0 auto; padding: 1rem; }
  .filter-btn { margin: 0 .25rem .5rem 0; padding: .4rem .8rem; border-radius: 6px; border: 1px solid #d1d5db; cursor: pointer; }
  .filter-btn.active { background: #10a37f; color: #fff; border-color: #10a37f; }
  #wordGrid { display: grid; grid-template-columns: repeat(auto-fill, minmax(260px, 1fr)); gap: 1rem; }
  .word-card, .stat-card { border: 1px solid #e5e7eb; border-radius: 10px; padding: 1rem; }
  .word-english { font-weight: 600; font-size: 1.1rem; }
  .word-khmer { font-size: 1.2rem; margin: .25rem 0; }
  .tag { display: inline-block; font-size: .8rem; padding: .1rem .5rem; margin: .1rem; border-radius: 999px; background: #e5e7eb; color: #374151; }
  .word-footer { display: flex; justify-content: space-between; font-size: .8rem; margin-top: .5rem; }
  #statsContainer { display: grid; grid-template-columns: repeat(4, 1fr); gap: 1rem; margin-bottom: 1rem; }
  .stat-number { font-size: 1.5rem; font-weight: 700; }
  #contributeModal { display: none; position: fixed; inset: 0; background: rgba(0,0,0,.5); }
  #contributeModal .modal-body { background: #fff; color: #374151; max-width: 480px; margin: 10vh auto; padding: 1.5rem; border-radius: 10px; }
</style>
</head>
<body data-theme="{{ theme }}">
<header>
  <h1>{{ title }}</h1>
  <button type="button" onclick="toggleTheme()"><span id="themeIcon">{{ theme_icon }}</span></button>
  <a href="{{ url_for('export_lexicon') }}">Export JSON</a>
  <button type="button" data-action="open-modal">Contribute</button>
</header>
{% if status != "ready" %}
<main id="error">
  <h2>Unable to load the lexicon</h2>
  <p>Please reload the page to try again.</p>
</main>
{% else %}
<main id="main-content">
  <div id="statsContainer">{{ stats_html|safe }}</div>
  <input id="searchInput" type="search" placeholder="Search English or Khmer... (Ctrl+K)" value="{{ search_text }}">
  <div id="filterButtons">{{ filters_html|safe }}</div>
  <p id="resultsCount">{{ label }}</p>
  <div id="wordGrid">{{ grid_html|safe }}</div>
</main>
{% endif %}
<div id="contributeModal" aria-hidden="true">
  <div class="modal-body">
    <h2>Contribute New Terms</h2>
    <p>Send the English and Khmer names, a category and a short description to the maintainers.</p>
    <button type="button" data-action="close-modal">Close</button>
  </div>
</div>
<script>
const THEME_KEY = {{ theme_key|tojson }};
const DEBOUNCE_MS = {{ debounce_ms }};
let currentFilter = {{ selected_category|tojson }};
let currentSearch = {{ search_text|tojson }};

function applyTheme(theme) {
  document.body.setAttribute('data-theme', theme);
  document.getElementById('themeIcon').textContent = theme === 'dark' ? '☀️' : '🌙';
}
function toggleTheme() {
  const next = document.body.getAttribute('data-theme') === 'light' ? 'dark' : 'light';
  localStorage.setItem(THEME_KEY, next);
  applyTheme(next);
}
const storedTheme = localStorage.getItem(THEME_KEY);
applyTheme(storedTheme === 'light' || storedTheme === 'dark' ? storedTheme : document.body.getAttribute('data-theme'));

const modal = document.getElementById('contributeModal');
function setModal(open) {
  modal.style.display = open ? 'block' : 'none';
  modal.setAttribute('aria-hidden', open ? 'false' : 'true');
}
document.addEventListener('click', (e) => {
  const action = e.target.closest('[data-action]');
  if (action) setModal(action.dataset.action === 'open-modal');
  if (e.target === modal) setModal(false);
  const btn = e.target.closest('.filter-btn');
  if (btn) { currentFilter = btn.dataset.category; refresh(); }
});
document.addEventListener('keydown', (e) => {
  if (e.key === 'Escape') setModal(false);
  if ((e.ctrlKey || e.metaKey) && e.key === 'k') { e.preventDefault(); document.getElementById('searchInput')?.focus(); }
});

async function refresh() {
  const params = new URLSearchParams({ q: currentSearch, category: currentFilter });
  const resp = await fetch({{ url_for('search_terms')|tojson }} + '?' + params);
  if (!resp.ok) return;
  const data = await resp.json();
  document.getElementById('resultsCount').textContent = data.label;
  document.getElementById('wordGrid').innerHTML = data.html;
  document.getElementById('filterButtons').innerHTML = data.filters_html;
}
let timer;
document.getElementById('searchInput')?.addEventListener('input', (e) => {
  clearTimeout(timer);
  timer = setTimeout(() => { currentSearch = e.target.value.trim(); refresh(); }, DEBOUNCE_MS);
});
</script>
</body>
</html>
"""


def initialize_components(config: DomraConfig = None) -> bool:
    """Load the lexicon once; a failure leaves the app in its error state"""
    global controller

    config = config or DomraConfig()
    controller = LexiconController(config)
    state = controller.start()

    if state.is_ready:
        logger.info(f"Lexicon ready: {len(state.lexicon.terms)} terms")
        return True

    logger.error(f"Failed to load lexicon: {state.error}")
    return False


def _ready_or_503():
    if controller is None or not controller.state.is_ready:
        return jsonify({"error": "Lexicon data is not available"}), 503
    return None


def _query_state_from_request() -> QueryState:
    return QueryState(
        search_text=request.args.get('q', ''),
        selected_category=request.args.get('category', ALL_CATEGORIES),
    )


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    ready = controller is not None and controller.state.is_ready
    return jsonify({
        "status": "healthy" if ready else "error",
        "terms": len(controller.state.lexicon.terms) if ready else 0
    }), 200 if ready else 503


@app.route('/', methods=['GET'])
def index():
    """Full page with the initial card grid rendered server-side"""
    if controller is None:
        abort(503)

    view = controller.view()
    site = controller.state.lexicon.site if controller.state.is_ready else {}
    project = site.get("project") if isinstance(site.get("project"), dict) else {}

    if view["status"] == "ready":
        state = _query_state_from_request()
        result = query(controller.state.lexicon.terms, controller.state.lexicon.categories, state)
        rendered = render_results(result, controller.state.lexicon.categories)
        view.update({
            "search_text": state.search_text,
            "selected_category": state.selected_category,
            "label": rendered["label"],
            "grid_html": rendered["html"],
            "filters_html": render_filter_buttons(controller.state.lexicon.categories, state.selected_category),
        })

    html = render_template_string(
        PAGE_TEMPLATE,
        title=project.get("name") or controller.config.export.exported_by,
        theme_key=controller.config.viewer.theme_key,
        debounce_ms=controller.config.viewer.debounce_ms,
        **view
    )
    return html, 200 if view["status"] == "ready" else 503


@app.route('/data/<path:filename>', methods=['GET'])
def data_file(filename):
    """Serve the raw lexicon documents the loader reads"""
    if filename not in DATA_FILES:
        abort(404)
    if controller and controller.loader.is_remote:
        return redirect(controller.loader.resource_url(f"data/{filename}"))
    data_dir = Path(controller.config.loader.data_source) / "data" if controller else Path("data")
    return send_from_directory(data_dir.resolve(), filename, mimetype='application/json')


@app.route('/api/terms', methods=['GET'])
def search_terms():
    """
    Query: ?q=<text>&category=<key>
    Returns: { "count": int, "label": str, "terms": [...], "html": str, "filters_html": str }
    """
    not_ready = _ready_or_503()
    if not_ready:
        return not_ready

    lexicon = controller.state.lexicon
    state = _query_state_from_request()
    result = query(lexicon.terms, lexicon.categories, state)
    rendered = render_results(result, lexicon.categories)

    return jsonify({
        "count": result.count,
        "label": rendered["label"],
        "search": state.search_text,
        "category": state.selected_category,
        "terms": [term.to_dict() for term in result],
        "html": rendered["html"],
        "filters_html": render_filter_buttons(lexicon.categories, state.selected_category)
    })


@app.route('/api/categories', methods=['GET'])
def get_categories():
    not_ready = _ready_or_503()
    if not_ready:
        return not_ready

    view = controller.view()
    categories = controller.state.lexicon.categories
    return jsonify({
        "categories": {key: category.to_dict() for key, category in categories.items()},
        "counts": view["category_counts"]
    })


@app.route('/api/stats', methods=['GET'])
def get_stats():
    """Get lexicon statistics"""
    not_ready = _ready_or_503()
    if not_ready:
        return not_ready
    return jsonify(controller.view()["stats"])


@app.route('/api/export', methods=['GET'])
def export_lexicon():
    """Download the whole lexicon as a JSON document"""
    not_ready = _ready_or_503()
    if not_ready:
        return not_ready

    try:
        content = export_json(controller.state.lexicon, config=controller.config.export)
    except ExportError as e:
        logger.error(f"Export error: {e}")
        return jsonify({"error": f"Error exporting data: {str(e)}"}), 500

    filename = export_filename(config=controller.config.export)
    return Response(
        content,
        mimetype='application/json',
        headers={'Content-Disposition': f'attachment; filename="{filename}"'}
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Domra Tech Lexicon web server")
    parser.add_argument("--data", "-d", help="Directory or base URL holding the data/ documents")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--port", "-p", type=int, help="Port to listen on")
    parser.add_argument("--debug", action="store_true", help="Run Flask in debug mode")
    args = parser.parse_args(argv)

    config = DomraConfig.load_from_file(args.config) if args.config else DomraConfig()
    if args.data:
        config.loader.data_source = args.data
    if args.port:
        config.viewer.port = args.port
    config.configure_logging()

    logger.info("Starting Domra Lexicon web server...")
    if not initialize_components(config):
        # Keep serving so the page shows its error view
        logger.error("Lexicon failed to load; serving error page")

    app.run(host=config.viewer.host, port=config.viewer.port, debug=args.debug)


if __name__ == '__main__':
    main()
