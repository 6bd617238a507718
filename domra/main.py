#!/usr/bin/env python3
"""
Domra Lexicon Viewer - Streamlit UI Entry Point
Searchable, filterable card grid of English/Khmer technical terms

Run with: streamlit run domra/main.py
"""

import streamlit as st

from domra.core.config import DomraConfig
from domra.core.controller import LexiconController
from domra.core.errors import ExportError
from domra.core.export import export_filename, export_json
from domra.core.models import ALL_CATEGORIES
from domra.core.renderer import render_card
from domra.core.state import (
    DARK, THEME_ICONS, CloseModal, OpenModal, SetCategory, SetSearch, ToggleTheme,
)

# Page configuration
st.set_page_config(
    page_title="Domra Tech Lexicon",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="expanded"
)

CARD_CSS = """
<style>
    .word-card {
        border: 1px solid #e5e7eb;
        border-radius: 10px;
        padding: 16px;
        margin-bottom: 16px;
    }
    .word-english { font-weight: 600; font-size: 1.1rem; }
    .word-khmer { font-size: 1.25rem; margin: 4px 0; }
    .word-category, .word-date { color: #6b7280; font-size: 0.85rem; }
    .tag {
        display: inline-block;
        font-size: 0.8rem;
        padding: 2px 8px;
        margin: 2px;
        border-radius: 999px;
        background-color: #e5e7eb;
        color: #374151;
    }
    .word-footer { display: flex; justify-content: space-between; margin-top: 8px; }
    .no-results { text-align: center; padding: 40px 0; }
    .no-results button { display: none; }
</style>
"""

DARK_CSS = """
<style>
    .stApp { background-color: #111827; color: #e5e7eb; }
    .word-card { border-color: #374151; }
</style>
"""


# Initialize the controller once per session
def init_controller() -> LexiconController:
    """Load the lexicon; a failed load stays failed for the session"""
    controller = LexiconController(DomraConfig())
    with st.spinner("Loading lexicon..."):
        controller.start()
    return controller


if 'controller' not in st.session_state:
    st.session_state.controller = init_controller()

controller: LexiconController = st.session_state.controller

st.markdown(CARD_CSS, unsafe_allow_html=True)
if controller.state.theme == DARK:
    st.markdown(DARK_CSS, unsafe_allow_html=True)

if not controller.state.is_ready:
    st.error("Unable to load the lexicon data. Please reload the page to try again.")
    st.caption(controller.state.error or "")
    st.stop()

lexicon = controller.state.lexicon

# Sidebar
with st.sidebar:
    st.title("📚 Domra Tech Lexicon")

    if st.button(f"{THEME_ICONS[controller.state.theme]} Toggle theme", use_container_width=True):
        controller.handle(ToggleTheme())
        st.rerun()

    try:
        st.download_button(
            "⬇️ Export JSON",
            data=export_json(lexicon, config=controller.config.export),
            file_name=export_filename(config=controller.config.export),
            mime="application/json",
            use_container_width=True
        )
    except ExportError as e:
        st.error(f"Error exporting data: {str(e)}")

    if st.button("➕ Contribute New Terms", use_container_width=True):
        controller.handle(OpenModal())

    stats = controller.view()["stats"]
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Technical Terms", stats["total_terms"])
        st.metric("Contributors", stats["total_contributors"])
    with col2:
        st.metric("Categories", stats["total_categories"])
        st.metric("Verified Terms", stats["verified_terms"])

if controller.state.modal_open:
    with st.container(border=True):
        st.subheader("Contribute New Terms")
        st.write(
            "Send the English and Khmer names, a category and a short description "
            "to the maintainers."
        )
        if st.button("Close"):
            controller.handle(CloseModal())
            st.rerun()

# Search box; Streamlit only reruns on enter/blur, which already coalesces keystrokes
search_text = st.text_input(
    "Search",
    value=controller.state.query.search_text,
    placeholder="Search English or Khmer...",
    label_visibility="collapsed"
)
if search_text.strip() != controller.state.query.search_text:
    controller.handle(SetSearch(search_text))

# Category buttons
keys = [ALL_CATEGORIES] + list(lexicon.categories)
labels = {ALL_CATEGORIES: "📚 All Categories"}
for key, category in lexicon.categories.items():
    labels[key] = f"{category.icon or '📝'} {category.display_name}"

columns = st.columns(min(len(keys), 6))
for index, key in enumerate(keys):
    active = controller.state.query.selected_category == key
    with columns[index % len(columns)]:
        if st.button(labels[key], key=f"filter-{key}", type="primary" if active else "secondary",
                     use_container_width=True):
            controller.handle(SetCategory(key))
            st.rerun()

view = controller.view()
st.markdown(f"**{view['label']}**")

if view["no_results"]:
    st.markdown(view["grid_html"], unsafe_allow_html=True)
else:
    grid = st.columns(3)
    for index, term in enumerate(view["result"]):
        with grid[index % 3]:
            st.markdown(render_card(term, lexicon.categories), unsafe_allow_html=True)
