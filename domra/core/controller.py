"""
Domra Lexicon Controller
Owns the application state and performs the side effects of each action
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import logging
import threading

from .config import DomraConfig, default_config
from .errors import ExportError, LoadError
from .export import write_export
from .loader import LexiconLoader
from .models import ALL_CATEGORIES
from .query import category_counts, compute_stats
from .renderer import render_filter_buttons, render_results, render_stats
from .state import (
    THEME_ICONS, AppState, Debouncer, Export, SetCategory, SetSearch, ThemeStore, ToggleTheme,
    dispatch, failed, loaded,
)

logger = logging.getLogger(__name__)


class LexiconController:
    """
    Top-level controller shared by the CLI, the web app and the Streamlit viewer
    """

    def __init__(self, config: Optional[DomraConfig] = None,
                 loader: Optional[LexiconLoader] = None,
                 theme_store: Optional[ThemeStore] = None):
        self.config = config or default_config
        self.loader = loader or LexiconLoader(self.config.loader)
        self.theme_store = theme_store or ThemeStore(
            self.config.viewer.prefs_path,
            key=self.config.viewer.theme_key,
            default=self.config.viewer.default_theme,
        )
        self.debouncer = Debouncer(self.config.viewer.debounce_ms)
        self.state = AppState(theme=self.theme_store.load())
        self.export_dir: Path = Path(".")
        self.last_export: Optional[Path] = None
        self.last_export_error: Optional[str] = None
        self._listeners: List[Callable[[AppState], None]] = []
        # Debounced searches apply from a timer thread; every read-dispatch-set
        # of self.state happens under this lock
        self._lock = threading.RLock()

    def subscribe(self, listener: Callable[[AppState], None]):
        """Register a callback run after every state change"""
        self._listeners.append(listener)

    def _set_state(self, state: AppState):
        changed = state is not self.state
        self.state = state
        if changed:
            for listener in self._listeners:
                listener(state)

    def start(self) -> AppState:
        """
        Load the lexicon once

        A load failure moves the state to the error view for the rest of
        the session; there is no retry.
        """
        try:
            lexicon = self.loader.load()
        except LoadError as e:
            logger.error(f"Error loading data: {e}")
            with self._lock:
                self._set_state(failed(self.state, e))
                return self.state

        with self._lock:
            self._set_state(loaded(self.state, lexicon))
            return self.state

    def handle(self, action) -> AppState:
        """
        Apply an action immediately and run its side effects

        An export failure is logged and kept in ``last_export_error``; the
        state is left as it was.
        """
        with self._lock:
            new_state = dispatch(self.state, action)

            if isinstance(action, ToggleTheme):
                self.theme_store.save(new_state.theme)
            elif isinstance(action, Export):
                try:
                    self.export()
                    self.last_export_error = None
                except ExportError as e:
                    logger.error(f"Error exporting data: {e}")
                    self.last_export_error = str(e)

            self._set_state(new_state)
            return self.state

    def search(self, text: str, debounce: bool = True) -> Optional[int]:
        """
        Update the search text

        With ``debounce`` the update is deferred until the quiet period
        elapses and the debounce token is returned.
        """
        if not debounce:
            self.handle(SetSearch(text))
            return None
        return self.debouncer.schedule(self.handle, SetSearch(text))

    def export(self) -> Path:
        """
        Write the export document to ``export_dir``

        Raises:
            ExportError: If the lexicon is not loaded or the write fails
        """
        if not self.state.is_ready:
            raise ExportError("Nothing to export: lexicon is not loaded")
        self.last_export = write_export(self.state.lexicon, self.export_dir, config=self.config.export)
        return self.last_export

    def view(self) -> Dict[str, Any]:
        """Everything a surface needs to draw the current state"""
        state = self.state
        view: Dict[str, Any] = {
            "status": state.status,
            "error": state.error,
            "theme": state.theme,
            "theme_icon": THEME_ICONS[state.theme],
            "modal_open": state.modal_open,
            "search_text": state.query.search_text,
            "selected_category": state.query.selected_category,
        }
        if not state.is_ready:
            return view

        lexicon = state.lexicon
        result = state.visible()
        rendered = render_results(result, lexicon.categories)
        view.update({
            "result": result,
            "count": result.count,
            "label": rendered["label"],
            "grid_html": rendered["html"],
            "no_results": result.is_empty(),
            "filters_html": render_filter_buttons(lexicon.categories, state.query.selected_category),
            "stats": compute_stats(lexicon.terms, lexicon.categories),
            "category_counts": category_counts(lexicon.terms, lexicon.categories),
        })
        view["stats_html"] = render_stats(view["stats"])
        return view

    def reset_filters(self) -> AppState:
        with self._lock:
            new_state = dispatch(self.state, SetSearch(""))
            new_state = dispatch(new_state, SetCategory(ALL_CATEGORIES))
            self._set_state(new_state)
            return self.state
