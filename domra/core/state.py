"""
Domra Lexicon Application State
Explicit state owned by the controller, the actions that change it,
search debouncing and the persisted theme preference
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union
import json
import logging
import threading

from .errors import LoadError
from .models import ALL_CATEGORIES, Lexicon, MatchResult, QueryState
from .query import query

logger = logging.getLogger(__name__)

LIGHT = "light"
DARK = "dark"
THEMES = (LIGHT, DARK)
THEME_ICONS = {LIGHT: "🌙", DARK: "☀️"}

STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_ERROR = "error"


# Actions

@dataclass(frozen=True)
class SetSearch:
    text: str


@dataclass(frozen=True)
class SetCategory:
    category: str


@dataclass(frozen=True)
class ToggleTheme:
    pass


@dataclass(frozen=True)
class OpenModal:
    pass


@dataclass(frozen=True)
class CloseModal:
    pass


@dataclass(frozen=True)
class Export:
    pass


@dataclass(frozen=True)
class AppState:
    """Everything the surfaces render from"""

    lexicon: Lexicon = field(default_factory=Lexicon)
    query: QueryState = field(default_factory=QueryState)
    theme: str = LIGHT
    modal_open: bool = False
    status: str = STATUS_LOADING
    error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status == STATUS_READY

    def visible(self) -> MatchResult:
        """Terms matching the current query; empty unless loaded"""
        if not self.is_ready:
            return MatchResult()
        return query(self.lexicon.terms, self.lexicon.categories, self.query)


def loaded(state: AppState, lexicon: Lexicon) -> AppState:
    return replace(state, lexicon=lexicon, status=STATUS_READY, error=None)


def failed(state: AppState, error: LoadError) -> AppState:
    """A failed load is final for the session"""
    return replace(state, lexicon=Lexicon(), status=STATUS_ERROR, error=str(error))


def dispatch(state: AppState, action) -> AppState:
    """
    Apply one action to the state

    Args:
        state: Current state
        action: One of the action dataclasses above

    Returns:
        The new state; Export has no state effect and returns the same
        instance
    """
    if isinstance(action, SetSearch):
        return replace(state, query=state.query.with_search(action.text))
    if isinstance(action, SetCategory):
        return replace(state, query=state.query.with_category(action.category or ALL_CATEGORIES))
    if isinstance(action, ToggleTheme):
        return replace(state, theme=DARK if state.theme == LIGHT else LIGHT)
    if isinstance(action, OpenModal):
        return replace(state, modal_open=True)
    if isinstance(action, CloseModal):
        return replace(state, modal_open=False)
    if isinstance(action, Export):
        return state
    raise ValueError(f"Unknown action: {action!r}")


class Debouncer:
    """
    Coalesces rapid calls so only the last one runs after a quiet period

    Each ``schedule`` invalidates the previously pending call and returns a
    token identifying the new one.
    """

    def __init__(self, wait_ms: int = 300):
        self.wait = wait_ms / 1000.0
        self._lock = threading.Lock()
        self._token = 0
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Callable[[], Any]] = None

    def schedule(self, func: Callable[..., Any], *args, **kwargs) -> int:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._token += 1
            token = self._token
            self._pending = lambda: func(*args, **kwargs)
            self._timer = threading.Timer(self.wait, self._fire, args=(token,))
            self._timer.daemon = True
            self._timer.start()
            return token

    def _fire(self, token: int):
        with self._lock:
            if token != self._token or self._pending is None:
                return
            pending = self._pending
            self._pending = None
            self._timer = None
        pending()

    def is_pending(self, token: Optional[int] = None) -> bool:
        with self._lock:
            if self._pending is None:
                return False
            return token is None or token == self._token

    def flush(self) -> bool:
        """Run the pending call now; returns False if nothing was pending"""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            pending = self._pending
            self._pending = None
            self._timer = None
            self._token += 1
        if pending is None:
            return False
        pending()
        return True

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = None
            self._timer = None
            self._token += 1


class ThemeStore:
    """Persists the theme choice in a small JSON preferences file"""

    def __init__(self, path: Union[str, Path], key: str = "domra-tech-theme", default: str = LIGHT):
        self.path = Path(path)
        self.key = key
        self.default = default if default in THEMES else LIGHT

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}

    def load(self) -> str:
        theme = self._read().get(self.key)
        return theme if theme in THEMES else self.default

    def save(self, theme: str):
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme}")
        data = self._read()
        data[self.key] = theme
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            # Preference is best-effort; the UI keeps working without it
            logger.error(f"Could not save theme preference to {self.path}: {e}")
