# tests/test_controller.py
"""
Controller wiring: loading, actions with side effects, and the rendered view.
"""

import threading
import time

import pytest

from domra.core import controller as controller_module
from domra.core.config import LoaderConfig
from domra.core.controller import LexiconController
from domra.core.errors import ExportError
from domra.core.loader import LexiconLoader
from domra.core.state import DARK, Export, OpenModal, SetCategory, ThemeStore, ToggleTheme


def test_start_loads_lexicon(controller):
    state = controller.start()

    assert state.is_ready
    view = controller.view()
    assert view["count"] == 3
    assert view["label"] == "3 terms found"
    assert not view["no_results"]
    assert view["stats"]["verified_terms"] == 2
    assert view["category_counts"]["all"] == 3
    assert 'aria-pressed="true"' in view["filters_html"]


def test_failed_start_shows_error_view(config, tmp_path):
    config.loader.data_source = str(tmp_path / "missing")
    controller = LexiconController(config, theme_store=ThemeStore(tmp_path / "prefs.json"))

    state = controller.start()

    assert state.status == "error"
    view = controller.view()
    assert view["status"] == "error"
    assert "grid_html" not in view
    assert "count" not in view


def test_filtering_through_actions(controller):
    controller.start()

    controller.handle(SetCategory("compute"))
    assert controller.view()["count"] == 1

    controller.handle(SetCategory("does-not-exist"))
    view = controller.view()
    assert view["count"] == 0
    assert view["no_results"]
    assert view["label"] == "0 terms found"
    assert "no-results" in view["grid_html"]

    controller.reset_filters()
    assert controller.view()["count"] == 3


def test_undebounced_search(controller):
    controller.start()
    assert controller.search("gateway", debounce=False) is None
    assert [t.english for t in controller.view()["result"]] == ["API Gateway"]


def test_debounced_search_applies_latest_text(controller):
    controller.start()
    applied = threading.Event()
    controller.subscribe(lambda state: applied.set())

    controller.search("c")
    token = controller.search("sched")

    assert controller.debouncer.is_pending(token)
    assert applied.wait(2.0)
    assert controller.state.query.search_text == "sched"


def test_toggle_theme_is_persisted(controller, config):
    controller.handle(ToggleTheme())

    assert controller.state.theme == DARK
    reloaded = LexiconController(config, theme_store=ThemeStore(config.viewer.prefs_path))
    assert reloaded.state.theme == DARK


def test_listeners_see_state_changes(controller):
    seen = []
    controller.subscribe(seen.append)

    controller.handle(OpenModal())

    assert len(seen) == 1
    assert seen[0].modal_open


def test_export_writes_file(controller, tmp_path):
    controller.start()
    controller.export_dir = tmp_path / "out"

    path = controller.export()

    assert path.exists()
    assert path.name.startswith("domra-tech-lexicon-")
    assert controller.last_export == path


def test_export_before_load_fails(controller):
    with pytest.raises(ExportError):
        controller.export()


def test_custom_loader_is_used(config, tmp_path, data_root):
    loader = LexiconLoader(LoaderConfig(data_source=str(data_root)))
    controller = LexiconController(config, loader=loader, theme_store=ThemeStore(tmp_path / "p.json"))
    assert controller.start().is_ready


def test_category_change_during_debounced_search_is_kept(controller, monkeypatch):
    controller.start()
    entered = threading.Event()
    applied = threading.Event()
    original_dispatch = controller_module.dispatch

    def slow_dispatch(state, action):
        if threading.current_thread() is not threading.main_thread():
            entered.set()
            time.sleep(0.2)
        return original_dispatch(state, action)

    monkeypatch.setattr(controller_module, "dispatch", slow_dispatch)
    controller.subscribe(lambda state: applied.set() if state.query.search_text == "a" else None)

    controller.search("a")
    assert entered.wait(2.0)
    controller.handle(SetCategory("storage"))

    assert applied.wait(2.0)
    assert controller.state.query.selected_category == "storage"
    assert controller.state.query.search_text == "a"


def test_export_action_writes_file(controller, tmp_path):
    controller.start()
    controller.export_dir = tmp_path / "out"
    before = controller.state

    state = controller.handle(Export())

    assert state is before
    assert controller.last_export is not None and controller.last_export.exists()
    assert controller.last_export_error is None


def test_export_action_failure_is_recorded(controller):
    before = controller.state

    state = controller.handle(Export())

    assert state is before
    assert controller.last_export is None
    assert "not loaded" in controller.last_export_error


def test_export_action_write_failure_keeps_state(controller, tmp_path):
    controller.start()
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    controller.export_dir = blocker
    before = controller.state

    assert controller.handle(Export()) is before
    assert controller.last_export_error
