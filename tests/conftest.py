# tests/conftest.py
import json

import pytest

from domra.core.config import DomraConfig, LoaderConfig
from domra.core.controller import LexiconController
from domra.core.models import Lexicon
from domra.core.state import ThemeStore

TERMS = [
    {
        "english": "Cache",
        "khmer": "ឃ្លាំងសម្ងាត់",
        "category": "storage",
        "description": "Fast storage for recently used data",
        "tags": ["performance"],
        "dateAdded": "2024-03-01",
        "contributors": ["vanna"],
        "status": "verified",
    },
    {
        "english": "API Gateway",
        "khmer": "ច្រកទ្វារ API",
        "category": "networking",
        "description": "Routes client requests to backend services",
        "tags": ["Cloud", "web"],
        "examples": {
            "english": "The gateway throttles abusive clients.",
            "khmer": "ច្រកទ្វារកំណត់ល្បឿនអតិថិជន។",
        },
        "reference": "https://example.org/api-gateway",
        "contributors": ["dara", "vanna"],
    },
    {
        "english": "Scheduler",
        "khmer": "កម្មវិធីកំណត់កាលវិភាគ",
        "category": "compute",
        "contributors": ["dara"],
        "status": "verified",
    },
]

CATEGORIES = {
    "storage": {"name": {"english": "Storage", "khmer": "ការផ្ទុកទិន្នន័យ"}, "icon": "💾"},
    "networking": {"name": {"english": "Networking", "khmer": "បណ្តាញ"}, "icon": "🌐"},
    "compute": {"name": {"english": "Compute", "khmer": "ការគណនា"}},
}

SITE = {"project": {"name": "Domra Tech Lexicon", "version": "2.1.0"}}


def write_documents(root, terms=None, categories=None, site=None):
    data_dir = root / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    documents = {
        "lexicon.json": {"terms": TERMS if terms is None else terms},
        "categories.json": {"categories": CATEGORIES if categories is None else categories},
        "website.json": SITE if site is None else site,
    }
    for name, content in documents.items():
        with open(data_dir / name, "w", encoding="utf-8") as f:
            json.dump(content, f, ensure_ascii=False)
    return root


@pytest.fixture
def data_root(tmp_path):
    """A directory laid out like the site root, with data/*.json"""
    return write_documents(tmp_path / "site")


@pytest.fixture
def lexicon():
    return Lexicon.from_documents({"terms": TERMS}, {"categories": CATEGORIES}, SITE)


@pytest.fixture
def config(data_root, tmp_path, monkeypatch):
    for name in ("DOMRA_DATA_SOURCE", "DOMRA_TIMEOUT", "DOMRA_DEBOUNCE_MS", "DOMRA_PREFS_PATH", "DOMRA_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    config = DomraConfig(loader=LoaderConfig(data_source=str(data_root)))
    config.viewer.prefs_path = str(tmp_path / "prefs" / "preferences.json")
    config.viewer.debounce_ms = 20
    return config


@pytest.fixture
def controller(config):
    store = ThemeStore(config.viewer.prefs_path, key=config.viewer.theme_key)
    return LexiconController(config, theme_store=store)
