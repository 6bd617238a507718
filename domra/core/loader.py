"""
Domra Lexicon Loader
Fetches the terms, categories and site documents concurrently
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urljoin, urlparse
import json
import logging

import requests

from .config import LoaderConfig
from .errors import LoadError
from .models import Lexicon

logger = logging.getLogger(__name__)


class LexiconLoader:
    """
    Loads the three lexicon documents, all or nothing

    The data source is either an http(s) base URL or a local directory.
    """

    def __init__(self, config: Optional[LoaderConfig] = None,
                 session: Optional[requests.Session] = None):
        """
        Initialize loader

        Args:
            config: Loader configuration (source, resource paths, timeout)
            session: Optional requests session, mainly for tests
        """
        self.config = config or LoaderConfig()
        self.session = session

    @property
    def is_remote(self) -> bool:
        return urlparse(self.config.data_source).scheme in ("http", "https")

    def resources(self) -> Dict[str, str]:
        """Resource name -> path relative to the data source"""
        return {
            "terms": self.config.terms_path,
            "categories": self.config.categories_path,
            "site": self.config.site_path,
        }

    def load(self) -> Lexicon:
        """
        Fetch and parse all three documents

        Returns:
            Lexicon with terms, categories and site metadata

        Raises:
            LoadError: If any document fails to fetch or parse
        """
        resources = self.resources()
        logger.info(f"Loading lexicon from {self.config.data_source}")

        session = self.session
        owns_session = False
        if self.is_remote and session is None:
            session = requests.Session()
            session.headers.update({'User-Agent': self.config.user_agent, 'Accept': 'application/json'})
            owns_session = True

        documents = {}
        try:
            with ThreadPoolExecutor(max_workers=len(resources)) as executor:
                futures = {
                    name: executor.submit(self._fetch, name, path, session)
                    for name, path in resources.items()
                }
                # Wait for every fetch so none is left running, then fail on the first error
                errors = []
                for name, future in futures.items():
                    try:
                        documents[name] = future.result()
                    except LoadError as e:
                        errors.append(e)
                if errors:
                    raise errors[0]
        finally:
            if owns_session:
                session.close()

        lexicon = Lexicon.from_documents(documents["terms"], documents["categories"], documents["site"])
        logger.info(f"Data loaded successfully: {len(lexicon.terms)} terms, {len(lexicon.categories)} categories")
        return lexicon

    def _fetch(self, name: str, path: str, session: Optional[requests.Session]) -> Any:
        if self.is_remote:
            return self._fetch_url(name, path, session)
        return self._read_file(name, path)

    def resource_url(self, path: str) -> str:
        """Absolute URL of a document below a remote data source"""
        base = self.config.data_source
        if not base.endswith("/"):
            base += "/"
        return urljoin(base, path)

    def _fetch_url(self, name: str, path: str, session: requests.Session) -> Any:
        url = self.resource_url(path)

        try:
            response = session.get(url, timeout=self.config.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout as e:
            logger.error(f"Timed out fetching {url}: {e}")
            raise LoadError(f"Timed out after {self.config.timeout}s fetching {url}", resource=name) from e
        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error fetching {url}: {e}")
            raise LoadError(f"HTTP error! status: {e.response.status_code if e.response is not None else 'unknown'}",
                            resource=name) from e
        except ValueError as e:
            # requests' JSONDecodeError is also a RequestException
            logger.error(f"Invalid JSON from {url}: {e}")
            raise LoadError(f"Invalid JSON in {url}", resource=name) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching {url}: {e}")
            raise LoadError(f"Could not fetch {url}: {e}", resource=name) from e

    def _read_file(self, name: str, path: str) -> Any:
        file_path = Path(self.config.data_source) / path
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except OSError as e:
            logger.error(f"Error reading {file_path}: {e}")
            raise LoadError(f"Could not read {file_path}: {e}", resource=name) from e
        except ValueError as e:
            logger.error(f"Invalid JSON in {file_path}: {e}")
            raise LoadError(f"Invalid JSON in {file_path}", resource=name) from e


def load_lexicon(config: Optional[LoaderConfig] = None) -> Lexicon:
    """Convenience wrapper around LexiconLoader.load()"""
    return LexiconLoader(config).load()
