"""
Domra Lexicon Central Configuration
Contains data locations, timeouts, viewer preferences and export settings
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import os


@dataclass
class LoaderConfig:
    """Configuration for fetching the lexicon documents"""

    # Base location: an http(s) URL or a local directory
    data_source: str = "."

    # Resource paths relative to the data source
    terms_path: str = "data/lexicon.json"
    categories_path: str = "data/categories.json"
    site_path: str = "data/website.json"

    # Per-resource timeout in seconds
    timeout: float = 10.0

    user_agent: str = "DomraLexicon/1.0"


@dataclass
class ViewerConfig:
    """Configuration for the interactive surfaces"""

    # Quiet period before a search is recomputed
    debounce_ms: int = 300

    # Persisted theme preference
    theme_key: str = "domra-tech-theme"
    default_theme: str = "light"
    prefs_path: str = str(Path.home() / ".domra" / "preferences.json")

    # Web server
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class ExportConfig:
    """Configuration for JSON export"""

    exported_by: str = "Domra Tech Lexicon"
    default_version: str = "1.0.0"
    filename_prefix: str = "domra-tech-lexicon"


@dataclass
class DomraConfig:
    """Main configuration class combining all settings"""

    loader: LoaderConfig
    viewer: ViewerConfig
    export: ExportConfig

    # Logging
    log_level: str = "INFO"

    def __init__(self,
                 loader: Optional[LoaderConfig] = None,
                 viewer: Optional[ViewerConfig] = None,
                 export: Optional[ExportConfig] = None):
        """Initialize with optional custom configurations"""
        self.loader = loader or LoaderConfig()
        self.viewer = viewer or ViewerConfig()
        self.export = export or ExportConfig()
        self.log_level = "INFO"

        # Override with environment variables if present
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration overrides from environment variables"""
        if os.getenv("DOMRA_DATA_SOURCE"):
            self.loader.data_source = os.getenv("DOMRA_DATA_SOURCE")

        if os.getenv("DOMRA_TIMEOUT"):
            try:
                self.loader.timeout = float(os.getenv("DOMRA_TIMEOUT"))
            except ValueError:
                raise ValueError(f"DOMRA_TIMEOUT must be a number, got {os.getenv('DOMRA_TIMEOUT')!r}")

        if os.getenv("DOMRA_DEBOUNCE_MS"):
            try:
                self.viewer.debounce_ms = int(os.getenv("DOMRA_DEBOUNCE_MS"))
            except ValueError:
                raise ValueError(f"DOMRA_DEBOUNCE_MS must be an integer, got {os.getenv('DOMRA_DEBOUNCE_MS')!r}")

        if os.getenv("DOMRA_PREFS_PATH"):
            self.viewer.prefs_path = os.getenv("DOMRA_PREFS_PATH")

        # Debug override
        if os.getenv("DOMRA_DEBUG", "").lower() in ("true", "1", "yes"):
            self.log_level = "DEBUG"

    def configure_logging(self):
        """Apply the configured log level to the root logger"""
        logging.basicConfig(
            level=getattr(logging, self.log_level.upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )

    @classmethod
    def load_from_file(cls, config_path: str) -> 'DomraConfig':
        """Load configuration from YAML file"""
        import yaml

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

            loader = LoaderConfig(**config_data.get('loader', {}))
            viewer = ViewerConfig(**config_data.get('viewer', {}))
            export = ExportConfig(**config_data.get('export', {}))

            config = cls(loader=loader, viewer=viewer, export=export)

            # Override other settings
            for key, value in config_data.items():
                if key not in ['loader', 'viewer', 'export'] and hasattr(config, key):
                    setattr(config, key, value)

            return config

        except (OSError, TypeError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")

    def save_to_file(self, config_path: str):
        """Save configuration to YAML file"""
        import yaml

        config_data = {
            'loader': {
                'data_source': self.loader.data_source,
                'terms_path': self.loader.terms_path,
                'categories_path': self.loader.categories_path,
                'site_path': self.loader.site_path,
                'timeout': self.loader.timeout,
                'user_agent': self.loader.user_agent
            },
            'viewer': {
                'debounce_ms': self.viewer.debounce_ms,
                'theme_key': self.viewer.theme_key,
                'default_theme': self.viewer.default_theme,
                'prefs_path': self.viewer.prefs_path,
                'host': self.viewer.host,
                'port': self.viewer.port
            },
            'export': {
                'exported_by': self.export.exported_by,
                'default_version': self.export.default_version,
                'filename_prefix': self.export.filename_prefix
            },
            'log_level': self.log_level
        }

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2, allow_unicode=True)


# Default global configuration instance
default_config = DomraConfig()
