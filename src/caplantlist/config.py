"""Configuration for the plant list.

Bundled reference data (families, genera, synonyms) lives in the package's
``data`` directory. Site-specific settings live in an optional
``config.json`` inside the user's data directory.
"""

from __future__ import annotations

import json
from pathlib import Path

# Maximum number of iNaturalist photos kept per taxon
MAX_PHOTOS = 5

PHOTO_FILE_NAME = "inattaxonphotos.csv"
DEFAULT_PHOTO_FILE = Path("data") / PHOTO_FILE_NAME

CONFIG_FILE_NAME = "config.json"


class Config:
    """Site configuration loaded from ``config.json``.

    Example:
        >>> config = Config("data")
        >>> config.get_label("status-NC", "Introduced")
        'Introduced'
    """

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self._data: dict = {}
        if data_dir is not None:
            config_file = Path(data_dir) / CONFIG_FILE_NAME
            if config_file.exists():
                with open(config_file, encoding="utf-8") as f:
                    self._data = json.load(f)

    def get_label(self, name: str, default: str) -> str:
        """Get a display label, falling back to ``default`` if not overridden."""
        labels = self._data.get("labels", {})
        return labels.get(name, default)

    @staticmethod
    def get_package_dir() -> Path:
        return Path(__file__).parent

    @staticmethod
    def get_package_data_dir() -> Path:
        return Config.get_package_dir() / "data"
