from pathlib import Path
from typing import Any, Dict

import yaml

from mediashelf.sorting.models import (
    FolderSortSelection,
    FolderSortType,
    GlobalSortSelection,
    GlobalSortType,
)

DEFAULT_CONFIG_PATH = Path("mediashelf.config.yaml")
DEFAULT_SQLITE_PATH = "library.db"
DEFAULT_LIBRARY_ID = 1
DEFAULT_TAG_SUGGESTION_LIMIT = 20


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load mediashelf configuration from YAML.

    Args:
        path: Optional path to the config file. Defaults to mediashelf.config.yaml

    Returns:
        Configuration dictionary (sections may be absent; getters apply defaults)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config structure is invalid
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    for section in ["storage", "sort", "tags", "logging"]:
        if section in config and not isinstance(config[section], dict):
            raise ValueError(f"Config section '{section}' must be a dictionary")

    # Fail on load rather than on first query
    get_library_id(config)
    get_global_sort(config)
    get_folder_sort(config)
    get_tag_suggestion_limit(config)
    return config


def get_sqlite_path(config: Dict[str, Any]) -> str:
    return config.get("storage", {}).get("sqlite_path", DEFAULT_SQLITE_PATH)


def get_library_id(config: Dict[str, Any]) -> int:
    library_id = config.get("library_id", DEFAULT_LIBRARY_ID)
    if not isinstance(library_id, int) or isinstance(library_id, bool):
        raise ValueError("Config 'library_id' must be an integer")
    return library_id


def _sort_entry(config: Dict[str, Any], key: str) -> Dict[str, Any]:
    entry = config.get("sort", {}).get(key, {}) or {}
    if not isinstance(entry, dict):
        raise ValueError(f"Config 'sort.{key}' must be a dictionary")
    ascending = entry.get("ascending", True)
    if not isinstance(ascending, bool):
        raise ValueError(f"Config 'sort.{key}.ascending' must be true or false")
    return entry


def get_global_sort(config: Dict[str, Any]) -> GlobalSortSelection:
    """
    Library-wide item order.

    Defaults:
    - type: dateAdded
    - ascending: true
    """
    entry = _sort_entry(config, "global")
    try:
        sort_type = GlobalSortType(entry.get("type", GlobalSortType.DATE_ADDED.value))
    except ValueError:
        valid = ", ".join(t.value for t in GlobalSortType)
        raise ValueError(f"Config 'sort.global.type' must be one of: {valid}")
    return GlobalSortSelection(type=sort_type, ascending=entry.get("ascending", True))


def get_folder_sort(config: Dict[str, Any]) -> FolderSortSelection:
    """
    Folder listing order.

    Defaults:
    - type: manual
    - ascending: true
    """
    entry = _sort_entry(config, "folders")
    try:
        sort_type = FolderSortType(entry.get("type", FolderSortType.MANUAL.value))
    except ValueError:
        valid = ", ".join(t.value for t in FolderSortType)
        raise ValueError(f"Config 'sort.folders.type' must be one of: {valid}")
    return FolderSortSelection(type=sort_type, ascending=entry.get("ascending", True))


def get_tag_suggestion_limit(config: Dict[str, Any]) -> int:
    limit = config.get("tags", {}).get("suggestion_limit", DEFAULT_TAG_SUGGESTION_LIMIT)
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise ValueError("Config 'tags.suggestion_limit' must be a positive integer")
    return limit


def get_log_level(config: Dict[str, Any]) -> str | None:
    return config.get("logging", {}).get("level")
