"""Configuration file handling for the task list CLI."""

import json
from pathlib import Path

from tasklist.storage import DEFAULT_STORAGE_KEY

DEFAULT_CONFIG = {
    "storage_file": "tasks.json",  # JSON file holding the storage slots
    "storage_key": DEFAULT_STORAGE_KEY,
    "export_dir": ".",
    "log_level": "WARNING",
}


def load_config(config_path: str = "tasklist_config.json") -> dict:
    """Load configuration from a JSON file.

    If the file doesn't exist, returns the default configuration.

    Args:
        config_path: Path to the configuration file

    Returns:
        Dictionary with configuration values
    """
    path = Path(config_path)
    if not path.exists():
        return DEFAULT_CONFIG.copy()

    with open(path) as f:
        config = json.load(f)

    if not isinstance(config, dict):
        raise ValueError(f"Configuration file '{config_path}' must contain a JSON object")

    # Merge with defaults to ensure all required keys exist
    result = DEFAULT_CONFIG.copy()
    result.update(config)
    return result


def save_default_config(config_path: str = "tasklist_config.json") -> None:
    """Save the default configuration to a file.

    Args:
        config_path: Path where to save the configuration
    """
    with open(config_path, "w") as f:
        json.dump(DEFAULT_CONFIG, f, indent=2)
