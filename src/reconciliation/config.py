"""Settings loader for the reconciliation engine."""
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

SETTINGS_PATH = Path(__file__).parent / "settings.yaml"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "edit_sync": {
        "endpoint": "http://localhost:3000/api/n8n/detection-edit-sync",
        "timeout_seconds": 30,
    },
    "apply": {
        "default_added_class": "siding",
    },
}


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load settings YAML, filling any missing keys from the defaults.

    Args:
        path: Optional settings file (defaults to settings.yaml beside this module)

    Returns:
        Dict with "edit_sync" and "apply" sections
    """
    settings_path = Path(path) if path else SETTINGS_PATH
    with open(settings_path) as f:
        loaded = yaml.safe_load(f) or {}

    settings = {section: dict(values) for section, values in DEFAULT_SETTINGS.items()}
    for section, values in loaded.items():
        if isinstance(values, dict):
            settings.setdefault(section, {}).update(values)
        else:
            settings[section] = values
    return settings
