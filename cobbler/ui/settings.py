# cobbler/ui/settings.py
import json
from pathlib import Path
from typing import Optional

from cobbler.core.debug import debug_log

CONFIG_PATH = Path.home() / ".cobbler_player.json"
DEFAULT_VOLUME = 75


def load_config(path: Optional[Path] = None) -> dict:
    path = path or CONFIG_PATH
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, path: Optional[Path] = None):
    path = path or CONFIG_PATH
    try:
        existing = load_config(path)
        existing.update(data)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(existing, f, indent=2)
    except (OSError, TypeError, ValueError) as e:
        debug_log(f"Config save error: {e}")


def _clamp_volume(value) -> int:
    try:
        volume = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_VOLUME
    return max(0, min(100, volume))


def load_volume(path: Optional[Path] = None) -> int:
    value = load_config(path).get("volume")
    if value is None:
        return DEFAULT_VOLUME
    return _clamp_volume(value)


def save_volume(value: int, path: Optional[Path] = None):
    save_config({"volume": _clamp_volume(value)}, path)
