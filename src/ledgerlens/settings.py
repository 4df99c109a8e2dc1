import json
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "ledgerlens"
SETTINGS_PATH = CONFIG_DIR / "settings.json"

DEFAULT_DATA_DIR = Path.home() / "Documents" / "ledgerlens"

DEFAULTS = {
    "data_dir": str(DEFAULT_DATA_DIR),
    "workers": 4,
    "chunk_size": 256,
}


def load_settings() -> dict:
    if SETTINGS_PATH.exists():
        with open(SETTINGS_PATH) as f:
            saved = json.loads(f.read())
        return {**DEFAULTS, **saved}
    return dict(DEFAULTS)


def save_settings(settings: dict) -> None:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    with open(SETTINGS_PATH, "w") as f:
        f.write(json.dumps(settings, indent=2) + "\n")


def get_data_dir() -> Path:
    return Path(load_settings()["data_dir"])


def _positive_int(key: str) -> int:
    value = load_settings().get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return DEFAULTS[key]
    return value


def get_workers() -> int:
    """Thread pool size for matching and parsing; falls back to the default on bad values."""
    return _positive_int("workers")


def get_chunk_size() -> int:
    """Rows handed to each parsing worker at a time."""
    return _positive_int("chunk_size")
