"""Per-user settings file (~/.gitguide/config.json)."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .logging import get_logger

logger = get_logger("config")

CONFIG_DIR_ENV = "GITGUIDE_CONFIG_DIR"
CONFIG_FILENAME = "config.json"


@dataclass
class Config:
    """Stored settings. ``api_key`` is a GitHub token used for API calls."""

    api_key: str | None = None
    model: str | None = None


def config_path() -> Path:
    base = os.environ.get(CONFIG_DIR_ENV)
    config_dir = Path(base) if base else Path.home() / ".gitguide"
    return config_dir / CONFIG_FILENAME


def load_config(path: Path | None = None) -> Config:
    """Load settings; a missing or broken file gives an empty Config."""
    path = path or config_path()
    if not path.is_file():
        return Config()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return Config()
    if not isinstance(data, dict):
        return Config()
    return Config(api_key=data.get("apiKey") or None, model=data.get("model") or None)


def save_config(config: Config, path: Path | None = None) -> Path:
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {}
    if config.api_key:
        data["apiKey"] = config.api_key
    if config.model:
        data["model"] = config.model
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def get_token(path: Path | None = None) -> str | None:
    return load_config(path).api_key


def set_token(token: str | None, path: Path | None = None) -> Path:
    config = load_config(path)
    config.api_key = token.strip() if token else None
    return save_config(config, path)
