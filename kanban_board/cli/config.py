import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

CONFIG_FILE_NAME = "config.json"


class ConfigError(RuntimeError):
    pass


class GlobalConfig(BaseModel):
    """Per-user settings of the rk command"""
    api_url: Optional[str] = None
    api_key: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url and self.api_key)


def config_dir() -> Path:
    """$RK_CONFIG_DIR, else $XDG_CONFIG_HOME/real-kanban, else ~/.config/real-kanban"""
    override = os.getenv("RK_CONFIG_DIR")
    if override:
        return Path(override)
    base = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "real-kanban"


def global_config_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def load_global_config() -> GlobalConfig:
    path = global_config_path()
    if not path.exists():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {path}; run 'rk init' to rewrite it") from exc


def save_global_config(config: GlobalConfig) -> Path:
    path = global_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")
    return path
