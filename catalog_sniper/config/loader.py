"""Configuration loading helpers for catalog-sniper."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models import GlobalConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
GLOBAL_CONFIG_FILENAME = "global_config.yaml"
HOME_ENV_VAR = "CATALOG_SNIPER_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    outputs_dir: Path | None = None
    logs_dir: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV_VAR)
        if env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = (self.project_root or Path.cwd()).resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.outputs_dir = (self.data_dir / "outputs").resolve()
        self.logs_dir = (root / "logs").resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.outputs_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def global_config_path(self) -> Path:
        return self.data_dir / GLOBAL_CONFIG_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None, config_path: Path | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self.config_path = config_path
        self._global_cache: GlobalConfig | None = None

    def global_config_path(self) -> Path:
        return self.config_path or self.locator.global_config_path()

    def load_global_config(self) -> GlobalConfig:
        if self._global_cache is not None:
            return self._global_cache
        path = self.global_config_path()
        if path.suffix not in CONFIG_EXTENSIONS:
            raise ValueError(f"Unsupported configuration format: {path}")
        if path.exists():
            payload = _read_file(path)
            global_cfg = GlobalConfig.model_validate(payload)
        elif self.config_path is not None:
            raise FileNotFoundError(f"Configuration file not found: {path}")
        else:
            global_cfg = GlobalConfig()
            self.save_global_config(global_cfg)
        self._global_cache = global_cfg
        return global_cfg

    def save_global_config(self, config: GlobalConfig) -> None:
        payload = config.model_dump(mode="json")
        _write_file(self.global_config_path(), payload)
        self._global_cache = config

    def resolved_outputs_dir(self) -> Path:
        outputs_dir = self.load_global_config().outputs_dir
        if not outputs_dir.is_absolute():
            return (self.locator.project_root / outputs_dir).resolve()
        return outputs_dir


__all__ = ["CONFIG_EXTENSIONS", "ConfigLocator", "ConfigRepository", "HOME_ENV_VAR"]
