from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml


class ConfigError(RuntimeError):
    pass


@dataclass
class Config:
    version: int = 1
    search_path: str = "."
    glob: Optional[str] = None
    source_path: Optional[Path] = None

    def to_json(self) -> str:
        def _default(o: Any):
            if isinstance(o, Path):
                return str(o)
            if hasattr(o, "__dict__"):
                return o.__dict__
            return str(o)

        return json.dumps(self, default=_default, indent=2, sort_keys=True)


def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        # Expand ${VAR} style
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    return value


def resolve_config_path() -> Optional[Path]:
    """Locate the config file; None means run on defaults."""
    # Highest priority: explicit override
    override = os.environ.get("ICONCTL_CONFIG")
    if override:
        p = Path(override).expanduser()
        if p.is_file():
            return p
        raise ConfigError(f"ICONCTL_CONFIG path not found: {p}")

    # XDG base dirs
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
    candidates = [xdg_home / "iconctl" / "config.yaml"]

    xdg_dirs = os.environ.get("XDG_CONFIG_DIRS", "/etc/xdg")
    for d in xdg_dirs.split(":"):
        if d:
            candidates.append(Path(d) / "iconctl" / "config.yaml")

    for c in candidates:
        if c.is_file():
            return c
    return None


def load_config(path: Optional[Path] = None) -> Config:
    cfg_path = path or resolve_config_path()
    if cfg_path is None:
        return Config()

    try:
        data = yaml.safe_load(cfg_path.read_text()) or {}
    except FileNotFoundError as e:
        raise ConfigError(str(e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {cfg_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"invalid config in {cfg_path}: expected a mapping")

    data = _expand_env(data)
    try:
        version = int(data.get("version", 1))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid config version: {data.get('version')!r}") from e

    pattern = data.get("glob")
    cfg = Config(
        version=version,
        search_path=str(data.get("search_path") or "."),
        glob=str(pattern) if pattern else None,
        source_path=cfg_path,
    )
    return cfg
