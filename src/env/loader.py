# src/env/loader.py

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .schema import BuildConfig


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

# Relative to the working directory the CLI is started from.
DEFAULT_CONFIG_FILE = Path("config.yaml")

REQUIRED_KEYS = ("pack_name", "version", "minecraft_version")


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML config file; the top level must be a mapping."""
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _resolve_path(value: Any, base: Path) -> Path:
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else base / path


def _optional_path(value: Any, base: Path) -> Optional[Path]:
    if value is None or value == "":
        return None
    return _resolve_path(value, base)


def _string_list(raw: Dict[str, Any], key: str, path: Path) -> List[str]:
    value = raw.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' in {path} must be a list of strings.")
    return list(value)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_config_from_mapping(raw: Dict[str, Any], base_dir: Path, config_path: Optional[Path] = None) -> BuildConfig:
    """Validate a raw mapping and resolve relative paths against `base_dir`."""
    source = config_path or base_dir
    missing = [key for key in REQUIRED_KEYS if not raw.get(key)]
    if missing:
        raise ValueError(f"{source} is missing required key(s): {', '.join(missing)}")

    return BuildConfig(
        pack_name=str(raw["pack_name"]),
        version=str(raw["version"]),
        minecraft_version=str(raw["minecraft_version"]),
        deploy_path=_optional_path(raw.get("deploy_path"), base_dir),
        pack_dir=_resolve_path(raw.get("pack_dir", "pack"), base_dir),
        build_root=_resolve_path(raw.get("build_root", "build"), base_dir),
        generators_dir=_optional_path(raw.get("generators_dir"), base_dir),
        vanilla_cache_dir=_resolve_path(raw.get("vanilla_cache_dir", "minecraft"), base_dir),
        ignored_files=_string_list(raw, "ignored_files", Path(source)),
        config_path=config_path,
    )


def load_build_config(path: Optional[Path] = None) -> BuildConfig:
    """Main entry point: read config.yaml and return a BuildConfig."""
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_FILE
    raw = _load_yaml(config_path)
    return build_config_from_mapping(raw, config_path.resolve().parent, config_path)
