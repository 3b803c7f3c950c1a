"""Configuration loading and runtime directory bootstrapping."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Ensure database, log and export directories exist and return resolved paths."""
    paths_cfg = config.get("paths", {})
    db_path = (root / paths_cfg.get("db_path", "workspace/habits.db")).resolve()
    activity_log_path = (root / paths_cfg.get("activity_log_path", "logs/activity.jsonl")).resolve()
    export_dir = (root / paths_cfg.get("export_dir", "workspace/exports")).resolve()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    activity_log_path.parent.mkdir(parents=True, exist_ok=True)
    export_dir.mkdir(parents=True, exist_ok=True)

    return {
        "db_path": db_path,
        "activity_log_path": activity_log_path,
        "export_dir": export_dir,
    }


def load_effective_config(root: Path) -> dict[str, Any]:
    """Load default settings and the optional catalog override."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    catalog_cfg = load_yaml(config_dir / "catalog.yaml")
    return merge_dicts(default_cfg, {"catalog": catalog_cfg})
