# -*- coding: utf-8 -*-
"""
Configuration Loader
====================

YAML configuration lives under ``config/`` at the project root:

- ``config/main.yaml``    shared settings (logging, syllabus, pricing, pipeline)
- ``config/agents.yaml``  per-module LLM parameters (temperature, max_tokens)
- ``config/<feature>.yaml`` optional feature overrides merged over main.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[3]

DEFAULT_AGENT_PARAMS: dict[str, Any] = {
    "temperature": 0.4,
    "max_tokens": 4096,
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping, returning {} when the file is absent or empty."""
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config_with_main(config_file: str, project_root: Path | None = None) -> dict[str, Any]:
    """
    Load ``config/main.yaml`` and merge ``config/<config_file>`` over it.

    Args:
        config_file: Feature config file name (e.g. "newspaper_config.yaml")
        project_root: Project root; defaults to the repository root

    Returns:
        Merged configuration dictionary
    """
    root = project_root or PROJECT_ROOT
    config_dir = root / "config"
    main_cfg = load_yaml_file(config_dir / "main.yaml")
    if not config_file or config_file == "main.yaml":
        return main_cfg
    return _deep_merge(main_cfg, load_yaml_file(config_dir / config_file))


def get_agent_params(module_name: str, project_root: Path | None = None) -> dict[str, Any]:
    """
    Get LLM parameters for a module from ``config/agents.yaml``.

    Missing keys fall back to DEFAULT_AGENT_PARAMS.
    """
    root = project_root or PROJECT_ROOT
    agents_cfg = load_yaml_file(root / "config" / "agents.yaml")
    module_cfg = agents_cfg.get(module_name, {}) or {}
    return {
        "temperature": float(module_cfg.get("temperature", DEFAULT_AGENT_PARAMS["temperature"])),
        "max_tokens": int(module_cfg.get("max_tokens", DEFAULT_AGENT_PARAMS["max_tokens"])),
    }


__all__ = [
    "PROJECT_ROOT",
    "load_yaml_file",
    "load_config_with_main",
    "get_agent_params",
]
