"""Load engine settings overrides from YAML (with fallbacks)."""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from pathlib import Path

import yaml

from .config import SETTINGS, EngineSettings

logger = logging.getLogger(__name__)

_CACHE: EngineSettings | None = None


def load_engine_settings(base_path: str | Path | None = None, *, reload: bool = False) -> EngineSettings:
    """Return engine settings, applying overrides from ``engine.yaml`` if present.

    The file is looked up in ``base_path`` (default: the project root) and
    should contain an ``engine`` mapping whose keys match ``EngineSettings``
    fields. Unknown keys and non-integer values are ignored; a missing or
    unreadable file yields the defaults.
    """
    global _CACHE
    if _CACHE is not None and not reload:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent.parent)
    yaml_path = base / "engine.yaml"
    if not yaml_path.exists():
        _CACHE = SETTINGS
        return _CACHE
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable %s: %s", yaml_path, exc)
        _CACHE = SETTINGS
        return _CACHE

    section = data.get("engine") if isinstance(data, dict) else None
    overrides: dict[str, int] = {}
    if isinstance(section, dict):
        known = {f.name for f in fields(EngineSettings)}
        for key, value in section.items():
            if key not in known:
                logger.warning("Unknown engine setting %r in %s", key, yaml_path)
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                logger.warning("Engine setting %r must be a positive integer, got %r", key, value)
                continue
            overrides[key] = value
    _CACHE = replace(SETTINGS, **overrides)
    return _CACHE
