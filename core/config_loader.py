"""Helpers for loading assistant configuration profiles."""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Tuple
import json
import logging
import os
import re

import yaml
from dotenv import load_dotenv

from core.dispatcher import SkillDispatcher
from core.skills import FallbackResponder

load_dotenv()

LOGGER = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
PROFILE_SUFFIXES = (".yaml", ".yml", ".json")

_ENV_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


def merge_configs(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated with ``overrides``; nested sections merge key by key.

    Lists and scalars from ``overrides`` replace the base value outright, so a
    profile that sets ``skills.enabled`` defines the whole routing order.
    """

    merged: Dict[str, Any] = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            value = merge_configs(current, value)
        merged[key] = value
    return merged


def load_profile(profile: str, config_dir: Path = CONFIG_DIR) -> Dict[str, Any]:
    """Read ``profile`` from ``config_dir`` with its parents merged underneath.

    Parents named in ``inherits`` (a name or a list of names) are applied left
    to right, then the profile itself. ``${VAR:default}`` placeholders are
    expanded after merging, from the process environment and ``.env``.
    """

    config = _read_profile(profile, Path(config_dir), chain=())
    config.setdefault("profile", profile)
    return _expand_env(config)


def build_assistant(config: Mapping[str, Any]) -> SkillDispatcher:
    """Initialise the skill dispatcher according to ``config``."""

    from services.http_client import DEFAULT_TIMEOUT, JSONClient  # Imported lazily to avoid cycles.
    from skills import build_skills

    http_settings = config.get("http", {}) or {}
    http_client = JSONClient(timeout=float(http_settings.get("timeout", DEFAULT_TIMEOUT)))

    skills_section = config.get("skills", {}) or {}
    enabled = skills_section.get("enabled")
    settings = {
        name: value
        for name, value in skills_section.items()
        if name != "enabled" and isinstance(value, Mapping)
    }
    skills = build_skills(enabled, settings, http_client=http_client)
    fallback = FallbackResponder.from_config(config.get("fallback"))

    LOGGER.info(
        "Assistant profile %s ready with skills: %s",
        config.get("profile", "unknown"),
        ", ".join(skill.name for skill in skills),
    )
    return SkillDispatcher(skills, fallback=fallback, resources=[http_client])


def _read_profile(profile: str, config_dir: Path, chain: Tuple[str, ...]) -> Dict[str, Any]:
    if profile in chain:
        cycle = " -> ".join((*chain, profile))
        raise ValueError(f"Circular profile inheritance detected: {cycle}")

    path = _profile_path(profile, config_dir)
    data = _load_structured_file(path)
    LOGGER.debug("Loaded profile %s from %s", profile, path)

    parents = data.pop("inherits", None) or []
    if isinstance(parents, str):
        parents = [parents]
    elif not isinstance(parents, list):
        raise TypeError(f"'inherits' in profile '{profile}' must be a name or a list of names")

    config: Dict[str, Any] = {}
    for parent in parents:
        config = merge_configs(config, _read_profile(str(parent), config_dir, (*chain, profile)))
    return merge_configs(config, data)


def _profile_path(profile: str, config_dir: Path) -> Path:
    candidates = [config_dir / f"{profile}{suffix}" for suffix in PROFILE_SUFFIXES]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    tried = ", ".join(candidate.name for candidate in candidates)
    raise FileNotFoundError(f"Configuration profile '{profile}' not found in {config_dir} (tried {tried})")


def _load_structured_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration file {path} must contain a mapping, got {type(data).__name__}")
    return dict(data)


def _expand_env(value: Any) -> Any:
    """Replace ``${VAR}`` and ``${VAR:default}`` in every string of ``value``."""
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda found: os.environ.get(found.group(1), found.group(2) or ""), value)
    if isinstance(value, Mapping):
        return {key: _expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    return value
