"""Skill registry for the chat router."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type

from services.http_client import JSONClient
from skills.base import BaseSkill, LookupSkill
from skills.calculator import CalculatorSkill
from skills.dictionary import DictionarySkill
from skills.weather import WeatherSkill

LOGGER = logging.getLogger(__name__)

# Registration order is routing order.
SKILL_REGISTRY: Dict[str, Type[BaseSkill]] = {
    WeatherSkill.name: WeatherSkill,
    CalculatorSkill.name: CalculatorSkill,
    DictionarySkill.name: DictionarySkill,
}


def build_skills(
    enabled: Optional[Sequence[str]] = None,
    settings: Optional[Mapping[str, Mapping[str, Any]]] = None,
    *,
    http_client: Optional[JSONClient] = None,
    registry: Optional[Mapping[str, Type[BaseSkill]]] = None,
) -> List[BaseSkill]:
    """Instantiate the skills named in ``enabled`` in that order."""

    registry = dict(registry or SKILL_REGISTRY)
    names = list(enabled) if enabled is not None else list(registry)
    settings = settings or {}

    skills: List[BaseSkill] = []
    for name in names:
        if name not in registry:
            raise ValueError(f"Unknown skill '{name}'. Available skills: {', '.join(registry)}")
        cls = registry[name]
        config = dict(settings.get(name, {}))
        if issubclass(cls, LookupSkill):
            skills.append(cls(config=config, http_client=http_client))
        else:
            skills.append(cls(config=config))
        LOGGER.debug("Registered skill %s", name)
    return skills


__all__ = [
    "SKILL_REGISTRY",
    "BaseSkill",
    "LookupSkill",
    "WeatherSkill",
    "CalculatorSkill",
    "DictionarySkill",
    "build_skills",
]
