"""Route chat input to the first skill whose triggers claim it."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from core.skills import FallbackResponder, Skill

LOGGER = logging.getLogger(__name__)

FAILURE_TEMPLATE = "I had trouble processing your {skill} request. Please try again."

EXPLICIT = "explicit"
NATURAL_LANGUAGE = "natural_language"


@dataclass(frozen=True)
class SkillMatch:
    """The routing decision for a single input."""

    skill: Skill
    argument: str
    strategy: str
    trigger: str


@dataclass
class DispatchResult:
    """Outcome of :meth:`SkillDispatcher.route`.

    ``skill_name`` and ``data`` are only set when a skill produced the
    response; fallback answers and skill failures leave them empty.
    """

    matched: bool
    response: str
    skill_name: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"matched": self.matched, "response": self.response}
        if self.matched:
            payload["skill"] = self.skill_name
            payload["data"] = self.data or {}
        return payload


class SkillDispatcher:
    """Match input against registered skills and invoke the winner.

    Explicit command patterns are tried for every skill before any
    natural-language phrase is considered. Within each pass skills are
    visited in registration order and triggers in declared order.
    """

    def __init__(
        self,
        skills: Iterable[Skill],
        fallback: Optional[FallbackResponder] = None,
        *,
        resources: Iterable[Any] = (),
    ) -> None:
        self._skills: List[Skill] = list(skills)
        self.fallback = fallback or FallbackResponder()
        # Objects with a ``close()`` method shared by the skills, e.g. HTTP clients.
        self.resources: List[Any] = list(resources)

    @property
    def skills(self) -> List[Skill]:
        return list(self._skills)

    def close(self) -> None:
        """Release the shared resources handed over at construction."""
        while self.resources:
            self.resources.pop().close()

    def __enter__(self) -> "SkillDispatcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def available_skills(self) -> List[Dict[str, Any]]:
        return [skill.describe() for skill in self._skills]

    # ------------------------------------------------------------------
    # Matching
    def match(self, text: str) -> Optional[SkillMatch]:
        """Return the skill that should handle ``text`` or ``None``."""

        text = text.strip()
        if not text:
            return None
        return self._match_explicit(text) or self._match_natural_language(text)

    def _match_explicit(self, text: str) -> Optional[SkillMatch]:
        for skill in self._skills:
            for pattern in skill.triggers:
                found = pattern.match(text)
                if found is None:
                    continue
                captured = found.group(1) if pattern.groups else None
                return SkillMatch(
                    skill=skill,
                    argument=(captured or "").strip(),
                    strategy=EXPLICIT,
                    trigger=pattern.pattern,
                )
        return None

    def _match_natural_language(self, text: str) -> Optional[SkillMatch]:
        for skill in self._skills:
            for phrase in skill.natural_language_triggers:
                found = re.search(re.escape(phrase), text, re.IGNORECASE)
                if found is None:
                    continue
                remainder = text[found.end():]
                return SkillMatch(
                    skill=skill,
                    argument=remainder.strip(),
                    strategy=NATURAL_LANGUAGE,
                    trigger=phrase,
                )
        return None

    # ------------------------------------------------------------------
    # Public API
    def route(self, text: str) -> DispatchResult:
        """Answer ``text`` with a skill result or a fallback response."""

        text = text.strip()
        if not text:
            return DispatchResult(matched=False, response=self.fallback.respond(""))

        decision = self.match(text)
        if decision is None:
            LOGGER.debug("No skill matched %r; using fallback responder", text)
            return DispatchResult(matched=False, response=self.fallback.respond(text))

        skill = decision.skill
        LOGGER.debug(
            "Routing to %s via %s trigger %r with argument %r",
            skill.name,
            decision.strategy,
            decision.trigger,
            decision.argument,
        )
        try:
            result = skill.execute(decision.argument)
        except Exception:
            LOGGER.exception("Error executing skill %s", skill.name)
            return DispatchResult(matched=False, response=FAILURE_TEMPLATE.format(skill=skill.name))

        return DispatchResult(
            matched=True,
            response=result.response,
            skill_name=skill.name,
            data=result.data_dict(),
        )


__all__ = [
    "DispatchResult",
    "SkillDispatcher",
    "SkillMatch",
    "FAILURE_TEMPLATE",
    "EXPLICIT",
    "NATURAL_LANGUAGE",
]
