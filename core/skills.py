"""Skill interface and the canned fallback responder."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Pattern, Sequence, Tuple


@dataclass
class SkillResult:
    """Response text plus the structured payload produced by a skill."""

    response: str
    data: Any = None

    def data_dict(self) -> Dict[str, Any]:
        if self.data is None:
            return {}
        if hasattr(self.data, "to_dict"):
            return self.data.to_dict()
        return dict(self.data)


class Skill:
    """Protocol-like base class for pattern-triggered skills.

    Subclasses declare ``name``, ``description``, the explicit ``triggers``
    (anchored regular expressions with at most one capture group) and
    optional ``natural_language_triggers`` (plain phrases matched
    case-insensitively), and implement :meth:`execute`.
    """

    name: str = ""
    description: str = ""
    triggers: Tuple[Pattern[str], ...] = ()
    natural_language_triggers: Tuple[str, ...] = ()

    def execute(self, query: str) -> SkillResult:
        raise NotImplementedError

    @property
    def usage(self) -> str:
        return f"/{self.name} ..."

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "usage": self.usage,
            "triggers": [pattern.pattern for pattern in self.triggers],
            "natural_language_triggers": list(self.natural_language_triggers),
        }


def command_pattern(command: str) -> Pattern[str]:
    """Return the ``/command <argument...>`` pattern used by the built-in skills."""

    return re.compile(rf"^/{re.escape(command)}\s+(.+)$", re.IGNORECASE)


DEFAULT_GREETINGS: Tuple[str, ...] = ("hello", "hi")
DEFAULT_HELP_KEYWORDS: Tuple[str, ...] = ("help",)
DEFAULT_GRATITUDE_KEYWORDS: Tuple[str, ...] = ("thank",)

GREETING_MESSAGE = "Hello! How can I help you today?"
HELP_MESSAGE = (
    "I can help you with various tasks. Try using slash commands like /weather [city], "
    "/calc [expression], or /define [word]. You can also ask me questions in natural "
    "language like \"What's the weather in Paris?\" or \"Calculate 25 * 4\"."
)
GRATITUDE_MESSAGE = "You're welcome! Is there anything else I can help you with?"
UNKNOWN_MESSAGE = (
    "I'm not sure how to respond to that. You can try using one of my tools with slash "
    "commands like /weather, /calc, or /define."
)


@dataclass
class FallbackResponder:
    """Keyword based small talk used when no skill claims the input.

    Keyword groups are checked in a fixed order (greeting, help, gratitude)
    and the first group with a case-insensitive substring hit wins.
    """

    greetings: Sequence[str] = DEFAULT_GREETINGS
    help_keywords: Sequence[str] = DEFAULT_HELP_KEYWORDS
    gratitude_keywords: Sequence[str] = DEFAULT_GRATITUDE_KEYWORDS
    messages: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.greetings = _lowered(self.greetings)
        self.help_keywords = _lowered(self.help_keywords)
        self.gratitude_keywords = _lowered(self.gratitude_keywords)
        self.messages = {
            "greeting": GREETING_MESSAGE,
            "help": HELP_MESSAGE,
            "gratitude": GRATITUDE_MESSAGE,
            "unknown": UNKNOWN_MESSAGE,
            **dict(self.messages),
        }

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "FallbackResponder":
        config = config or {}
        return cls(
            greetings=config.get("greetings", DEFAULT_GREETINGS),
            help_keywords=config.get("help_keywords", DEFAULT_HELP_KEYWORDS),
            gratitude_keywords=config.get("gratitude_keywords", DEFAULT_GRATITUDE_KEYWORDS),
            messages=config.get("messages", {}),
        )

    def respond(self, message: str) -> str:
        lowered = message.lower()
        if any(greeting in lowered for greeting in self.greetings):
            return self.messages["greeting"]
        if any(keyword in lowered for keyword in self.help_keywords):
            return self.messages["help"]
        if any(keyword in lowered for keyword in self.gratitude_keywords):
            return self.messages["gratitude"]
        return self.messages["unknown"]


def _lowered(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(str(value).lower() for value in values)


__all__ = [
    "SkillResult",
    "Skill",
    "FallbackResponder",
    "command_pattern",
]
