"""Core modules for the skill router assistant."""
from core.config_loader import build_assistant, load_profile, merge_configs
from core.dispatcher import DispatchResult, SkillDispatcher, SkillMatch
from core.errors import InvalidArgument, SkillError, UpstreamUnavailable, ValidationRejected
from core.history import ConversationLog, Message
from core.skills import FallbackResponder, Skill, SkillResult

__all__ = [
    "SkillDispatcher",
    "DispatchResult",
    "SkillMatch",
    "Skill",
    "SkillResult",
    "FallbackResponder",
    "SkillError",
    "InvalidArgument",
    "ValidationRejected",
    "UpstreamUnavailable",
    "ConversationLog",
    "Message",
    "load_profile",
    "merge_configs",
    "build_assistant",
]
