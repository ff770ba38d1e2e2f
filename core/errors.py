"""Exception hierarchy shared by skills and the dispatcher."""
from __future__ import annotations

from typing import Optional


class SkillError(Exception):
    """Base class for failures raised from :meth:`Skill.execute`."""

    def __init__(self, message: str, *, skill: Optional[str] = None) -> None:
        super().__init__(message)
        self.skill = skill


class InvalidArgument(SkillError):
    """The trigger matched but left nothing usable to work with."""


class ValidationRejected(SkillError):
    """The argument was rejected before any evaluation took place."""


class UpstreamUnavailable(SkillError):
    """A live data source could not be reached or returned unusable data."""

    def __init__(
        self,
        message: str,
        *,
        skill: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, skill=skill)
        self.status_code = status_code


__all__ = ["SkillError", "InvalidArgument", "ValidationRejected", "UpstreamUnavailable"]
