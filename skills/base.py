"""Base classes shared across skill implementations."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from core.errors import InvalidArgument, UpstreamUnavailable
from core.skills import Skill
from services.http_client import JSONClient

LOGGER = logging.getLogger(__name__)


class BaseSkill(Skill):
    """Skill configured from a mapping, as found in the ``skills`` profile section."""

    def __init__(self, *, config: Optional[Dict[str, Any]] = None) -> None:
        self.config = dict(config or {})

    def require_argument(self, query: str, what: str) -> str:
        query = query.strip()
        if not query:
            raise InvalidArgument(f"{what} is required", skill=self.name)
        return query


class LookupSkill(BaseSkill):
    """Skill backed by a live JSON API with a synthetic-data fallback.

    Subclasses implement :meth:`fetch_live` and :meth:`synthesize`.
    :meth:`lookup` tries the live source first and substitutes synthetic data
    whenever it raises :class:`UpstreamUnavailable` or returns nothing usable.
    """

    default_base_url = ""

    def __init__(
        self,
        *,
        config: Optional[Dict[str, Any]] = None,
        http_client: Optional[JSONClient] = None,
    ) -> None:
        super().__init__(config=config)
        self.http_client = http_client
        self.base_url = str(self.config.get("base_url", self.default_base_url)).rstrip("/")

    @property
    def live_enabled(self) -> bool:
        return self.http_client is not None and bool(self.config.get("live", True))

    def fetch_live(self, query: str) -> Any:
        raise NotImplementedError

    def synthesize(self, query: str) -> Any:
        raise NotImplementedError

    def lookup(self, query: str) -> Tuple[Any, bool]:
        """Return ``(payload, used_synthetic)`` for ``query``."""
        if not self.live_enabled:
            LOGGER.info("Live lookups disabled for %s; using synthetic data", self.name)
            return self.synthesize(query), True
        try:
            payload = self.fetch_live(query)
        except UpstreamUnavailable as exc:
            LOGGER.warning("%s lookup failed (%s); using synthetic data", self.name, exc)
            return self.synthesize(query), True
        if payload is None:
            LOGGER.warning("%s lookup returned no usable data; using synthetic data", self.name)
            return self.synthesize(query), True
        return payload, False
