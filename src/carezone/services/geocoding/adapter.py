"""Address resolution on top of an external geocoding provider."""

from __future__ import annotations

import logging
import re
from typing import Optional

from ...config import settings
from ...errors import NoMatch
from ...models.domain import GeocodeCandidate
from ..inflight import LatestRequestGate
from .providers import GeocodingProvider, get_provider

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

MIN_SUGGEST_LENGTH = 3


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


class GeocodingAdapter:
    """Resolves free text to coordinates. No caching: every call reaches the provider.

    ``resolve`` and ``suggest`` each keep their own latest-wins gate, so a new
    query supersedes the previous in-flight query of the same kind.
    """

    def __init__(
        self,
        provider: GeocodingProvider | None = None,
        *,
        default_region_bias: Optional[str] = None,
        default_timeout: float | None = None,
    ) -> None:
        self.provider = provider or get_provider()
        self.default_region_bias = default_region_bias if default_region_bias is not None else settings.default_region_bias
        self.default_timeout = default_timeout if default_timeout is not None else settings.provider_timeout_seconds
        self._resolve_gate = LatestRequestGate(f"{self.provider.name} geocoding")
        self._suggest_gate = LatestRequestGate(f"{self.provider.name} autocomplete")

    def _region(self, region_bias: Optional[str]) -> Optional[str]:
        region = region_bias if region_bias is not None else self.default_region_bias
        return region.strip().lower() if region else None

    async def resolve(
        self,
        query: str,
        region_bias: Optional[str] = None,
        *,
        timeout: float | None = None,
    ) -> list[GeocodeCandidate]:
        text = collapse_whitespace(query)
        if not text:
            raise NoMatch("Empty address query.")

        region = self._region(region_bias)
        logger.debug(f"Geocoding {text!r} (region={region}) via {self.provider.name}")
        candidates = await self._resolve_gate.run(
            self.provider.geocode(text, region),
            timeout=timeout if timeout is not None else self.default_timeout,
        )
        if not candidates:
            raise NoMatch(f"No geocoding match for '{text}'.")
        logger.info(f"Geocoded {text!r} to {len(candidates)} candidate(s)")
        return list(candidates)

    async def suggest(
        self,
        prefix: str,
        region_bias: Optional[str] = None,
        *,
        limit: int = 5,
        timeout: float | None = None,
    ) -> list[str]:
        """Address autocomplete: formatted addresses for a partial query."""

        text = collapse_whitespace(prefix)
        if len(text) < MIN_SUGGEST_LENGTH:
            return []
        limit = max(1, min(int(limit), 10))
        candidates = await self._suggest_gate.run(
            self.provider.geocode(text, self._region(region_bias)),
            timeout=timeout if timeout is not None else self.default_timeout,
        )
        return [candidate.formatted_address for candidate in candidates[:limit]]
