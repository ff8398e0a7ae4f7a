"""Latest-wins coordination for cancellable provider calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from ..errors import ProviderError, RequestSuperseded

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LatestRequestGate:
    """Runs one provider call at a time; a new call cancels and supersedes the previous one.

    A stale call never returns its result, so a slow first response cannot
    overwrite a newer second one.
    """

    def __init__(self, name: str = "provider") -> None:
        self.name = name
        self._generation = 0
        self._current: Optional[asyncio.Future] = None

    @property
    def generation(self) -> int:
        return self._generation

    async def run(self, call: Awaitable[T], *, timeout: float | None) -> T:
        self._generation += 1
        generation = self._generation

        previous = self._current
        task = asyncio.ensure_future(asyncio.wait_for(call, timeout))
        self._current = task
        if previous is not None and not previous.done():
            logger.debug(f"Cancelling superseded {self.name} request (generation {generation - 1})")
            previous.cancel()

        try:
            result = await task
        except asyncio.CancelledError:
            if generation != self._generation:
                raise RequestSuperseded(f"{self.name} request superseded by a newer one.") from None
            raise
        except asyncio.TimeoutError as exc:
            raise ProviderError(
                f"{self.name} request timed out after {timeout}s.", provider=self.name, timed_out=True
            ) from exc
        finally:
            if self._current is task:
                self._current = None

        if generation != self._generation:
            raise RequestSuperseded(f"{self.name} request superseded by a newer one.")
        return result
