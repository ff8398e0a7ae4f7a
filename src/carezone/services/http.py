"""Shared async HTTP plumbing for external providers."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from ..errors import ProviderError

logger = logging.getLogger(__name__)


def build_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)))


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    provider: str,
    allow_statuses: tuple[int, ...] = (),
) -> Any:
    """GET ``url`` and decode JSON, translating transport failures into ``ProviderError``.

    Statuses in ``allow_statuses`` are returned like successes so the caller can
    inspect a provider-specific error body.
    """

    try:
        response = await client.get(url, params=params, headers=headers)
        if response.status_code not in allow_statuses:
            response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        status_code = e.response.status_code
        if status_code == 429:
            raise ProviderError(f"{provider} quota exceeded (HTTP 429).", provider=provider) from e
        raise ProviderError(f"{provider} returned HTTP {status_code}.", provider=provider) from e
    except httpx.TimeoutException as e:
        logger.warning(f"{provider} request timed out: {e}")
        raise ProviderError(f"{provider} request timed out.", provider=provider, timed_out=True) from e
    except (httpx.ConnectError, httpx.NetworkError) as e:
        raise ProviderError(f"Failed to connect to {provider}: {e}", provider=provider) from e
    except httpx.HTTPError as e:
        raise ProviderError(f"{provider} request failed: {e}", provider=provider) from e
    except ValueError as e:
        raise ProviderError(f"{provider} returned a malformed response.", provider=provider) from e
