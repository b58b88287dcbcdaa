"""Async JSON GET helper shared by the provider adapters.

Maps httpx failures onto the domain taxonomy:
- transport failures (connect errors, timeouts) raise NetworkError
- non-2xx responses and undecodable bodies raise ProviderError
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..domain.errors import NetworkError, ProviderError

logger = logging.getLogger(__name__)


async def get_json(
    client: Optional[httpx.AsyncClient],
    url: str,
    *,
    timeout: float,
    headers: Optional[dict[str, str]] = None,
) -> Any:
    """GET ``url`` and decode its JSON body.

    A throwaway client is opened when ``client`` is None.
    """
    if client is None:
        async with httpx.AsyncClient(timeout=timeout) as own_client:
            return await get_json(own_client, url, timeout=timeout, headers=headers)

    try:
        response = await client.get(url, headers=headers, timeout=timeout)
    except httpx.TransportError as exc:
        logger.debug("HTTP transport failure", extra={"url": url, "error": str(exc)})
        raise NetworkError("Request failed", cause=exc, url=url) from exc

    if not response.is_success:
        logger.debug(
            "HTTP error status",
            extra={"url": url, "status_code": response.status_code},
        )
        raise ProviderError(
            f"Provider returned HTTP {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as exc:
        raise ProviderError("Provider returned invalid JSON", cause=exc, url=url) from exc
