"""Shared JSON-over-HTTP call used by every provider adapter."""

import asyncio
from typing import Any, Dict

import aiohttp

from ..exceptions import ProviderRequestFailed


async def post_json(
    session: aiohttp.ClientSession,
    provider: str,
    url: str,
    headers: Dict[str, str],
    payload: Dict[str, Any],
    timeout: float,
) -> Dict[str, Any]:
    """POST ``payload`` and return the decoded JSON body.

    Non-2xx replies, transport errors, timeouts and undecodable bodies are
    raised as ``ProviderRequestFailed``. The timeout bounds this single call.
    """
    try:
        async with session.post(
            url,
            json=payload,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=timeout),
        ) as response:
            if not 200 <= response.status < 300:
                raise ProviderRequestFailed(provider, f"{response.status} {response.reason or ''}".strip())
            return await response.json(content_type=None)

    except ProviderRequestFailed:
        raise
    except asyncio.TimeoutError as e:
        raise ProviderRequestFailed(provider, f"timed out after {timeout}s") from e
    except aiohttp.ClientError as e:
        raise ProviderRequestFailed(provider, str(e) or type(e).__name__) from e
    except ValueError as e:
        raise ProviderRequestFailed(provider, f"invalid JSON: {e}") from e
