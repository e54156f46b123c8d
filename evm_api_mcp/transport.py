"""HTTP transport used by the resolvers.

RequestController performs a single GET or POST per call with aiohttp.
There is no retry: any aiohttp error, including non-2xx status, propagates
to the caller as raised.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import aiohttp

DEFAULT_TIMEOUT = 30.0


def encode_query(params: Mapping[str, Any]) -> List[Tuple[str, str]]:
    """Encode query parameters for the wire

    Lists become repeated keys, booleans "true"/"false", everything else str().
    """
    encoded = []
    for key, value in params.items():
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if isinstance(item, bool):
                encoded.append((key, "true" if item else "false"))
            else:
                encoded.append((key, str(item)))
    return encoded


class RequestController:
    """Performs API requests and returns the decoded response body

    Args:
        timeout: Total request timeout in seconds (default: 30.0)
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    async def get(self, url: str, params: Mapping[str, Any], headers: Optional[Dict[str, str]] = None) -> Any:
        logging.info(f"[RequestController] GET {url}")
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
            async with session.get(url, params=encode_query(params), headers=headers or {}) as response:
                return await self._process_response(response)

    async def post(
        self,
        url: str,
        params: Mapping[str, Any],
        body: Any,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        logging.info(f"[RequestController] POST {url}")
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
            async with session.post(url, params=encode_query(params), json=body, headers=headers or {}) as response:
                return await self._process_response(response)

    async def _process_response(self, response: aiohttp.ClientResponse) -> Any:
        if response.status < 200 or response.status >= 300:
            logging.warning(f"[RequestController] Request failed with status {response.status}")
        response.raise_for_status()

        if response.content_type and "json" in response.content_type:
            return await response.json()
        return await response.text()


__all__ = ["RequestController", "encode_query", "DEFAULT_TIMEOUT"]
