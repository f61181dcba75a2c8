"""
HTTP API Call Capability

Sends the step input to the URL in the component config with httpx.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..core.abstractions import ICapability
from ..core.types import CapabilityError, utc_timestamp

logger = logging.getLogger(__name__)

BODYLESS_METHODS = ("GET", "HEAD", "DELETE", "OPTIONS")


class HttpApiCallCapability(ICapability):
    """
    api-call capability that performs a real HTTP request.

    Config keys:
        url: Target URL (required)
        method: HTTP method (default POST)
        headers: Extra request headers

    The input is sent as the JSON body, or as query params for methods
    without a body when it is a mapping. Non-2xx responses fail the step.
    """

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = 30.0,
    ):
        """
        Args:
            transport: httpx transport override (tests use MockTransport)
            timeout: Per-step timeout in seconds, also used as the httpx timeout
        """
        self.transport = transport
        self._timeout = timeout

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    async def execute(
        self,
        config: Dict[str, Any],
        input: Any,
        session_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        url = config.get("url")
        if not url:
            raise CapabilityError("api-call", "api-call requires a 'url' in its config")
        method = str(config.get("method", "POST")).upper()
        headers = dict(config.get("headers") or {})

        request_kwargs: Dict[str, Any] = {"headers": headers}
        if method in BODYLESS_METHODS:
            if isinstance(input, dict):
                request_kwargs["params"] = {k: str(v) for k, v in input.items()}
        else:
            request_kwargs["json"] = input

        async with httpx.AsyncClient(transport=self.transport, timeout=self._timeout) as client:
            try:
                response = await client.request(method, url, **request_kwargs)
            except httpx.HTTPError as e:
                raise CapabilityError("api-call", f"{method} {url} failed: {e}") from e

        if response.is_error:
            raise CapabilityError(
                "api-call", f"{method} {url} returned HTTP {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError:
            data = response.text

        logger.debug(f"[api-call] {method} {url} -> {response.status_code}")
        return {
            "type": "api-call",
            "url": url,
            "method": method,
            "input": input,
            "response": {
                "status": "success",
                "statusCode": response.status_code,
                "data": data,
                "timestamp": utc_timestamp(),
            },
        }
