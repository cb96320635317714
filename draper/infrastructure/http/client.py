"""
httpx-backed AnalysisTransport.

Used by the CLI to send extracted payloads to a running analysis API.
"""

import logging
from typing import Optional

import httpx

from ...core.analysis.composer import AnalysisTransport
from ...core.analysis.inputs import parse_model_json
from ...core.errors import ProviderAnalysisError

logger = logging.getLogger(__name__)


class HttpxTransport(AnalysisTransport):
    """
    POSTs JSON bodies to the analysis API.

    Pass an existing AsyncClient to share a connection pool (or a mock
    transport in tests); otherwise one is created per call.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._client = client

    async def _post(self, client: httpx.AsyncClient, path: str, body: dict) -> httpx.Response:
        try:
            return await client.post(f"{self._base_url}{path}", json=body, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.error("Request to analysis API failed", extra={"path": path, "error": str(e)})
            raise ProviderAnalysisError(f"Request to {path} failed: {e}") from e

    async def post_json(self, path: str, body: dict) -> dict:
        """
        POST ``body`` and parse the JSON reply.

        Non-2xx responses raise ProviderAnalysisError with the raw body
        included in the message.
        """
        if self._client is not None:
            response = await self._post(self._client, path, body)
        else:
            async with httpx.AsyncClient() as client:
                response = await self._post(client, path, body)

        if not response.is_success:
            logger.error(
                "Analysis API returned an error",
                extra={"path": path, "status": response.status_code},
            )
            raise ProviderAnalysisError(
                f"{path} returned HTTP {response.status_code}: {response.text}"
            )

        return parse_model_json(response.text)
