"""HTTP client for the detection edit-sync endpoint.

Never raises for a failed edit: HTTP errors, transport errors and
malformed replies all come back as EditResponse(success=False) so the
runner can record them and continue with the next command.
"""
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from schemas.reconciliation import EditRequest, EditResponse

logger = logging.getLogger(__name__)


class HttpEditSyncClient:
    """Posts one EditRequest per call as JSON."""

    def __init__(self, endpoint: str, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self.endpoint = endpoint
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, request: EditRequest) -> EditResponse:
        try:
            response = await self._client.post(self.endpoint, json=request.to_payload())
        except httpx.HTTPError as e:
            logger.warning(f"Edit-sync request failed: {e}")
            return EditResponse(success=False, error=str(e) or type(e).__name__)

        if response.is_error:
            return EditResponse(success=False, error=f"HTTP {response.status_code}: {response.text}")

        try:
            return EditResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            return EditResponse(success=False, error=f"Invalid edit-sync response: {e}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpEditSyncClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
