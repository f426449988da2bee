"""
HTTP submission adapter - Implements SubmissionTransport via httpx.

POSTs the confirmed snapshot as JSON. Network errors, timeouts and non-2xx
responses come back as failed SubmitResult values; nothing is raised.
"""

import logging
from collections.abc import Mapping

import httpx
from pydantic import ValidationError

from src.domain.ports import SubmitFailureReason, SubmitResult

from .models import RegistrationPayload, ServerErrorBody

logger = logging.getLogger(__name__)


class HttpSubmissionTransport:
    """
    Implements SubmissionTransport protocol via httpx.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        base_url: str,
        path: str = "/api/register",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._path = path
        self._timeout = timeout
        self._transport = transport

    async def submit(self, snapshot: Mapping[str, str]) -> SubmitResult:
        payload = RegistrationPayload.from_snapshot(snapshot)

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                transport=self._transport,
                timeout=self._timeout,
            ) as client:
                response = await client.post(
                    self._path,
                    json=payload.model_dump(),
                    headers={"X-Requested-With": "XMLHttpRequest"},
                )
        except httpx.TimeoutException as exc:
            logger.warning("Registration request timed out: %s", exc)
            return SubmitResult.failure(SubmitFailureReason.TIMEOUT, str(exc))
        except httpx.TransportError as exc:
            logger.warning("Registration request failed: %s", exc)
            return SubmitResult.failure(SubmitFailureReason.NETWORK, str(exc))

        if response.is_success:
            return SubmitResult.success()

        return SubmitResult.failure(SubmitFailureReason.SERVER, self._error_message(response))

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = ServerErrorBody.model_validate(response.json())
        except (ValidationError, ValueError):
            body = ServerErrorBody()
        return body.message or f"Server responded with {response.status_code}"
