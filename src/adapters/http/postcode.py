"""
Postal code directory adapter - Implements PostcodeDirectory over HTTP.

Queries a zipaddress-style API (`GET <base_url>?zipcode=1000001`). Any
transport, status or decoding problem is reported as PostcodeLookupError,
which the postcode check treats as non-blocking.
"""

import logging

import httpx
from pydantic import ValidationError

from src.domain.exceptions import PostcodeLookupError

from .models import ZipAddressResponse

logger = logging.getLogger(__name__)


class ZipAddressDirectory:
    """
    Implements PostcodeDirectory protocol via httpx.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Lookup endpoint URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def exists(self, postcode: str) -> bool:
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.get(self._base_url, params={"zipcode": postcode})
                response.raise_for_status()
                body = ZipAddressResponse.model_validate(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as exc:
            raise PostcodeLookupError(f"Lookup for {postcode} failed: {exc}") from exc

        logger.debug("Postcode %s found=%s", postcode, body.found)
        return body.found
