"""
HTTP adapter — trusted-roots document download via httpx.

Adapter layer — implements the TrustListFetcher port using httpx for a
single sync GET.

The document is Apple's "List of available trusted root certificates"
support article. The index of all OS versions is
https://support.apple.com/en-us/HT204132.

No retries: a generation run is manually triggered and idempotent, so any
transport failure ends the run and the operator re-invokes it.
All HTTP errors are captured into Result failures — no exceptions
leak to the business logic layer.
"""

from __future__ import annotations

import httpx
import structlog
from railway import ErrorCode
from railway.result import Result

log = structlog.get_logger()

TRUST_LIST_URL = "https://support.apple.com/en-us/HT208125"


class HttpTrustListFetcher:
    """
    Download the vendor's trusted-roots HTML page.

    Implements the TrustListFetcher port.
    """

    def __init__(
        self,
        url: str = TRUST_LIST_URL,
        timeout: int = 60,
    ) -> None:
        self._url = url
        self._timeout = timeout

    def fetch(self) -> Result[str]:
        """
        GET the trusted-roots document.

        Returns Result[str] with the decoded body on success,
        or Result.failure(TRANSPORT_ERROR, ...) on connectivity errors,
        non-2xx statuses and empty bodies.
        """
        return Result.from_computation(
            self._do_fetch,
            ErrorCode.TRANSPORT_ERROR,
            f"Trust list download from {self._url} failed",
        ).ensure(
            lambda body: bool(body.strip()),
            ErrorCode.TRANSPORT_ERROR,
            f"Trust list response from {self._url} has an empty body",
        )

    def _do_fetch(self) -> str:
        """HTTP GET — exceptions caught by from_computation."""
        with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
            response = client.get(self._url)
            response.raise_for_status()
            log.info(
                "trust_list.downloaded",
                url=str(response.url),
                status=response.status_code,
                size_bytes=len(response.content),
            )
            return response.text
