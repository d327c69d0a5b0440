"""HTTP transport posting payloads to the collector endpoint."""

from __future__ import annotations

import logging

import httpx

ACCESS_TOKEN_HEADER = "X-Faultpost-Access-Token"

logger = logging.getLogger(__name__)


class HttpTransport:
    """One POST per call, no retries. A non-200 status is logged, not raised."""

    def __init__(
        self,
        endpoint: str,
        timeout: float = 3.0,
        *,
        client: httpx.Client | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = httpx.Timeout(timeout)
        self._client = client
        self._log = log or logger

    def send(self, body: str, access_token: str | None) -> None:
        headers = {"Content-Type": "application/json"}
        if access_token:
            headers[ACCESS_TOKEN_HEADER] = access_token

        if self._client is not None:
            response = self._client.post(self.endpoint, content=body.encode("utf-8"), headers=headers)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.endpoint, content=body.encode("utf-8"), headers=headers)

        if response.status_code == 200:
            self._log.info("Success")
        else:
            self._log.warning("Got unexpected status code from the collector: %s", response.status_code)
            self._log.info("Response: %s", response.text)
