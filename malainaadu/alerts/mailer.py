"""Transactional email through the Resend REST API."""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..errors import EmailError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendMailer:
    """Send HTML email to a list of recipients in one call."""

    def __init__(
        self,
        api_key: str,
        from_address: str,
        api_url: str = RESEND_API_URL,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.api_key = api_key
        self.from_address = from_address
        self.api_url = api_url
        self.timeout = timeout
        self._client = client

    def _post(self, body: Dict[str, Any]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if self._client is not None:
            return self._client.post(self.api_url, json=body, headers=headers, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.api_url, json=body, headers=headers)

    def send(self, to: List[str], subject: str, html: str) -> Dict[str, Any]:
        """
        Send one message.

        Returns:
            Provider response body (contains the message id)

        Raises:
            EmailError: on transport failure or a non-2xx reply
        """
        if not to:
            raise EmailError("No recipients")

        body = {"from": self.from_address, "to": to, "subject": subject, "html": html}
        try:
            response = self._post(body)
        except httpx.HTTPError as e:
            raise EmailError(f"Email request failed: {e}") from e

        if not response.is_success:
            raise EmailError(f"Email provider error: {response.status_code} - {response.text[:200]}")

        logger.info("Email sent to %d recipient(s): %s", len(to), subject)
        try:
            return response.json()
        except ValueError:
            return {"raw": response.text}
