"""Webhook relay client."""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field

from ..errors import RelayError

logger = logging.getLogger(__name__)

WEBHOOK_KEY_HEADER = "X-Webhook-Key"


class RelayResponse(BaseModel):
    """What the relay answered."""

    status_code: int = Field(..., description="HTTP status")
    text: str = Field("", description="Raw body")
    data: Dict[str, Any] = Field(default_factory=dict, description="Parsed body")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def parse_response_body(text: str) -> Dict[str, Any]:
    """JSON object body, or the raw text wrapped as {"raw": ...}."""
    try:
        value = json.loads(text)
    except ValueError:
        return {"raw": text}
    return value if isinstance(value, dict) else {"raw": value}


class WebhookRelay:
    """POST payloads to the relay that performs the actual Facebook post."""

    def __init__(
        self,
        url: str,
        key: str = "",
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url
        self.key = key
        self.timeout = timeout
        self._client = client

    def post(self, payload: Dict[str, Any]) -> RelayResponse:
        """
        Send one payload.

        Raises:
            RelayError: when no response arrived at all
        """
        headers = {"Content-Type": "application/json", WEBHOOK_KEY_HEADER: self.key}
        try:
            if self._client is not None:
                response = self._client.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise RelayError(str(e) or e.__class__.__name__) from e

        logger.info("Relay responded %s for article %s", response.status_code, payload.get("article_id"))
        return RelayResponse(
            status_code=response.status_code,
            text=response.text,
            data=parse_response_body(response.text),
        )
