"""Inbound publish webhook."""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from pydantic import ValidationError

from ...config import Config
from ...errors import InvalidPayloadError, UnauthorizedError
from ...publishing import InboundArticle, InboundPublisher
from ..deps import get_config, get_inbound_publisher

logger = logging.getLogger(__name__)

router = APIRouter()


def require_webhook_key(
    x_webhook_key: Optional[str] = Header(None),
    config: Config = Depends(get_config),
) -> None:
    """Reject the request unless the shared key matches."""
    expected = config.require_inbound_webhook_key()
    if not x_webhook_key or not hmac.compare_digest(x_webhook_key, expected):
        logger.error("Invalid or missing webhook key")
        raise UnauthorizedError("Unauthorized")


async def read_inbound_article(request: Request) -> InboundArticle:
    """Parse the request body into an InboundArticle."""
    try:
        data = await request.json()
    except ValueError:
        raise InvalidPayloadError("Invalid JSON body")
    if not isinstance(data, dict):
        raise InvalidPayloadError("Request body must be a JSON object")
    try:
        return InboundArticle.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise InvalidPayloadError(f"Invalid {field}: {error['msg']}")


@router.post("/publish-article", dependencies=[Depends(require_webhook_key)])
def publish_article(
    payload: InboundArticle = Depends(read_inbound_article),
    inbound: InboundPublisher = Depends(get_inbound_publisher),
):
    article = inbound.create(payload)
    return {
        "success": True,
        "article": {"id": article.id, "slug": article.slug, "url": inbound.url_for(article)},
    }
