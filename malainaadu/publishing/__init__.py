"""Facebook publishing through the webhook relay, and inbound article publishing."""

from .inbound import InboundArticle, InboundPublisher, validate_inbound
from .payload import article_url, build_payload
from .publisher import PublishResult, Publisher
from .relay import RelayResponse, WebhookRelay

__all__ = [
    "InboundArticle",
    "InboundPublisher",
    "PublishResult",
    "Publisher",
    "RelayResponse",
    "WebhookRelay",
    "article_url",
    "build_payload",
    "validate_inbound",
]
