"""Build services from configuration; shared by the CLI and the API."""

from typing import Optional

from psycopg import Connection

from .alerts import ResendMailer
from .config import Config
from .publishing import Publisher, WebhookRelay
from .rewriting import ContentRewriter, create_llm_provider


def build_rewriter(config: Config) -> ContentRewriter:
    """Rewriter for the configured provider; raises ConfigurationError without a key."""
    config.require_llm_api_key()
    settings = config.config.ingestion
    provider = create_llm_provider(config.get_llm_config(), timeout=settings.rewrite_timeout)
    return ContentRewriter(provider, default_category_slug=settings.default_category_slug)


def build_relay(config: Config) -> Optional[WebhookRelay]:
    url = config.get_relay_url()
    if url is None:
        return None
    return WebhookRelay(url, key=config.get_relay_key(), timeout=config.config.relay.timeout)


def build_mailer(config: Config) -> Optional[ResendMailer]:
    api_key = config.get_email_api_key()
    if api_key is None:
        return None
    email = config.config.email
    return ResendMailer(api_key, email.from_address, api_url=email.api_url, timeout=email.timeout)


def build_publisher(config: Config, conn: Connection) -> Publisher:
    return Publisher(conn, build_relay(config), site=config.config.site, mailer=build_mailer(config))
