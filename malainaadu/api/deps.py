"""FastAPI dependencies: configuration, connections and services."""

from functools import lru_cache
from typing import Generator

from fastapi import Depends
from psycopg import Connection

from ..config import Config
from ..db import get_connection
from ..factory import build_mailer, build_publisher, build_rewriter
from ..health import HealthMonitor
from ..moderation import ModerationService
from ..pipeline import ArticleReprocessor, IngestionOrchestrator
from ..publishing import InboundPublisher, Publisher


@lru_cache
def get_config() -> Config:
    return Config()


def get_conn(config: Config = Depends(get_config)) -> Generator[Connection, None, None]:
    with get_connection(config.get_db_config()) as conn:
        yield conn


def get_orchestrator(
    config: Config = Depends(get_config),
    conn: Connection = Depends(get_conn),
) -> IngestionOrchestrator:
    return IngestionOrchestrator(conn, build_rewriter(config), settings=config.config.ingestion)


def get_publisher(
    config: Config = Depends(get_config),
    conn: Connection = Depends(get_conn),
) -> Publisher:
    return build_publisher(config, conn)


def get_health_monitor(
    config: Config = Depends(get_config),
    conn: Connection = Depends(get_conn),
) -> HealthMonitor:
    config.require_email_api_key()
    return HealthMonitor(conn, build_mailer(config), settings=config.config.health)


def get_moderation(
    config: Config = Depends(get_config),
    conn: Connection = Depends(get_conn),
) -> ModerationService:
    return ModerationService(conn, publisher=build_publisher(config, conn))


def get_reprocessor(
    config: Config = Depends(get_config),
    conn: Connection = Depends(get_conn),
) -> ArticleReprocessor:
    return ArticleReprocessor(conn, build_rewriter(config))


def get_inbound_publisher(
    config: Config = Depends(get_config),
    conn: Connection = Depends(get_conn),
) -> InboundPublisher:
    return InboundPublisher(conn, site=config.config.site)
