"""Database management for the news pipeline."""

from .alerts import AlertManager
from .articles import ArticleStorage
from .categories import CategoryManager
from .connection import close_connection_pool, get_connection, get_connection_pool
from .facebook_logs import FacebookLogManager
from .fetch_logs import FetchLogManager
from .init import init_database, validate_connection
from .sources import SourceManager

__all__ = [
    "AlertManager",
    "ArticleStorage",
    "CategoryManager",
    "FacebookLogManager",
    "FetchLogManager",
    "SourceManager",
    "close_connection_pool",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
