"""Data models for the news pipeline."""

from .alerts import AlertLog, EmailAlertSubscription
from .article import Article, ArticleStatus, NewArticle, PublishableArticle
from .category import Category
from .logs import FacebookPostLog, FetchLog
from .source import Source

__all__ = [
    "AlertLog",
    "Article",
    "ArticleStatus",
    "Category",
    "EmailAlertSubscription",
    "FacebookPostLog",
    "FetchLog",
    "NewArticle",
    "PublishableArticle",
    "Source",
]
