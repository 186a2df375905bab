"""Exception hierarchy for the news pipeline."""

from typing import Optional


class MalaiNaaduError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(MalaiNaaduError):
    """A required setting or secret is missing."""

    def __init__(self, message: str, variable: Optional[str] = None) -> None:
        super().__init__(message)
        self.variable = variable


class ArticleNotFoundError(MalaiNaaduError):
    """Article does not exist."""

    def __init__(self, article_id: int) -> None:
        super().__init__("Article not found")
        self.article_id = article_id


class InvalidTransitionError(MalaiNaaduError):
    """Article status change is not allowed."""

    def __init__(self, article_id: int, current: str, target: str) -> None:
        super().__init__(f"Cannot move article {article_id} from '{current}' to '{target}'")
        self.article_id = article_id
        self.current = current
        self.target = target


class RewriteError(MalaiNaaduError):
    """Generative rewrite call failed or returned unusable output."""


class RelayError(MalaiNaaduError):
    """Outbound webhook relay could not be reached."""


class EmailError(MalaiNaaduError):
    """Alert email could not be sent."""


class InvalidPayloadError(MalaiNaaduError):
    """Inbound request body failed validation."""


class UnauthorizedError(MalaiNaaduError):
    """Request did not carry a valid shared key."""
