"""Rewrite feed items into publishable articles."""

import json
import logging
from typing import Any, Dict, Iterable, Optional

from ..errors import RewriteError
from ..utils import truncate
from .llm_provider import LLMProvider
from .models import ReprocessResult, RewriteResult
from .prompts import build_reprocess_prompt, build_rewrite_prompt

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 160
REWRITE_KEYS = ("title", "content", "excerpt", "category")


def _balanced_spans(text: str) -> Iterable[str]:
    """Yield top-level balanced {...} substrings, left to right."""
    start: Optional[int] = None
    depth = 0
    in_string = False
    escaped = False

    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"' and depth > 0:
            in_string = True
        elif char == "{":
            if depth == 0:
                start = index
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start is not None:
                yield text[start:index + 1]
                start = None


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Pull the first JSON object out of a model reply.

    Replies often wrap the object in prose or a ```json fence, so the reply
    is scanned for balanced braces rather than parsed whole.

    Raises:
        RewriteError: when no balanced span parses as a JSON object
    """
    for span in _balanced_spans(text or ""):
        try:
            value = json.loads(span)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    raise RewriteError("No JSON object found in model reply")


def _text_value(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class ContentRewriter:
    """Rewrite and categorise feed items with a generative model."""

    def __init__(
        self,
        provider: LLMProvider,
        default_category_slug: str = "nasional",
    ) -> None:
        """
        Initialize rewriter.

        Args:
            provider: Model used for rewriting
            default_category_slug: Category used whenever the model gives none
        """
        self.provider = provider
        self.default_category_slug = default_category_slug

    def fallback(self, title: str, description: str) -> RewriteResult:
        """Keep the feed text as-is."""
        return RewriteResult(
            title=title,
            content=description,
            excerpt=truncate(description, EXCERPT_LENGTH),
            category_slug=self.default_category_slug,
            used_fallback=True,
        )

    def rewrite(self, title: str, description: str, category_slugs: Iterable[str]) -> RewriteResult:
        """
        Rewrite a feed item. Never raises.

        Any provider failure or unusable reply returns `fallback()`; individual
        missing keys fall back to the matching original value.
        """
        prompt = build_rewrite_prompt(title, description, category_slugs)
        try:
            reply = self.provider.generate(prompt)
            data = extract_json_object(reply)
        except RewriteError as e:
            logger.warning("Rewrite failed for '%s': %s", title[:50], e)
            return self.fallback(title, description)
        except Exception:
            logger.exception("Unexpected rewrite error for '%s'", title[:50])
            return self.fallback(title, description)

        if not any(_text_value(data, key) for key in REWRITE_KEYS):
            logger.warning("Rewrite reply for '%s' had none of the expected keys", title[:50])
            return self.fallback(title, description)

        return RewriteResult(
            title=_text_value(data, "title") or title,
            content=_text_value(data, "content") or description,
            excerpt=_text_value(data, "excerpt") or truncate(description, EXCERPT_LENGTH),
            category_slug=_text_value(data, "category") or self.default_category_slug,
        )

    def reprocess(self, title: str, content: str) -> ReprocessResult:
        """
        Re-paragraph an existing article body.

        Raises:
            RewriteError: when the model fails; reprocessing has no fallback
        """
        reply = self.provider.generate(build_reprocess_prompt(title, content))
        data = extract_json_object(reply)
        return ReprocessResult(
            content=_text_value(data, "content") or content,
            excerpt=_text_value(data, "excerpt") or truncate(content, EXCERPT_LENGTH),
        )
