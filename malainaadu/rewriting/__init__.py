"""Generative rewriting of feed items."""

from .llm_provider import GeminiProvider, LLMProvider, MockLLMProvider, OpenAIProvider, create_llm_provider
from .models import ReprocessResult, RewriteResult
from .prompts import build_reprocess_prompt, build_rewrite_prompt
from .rewriter import ContentRewriter, extract_json_object

__all__ = [
    "ContentRewriter",
    "GeminiProvider",
    "LLMProvider",
    "MockLLMProvider",
    "OpenAIProvider",
    "ReprocessResult",
    "RewriteResult",
    "build_reprocess_prompt",
    "build_rewrite_prompt",
    "create_llm_provider",
    "extract_json_object",
]
