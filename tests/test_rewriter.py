"""Tests for the content rewriter and model providers."""

import json

import httpx
import pytest

from malainaadu.errors import ConfigurationError, RewriteError
from malainaadu.rewriting import (
    ContentRewriter,
    GeminiProvider,
    MockLLMProvider,
    build_rewrite_prompt,
    create_llm_provider,
    extract_json_object,
)

from tests.conftest import mock_client

DESCRIPTION = "The prime minister announced a new policy today. " * 5


class TestExtractJsonObject:
    def test_plain_object(self):
        assert extract_json_object('{"title": "x"}') == {"title": "x"}

    def test_object_wrapped_in_prose_and_fence(self):
        reply = 'Here you go:\n```json\n{"title": "x", "content": "a\\n\\nb"}\n```\nThanks'
        assert extract_json_object(reply) == {"title": "x", "content": "a\n\nb"}

    def test_braces_inside_strings_do_not_confuse_depth(self):
        reply = '{"title": "uses { and } literally", "excerpt": "ok"}'
        assert extract_json_object(reply)["title"] == "uses { and } literally"

    def test_first_parseable_span_wins(self):
        reply = "{not json} then {\"title\": \"second\"}"
        assert extract_json_object(reply) == {"title": "second"}

    @pytest.mark.parametrize("reply", ["", "no braces", "{unclosed", "[1, 2]"])
    def test_no_object_raises(self, reply):
        with pytest.raises(RewriteError):
            extract_json_object(reply)


class TestContentRewriter:
    def test_rewrite_uses_model_reply(self, rewriter):
        result = rewriter.rewrite("PM Announces Policy", DESCRIPTION, ["nasional", "sukan"])

        assert result.title == "பிரதமர் புதிய கொள்கை அறிவிப்பு"
        assert "\n\n" in result.content
        assert result.category_slug == "sukan"
        assert result.used_fallback is False

    def test_prompt_lists_category_slugs(self, rewriter):
        rewriter.rewrite("PM Announces Policy", DESCRIPTION, ["nasional", "sukan"])

        prompt = rewriter.provider.calls[0]
        assert "nasional, sukan" in prompt
        assert "PM Announces Policy" in prompt

    def test_provider_failure_falls_back_to_original(self):
        rewriter = ContentRewriter(MockLLMProvider(error=RewriteError("Gemini API error: 503")))

        result = rewriter.rewrite("PM Announces Policy", DESCRIPTION, ["nasional"])

        assert result.used_fallback is True
        assert result.title == "PM Announces Policy"
        assert result.content == DESCRIPTION
        assert result.excerpt == DESCRIPTION[:160]
        assert result.category_slug == "nasional"

    def test_unexpected_exception_also_falls_back(self):
        rewriter = ContentRewriter(MockLLMProvider(error=RuntimeError("boom")))

        assert rewriter.rewrite("T", "D", []).used_fallback is True

    def test_unparseable_reply_falls_back(self):
        rewriter = ContentRewriter(MockLLMProvider(replies=["I cannot help with that."]))

        assert rewriter.rewrite("T", "D", []).used_fallback is True

    def test_missing_keys_default_individually(self):
        reply = json.dumps({"title": "Tajuk baharu"})
        rewriter = ContentRewriter(MockLLMProvider(replies=[reply]), default_category_slug="nasional")

        result = rewriter.rewrite("Old title", DESCRIPTION, ["nasional"])

        assert result.used_fallback is False
        assert result.title == "Tajuk baharu"
        assert result.content == DESCRIPTION
        assert result.excerpt == DESCRIPTION[:160]
        assert result.category_slug == "nasional"

    def test_reprocess_raises_on_failure(self):
        rewriter = ContentRewriter(MockLLMProvider(error=RewriteError("down")))

        with pytest.raises(RewriteError):
            rewriter.reprocess("T", "one block")

    def test_reprocess_returns_paragraphs(self):
        reply = json.dumps({"content": "Satu.\n\nDua.", "excerpt": "Satu."})
        rewriter = ContentRewriter(MockLLMProvider(replies=[reply]))

        result = rewriter.reprocess("T", "Satu. Dua.")

        assert result.content == "Satu.\n\nDua."
        assert result.excerpt == "Satu."


class TestGeminiProvider:
    def test_posts_generate_content_with_key_in_query(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "candidates": [{"content": {"parts": [{"text": '{"title": "x"}'}]}}],
                    "usageMetadata": {"totalTokenCount": 42},
                },
            )

        provider = GeminiProvider("secret", client=mock_client(handler))

        assert provider.generate("hello") == '{"title": "x"}'
        assert seen["url"].path == "/v1beta/models/gemini-2.0-flash:generateContent"
        assert seen["url"].params["key"] == "secret"
        assert seen["body"]["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 1024}
        assert provider.get_usage_stats()["total_tokens"] == 42

    def test_non_2xx_raises(self):
        provider = GeminiProvider("k", client=mock_client(lambda r: httpx.Response(429, text="quota")))

        with pytest.raises(RewriteError, match="429"):
            provider.generate("hello")

    def test_timeout_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        provider = GeminiProvider("k", timeout=15.0, client=mock_client(handler))

        with pytest.raises(RewriteError, match="timeout after 15s"):
            provider.generate("hello")

    def test_empty_candidates_raise(self):
        provider = GeminiProvider("k", client=mock_client(lambda r: httpx.Response(200, json={"candidates": []})))

        with pytest.raises(RewriteError):
            provider.generate("hello")


class TestCreateProvider:
    def test_missing_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            create_llm_provider({"provider": "gemini"})

    def test_unknown_provider_is_configuration_error(self):
        with pytest.raises(ConfigurationError):
            create_llm_provider({"provider": "llama", "api_key": "k"})

    def test_gemini_by_default(self):
        provider = create_llm_provider({"api_key": "k", "model": None}, timeout=15.0)

        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.0-flash"


def test_rewrite_prompt_asks_for_paragraph_breaks():
    prompt = build_rewrite_prompt("T", "D", ["nasional"])

    assert "\\n\\n" in prompt
    assert "JSON" in prompt
