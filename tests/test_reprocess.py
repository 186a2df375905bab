"""Tests for article reprocessing."""

import json

import pytest

from malainaadu.errors import RewriteError
from malainaadu.pipeline import ArticleReprocessor, clamp_limit
from malainaadu.rewriting import ContentRewriter, MockLLMProvider

REPLY = json.dumps({"content": "Perenggan satu.\n\nPerenggan dua.", "excerpt": "Perenggan satu."})


class MalformedFirstProvider(MockLLMProvider):
    """Fails the first call the way an unexpected reply shape does."""

    def generate(self, prompt: str) -> str:
        if not self.calls:
            self.calls.append(prompt)
            raise AttributeError("'list' object has no attribute 'get'")
        return super().generate(prompt)


@pytest.mark.parametrize(
    "requested, expected",
    [(None, 50), (0, 50), (-5, 1), (1, 1), (75, 75), (100, 100), (500, 100)],
)
def test_clamp_limit(requested, expected):
    assert clamp_limit(requested) == expected


def test_only_articles_without_paragraph_breaks_are_touched(store, conn, articles):
    flat = store.add_article(title="Flat", content="Satu blok teks.", original_content="Teks asal.")
    done = store.add_article(title="Done", content="Satu.\n\nDua.")
    provider = MockLLMProvider(replies=[REPLY])
    sleeps = []

    summary = ArticleReprocessor(conn, ContentRewriter(provider), articles=articles, sleep=sleeps.append).run(10)

    assert summary.to_response() == {"message": "Reprocessing completed", "processed": 1, "total": 1}
    assert store.articles[flat.id].content == "Perenggan satu.\n\nPerenggan dua."
    assert store.articles[done.id].content == "Satu.\n\nDua."
    assert "Teks asal." in provider.calls[0]
    assert sleeps == [1.0]


def test_nothing_to_do(store, conn, articles):
    store.add_article(content="Satu.\n\nDua.")

    summary = ArticleReprocessor(conn, ContentRewriter(MockLLMProvider(replies=[REPLY])), articles=articles).run()

    assert summary.message == "No articles need reprocessing"
    assert summary.processed == 0


def test_limit_bounds_the_batch(store, conn, articles):
    for i in range(3):
        store.add_article(title=f"Flat {i}", content="blok")

    summary = ArticleReprocessor(
        conn, ContentRewriter(MockLLMProvider(replies=[REPLY])), articles=articles, sleep=lambda s: None
    ).run(2)

    assert summary.total == 2
    assert summary.processed == 2


def test_model_failures_are_collected(store, conn, articles):
    article = store.add_article(title="Tajuk yang sangat panjang untuk ujian ini", content="blok")
    rewriter = ContentRewriter(MockLLMProvider(error=RewriteError("down")))

    summary = ArticleReprocessor(conn, rewriter, articles=articles, sleep=lambda s: None).run()

    assert summary.processed == 0
    assert summary.errors == ["Failed: Tajuk yang sangat panjang untu..."]
    assert store.articles[article.id].content == "blok"


def test_unexpected_provider_error_skips_only_that_article(store, conn, articles):
    store.add_article(title="Rosak", content="blok satu")
    second = store.add_article(title="Baik", content="blok dua")
    provider = MalformedFirstProvider(replies=[REPLY])

    summary = ArticleReprocessor(conn, ContentRewriter(provider), articles=articles, sleep=lambda s: None).run()

    assert summary.processed == 1
    assert summary.errors == ["Failed: Rosak..."]
    assert store.articles[second.id].content == "Perenggan satu.\n\nPerenggan dua."
