"""Tests for the tolerant RSS parser."""

from malainaadu.ingestion import clean_text, parse_rss, strip_html
from malainaadu.ingestion.rss_parser import decode_entities, extract_image_url, parse_item


def test_parse_sample_feed_drops_items_without_link(sample_feed):
    items = list(parse_rss(sample_feed))

    assert [item.link for item in items] == ["https://src/a1", "https://src/a2", "https://src/a3"]
    assert all(item.title != "No link here" for item in items)


def test_cdata_title_and_link_are_unwrapped_and_trimmed(sample_feed):
    item = list(parse_rss(sample_feed))[1]

    assert item.title == "Banjir di Kelantan"
    assert item.link == "https://src/a2"


def test_description_is_plain_text(sample_feed):
    first, second, _ = list(parse_rss(sample_feed))

    assert first.description == "The prime minister announced a new policy & plan."
    assert second.description == "Paras air meningkat <tinggi>"


def test_image_url_sources_in_priority_order(sample_feed):
    first, second, third = list(parse_rss(sample_feed))

    assert first.image_url == "https://img.example/a1.jpg"
    assert second.image_url == "https://img.example/a2.png"
    assert third.image_url == "https://img.example/a3.jpg"


def test_media_content_wins_over_img_in_description():
    item_xml = (
        '<item><media:content url="https://img/media.jpg" />'
        '<description><![CDATA[<img src="https://img/inline.jpg">]]></description></item>'
    )
    assert extract_image_url(item_xml, '<img src="https://img/inline.jpg">') == "https://img/media.jpg"


def test_non_image_enclosure_is_ignored():
    item_xml = '<item><enclosure url="https://cdn/a.mp3" type="audio/mpeg" /></item>'
    assert extract_image_url(item_xml, "") is None


def test_raw_pub_date_is_kept_unparsed(sample_feed):
    first, second, third = list(parse_rss(sample_feed))

    assert first.pub_date == "Sat, 01 Jun 2024 08:30:00 GMT"
    assert second.pub_date == "not a date"
    assert third.pub_date == ""


def test_item_with_blank_title_is_dropped():
    assert parse_item("<item><title>  </title><link>https://x/1</link></item>") is None


def test_case_insensitive_item_tags():
    text = "<ITEM><TITLE>Upper</TITLE><LINK>https://x/up</LINK></ITEM>"
    items = list(parse_rss(text))

    assert len(items) == 1
    assert items[0].title == "Upper"


def test_garbage_input_yields_nothing():
    assert list(parse_rss("")) == []
    assert list(parse_rss("<html><body>not a feed</body></html>")) == []
    assert list(parse_rss(None)) == []


def test_clean_text_strips_cdata_markers():
    assert clean_text("<![CDATA[  hello ]]>") == "hello"


def test_strip_html_collapses_whitespace():
    assert strip_html("<p>a</p>\n\n<p>b&nbsp;&nbsp;c</p>") == "a b c"


def test_double_encoded_entities_decode_once():
    assert decode_entities("&amp;lt;b&amp;gt;") == "&lt;b&gt;"
    assert decode_entities("&quot;x&quot; &#39;y&#39;") == "\"x\" 'y'"
