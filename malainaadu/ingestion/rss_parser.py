"""
Tolerant RSS item extraction.

Real-world feeds are often not well-formed XML, so items are pulled out
field by field with regular expressions instead of a strict parser. Nothing
here raises: missing fields just mean fewer or emptier items.
"""

import re
from typing import Iterator, Optional

from .models import RawFeedItem

_ITEM_RE = re.compile(r"<item[^>]*>[\s\S]*?</item>", re.IGNORECASE)

_TITLE_RE = re.compile(r"<title[^>]*>(?:<!\[CDATA\[)?([\s\S]*?)(?:\]\]>)?</title>", re.IGNORECASE)
_LINK_RE = re.compile(r"<link[^>]*>(?:<!\[CDATA\[)?([\s\S]*?)(?:\]\]>)?</link>", re.IGNORECASE)
_DESCRIPTION_RE = re.compile(
    r"<description[^>]*>(?:<!\[CDATA\[)?([\s\S]*?)(?:\]\]>)?</description>", re.IGNORECASE
)
_PUB_DATE_RE = re.compile(r"<pubDate[^>]*>([\s\S]*?)</pubDate>", re.IGNORECASE)

_MEDIA_CONTENT_RE = re.compile(r"<media:content[^>]*url=[\"']([^\"']+)[\"'][^>]*>", re.IGNORECASE)
_IMAGE_ENCLOSURE_RE = re.compile(
    r"<enclosure[^>]*url=[\"']([^\"']+)[\"'][^>]*type=[\"']image[^\"']*[\"'][^>]*>", re.IGNORECASE
)
_IMG_TAG_RE = re.compile(r"<img[^>]*src=[\"']([^\"']+)[\"'][^>]*>", re.IGNORECASE)

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")

# Order matters: &amp; is decoded after the others so "&amp;lt;" stays "&lt;"
_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


def clean_text(text: str) -> str:
    """Remove CDATA markers and trim."""
    return text.replace("<![CDATA[", "").replace("]]>", "").strip()


def decode_entities(text: str) -> str:
    """Decode the handful of entities feeds commonly use."""
    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    return text


def strip_html(html: str) -> str:
    """Drop tags, decode common entities and collapse whitespace."""
    text = _TAG_RE.sub("", html)
    text = decode_entities(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _first_group(pattern: re.Pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


def extract_image_url(item_xml: str, description: str) -> Optional[str]:
    """
    Find a lead image.

    Tries, in order: a media:content url, an image-typed enclosure, then an
    <img> inside the raw description. First match wins.
    """
    return (
        _first_group(_MEDIA_CONTENT_RE, item_xml)
        or _first_group(_IMAGE_ENCLOSURE_RE, item_xml)
        or _first_group(_IMG_TAG_RE, description)
    )


def parse_item(item_xml: str) -> Optional[RawFeedItem]:
    """Parse one <item> block; None when title or link is missing."""
    title = clean_text(_first_group(_TITLE_RE, item_xml) or "")
    link = clean_text(_first_group(_LINK_RE, item_xml) or "")
    if not title or not link:
        return None

    description = clean_text(_first_group(_DESCRIPTION_RE, item_xml) or "")
    pub_date = (_first_group(_PUB_DATE_RE, item_xml) or "").strip()

    return RawFeedItem(
        title=title,
        link=link,
        description=strip_html(description),
        pub_date=pub_date,
        image_url=extract_image_url(item_xml, description),
    )


def parse_rss(text: str) -> Iterator[RawFeedItem]:
    """Yield feed items from raw RSS text in document order."""
    for match in _ITEM_RE.finditer(text or ""):
        item = parse_item(match.group(0))
        if item is not None:
            yield item
