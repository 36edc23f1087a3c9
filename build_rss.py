#!/usr/bin/env python3
"""
Hot Feeds — build_rss.py

Renders a channel and its normalized items as an RSS 2.0 document.
Items are emitted in the order given; ordering policy belongs to the adapter.
"""

import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, Optional

from models import NormalizedItem

# Characters XML 1.0 does not allow anywhere in a document, plus lone surrogates
INVALID_XML_RX = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

XML_ESCAPES = (
    ("&", "&amp;"),   # must run first
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def escape_xml(s: Optional[str]) -> str:
    s = INVALID_XML_RX.sub("", s or "")
    for raw, entity in XML_ESCAPES:
        s = s.replace(raw, entity)
    return s


def rfc822(dt: Optional[datetime] = None) -> str:
    """RFC-822 date in GMT, e.g. ``Tue, 14 Nov 2023 22:13:20 GMT``."""
    dt = dt or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def build_item(item: NormalizedItem) -> str:
    return (
        "    <item>\n"
        f"      <title>{escape_xml(item.title)}</title>\n"
        f"      <link>{escape_xml(item.link)}</link>\n"
        f"      <guid>{escape_xml(item.guid or item.link)}</guid>\n"
        f"      <pubDate>{rfc822(item.date)}</pubDate>\n"
        f"      <description>{escape_xml(item.description)}</description>\n"
        "    </item>\n"
    )


def build_rss(title: str, link: str, description: str,
              items: Iterable[NormalizedItem],
              build_date: Optional[datetime] = None) -> str:
    """
    Render a complete RSS 2.0 document.

    ``build_date`` fixes ``lastBuildDate``; by default it is the render time.
    """
    body = "".join(build_item(it) for it in items)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<rss version="2.0">\n'
        "  <channel>\n"
        f"    <title>{escape_xml(title)}</title>\n"
        f"    <link>{escape_xml(link)}</link>\n"
        f"    <description>{escape_xml(description)}</description>\n"
        f"    <lastBuildDate>{rfc822(build_date)}</lastBuildDate>\n"
        f"{body}"
        "  </channel>\n"
        "</rss>\n"
    )
