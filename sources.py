#!/usr/bin/env python3
"""
Upstream adapters: fetch a hot list and map it to NormalizedItem records.

Each source is a pair of functions:
- ``normalize_<source>(payload, now)``: pure mapping from decoded JSON.
- ``fetch_<source>()``: one GET against the fixed endpoint, then normalize.

Field extraction is declared as ordered rule tuples (see json_access.first_of)
so the policy for each field can be read and tested on its own.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Set
from urllib.parse import quote

import requests

from constants import Fallbacks, Http
from json_access import (
    Accessor, as_dict, as_id, as_list, as_timestamp, as_url, dig, field, first_of,
)
from logger_config import get_logger
from models import FetchError, NormalizedItem, ParseError

logger = get_logger(__name__)

SESSION = requests.Session()
SESSION.headers.update({"User-Agent": Http.USER_AGENT, "Accept": Http.ACCEPT})

ZHIHU_API = "https://api.zhihu.com/topstory"
ZHIHU_HOME = "https://www.zhihu.com/hot"
ZHIHU_QUESTION_URL = "https://www.zhihu.com/question/{id}"

V2EX_API = "https://www.v2ex.com/api/topics/hot.json"
V2EX_HOME = "https://www.v2ex.com/?tab=hot"
V2EX_TOPIC_URL = "https://www.v2ex.com/t/{id}"


def fetch_json(url: str, session: Optional[requests.Session] = None) -> Any:
    """GET ``url`` and decode JSON. Raises FetchError / ParseError."""
    sess = session or SESSION
    try:
        resp = sess.get(url, timeout=Http.TIMEOUT)
    except requests.RequestException as exc:
        raise FetchError(f"Request failed for {url}: {exc}") from exc

    if not 200 <= resp.status_code < 300:
        raise FetchError(f"Request failed {resp.status_code} {url}")

    try:
        return resp.json()
    except ValueError as exc:
        raise ParseError(f"Invalid JSON from {url}: {exc}") from exc


# ---------- Shared helpers ----------

def templated(template: str, *path: Any) -> Accessor:
    """Accessor that fills ``template`` with the URL-quoted id found at ``path``."""
    get_id = field(*path, coerce=as_id)

    def get(obj: Any) -> Optional[str]:
        ident = get_id(obj)
        return template.format(id=quote(ident, safe="")) if ident is not None else None
    return get


def normalize_items(raw_items: Iterable[Any],
                    build: Callable[[Dict[str, Any]], NormalizedItem],
                    source: str) -> List[NormalizedItem]:
    """
    Apply ``build`` to every object in ``raw_items``.

    Non-object entries are skipped; an unexpected error on one item is logged
    and that item dropped. A GUID already emitted for this response gets the
    lowest ``#n`` suffix not yet taken, so GUIDs stay unique inside the feed.
    """
    items: List[NormalizedItem] = []
    emitted: Set[str] = set()
    for idx, raw in enumerate(raw_items):
        obj = as_dict(raw)
        if obj is None:
            logger.debug(f"{source}: skipping non-object item at index {idx}")
            continue
        try:
            item = build(obj)
        except Exception as exc:
            logger.warning(f"{source}: dropping item at index {idx}: {exc!r}")
            continue

        if item.guid in emitted:
            n = 1
            while f"{item.guid}#{n}" in emitted:
                n += 1
            item = NormalizedItem(item.title, item.link, f"{item.guid}#{n}",
                                  item.date, item.description)
        emitted.add(item.guid)
        items.append(item)
    return items


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


# ---------- Zhihu ----------

ZHIHU_TARGET = (
    field("target", coerce=as_dict),
    field("question", coerce=as_dict),
    as_dict,
)
ZHIHU_TITLE = (
    field("title"),
    field("question", "title"),
    field("excerpt"),
)
ZHIHU_LINK = (
    field("url", coerce=as_url),
    field("link", coerce=as_url),
    templated(ZHIHU_QUESTION_URL, "id"),
)
ZHIHU_DATE = (
    field("created", coerce=as_timestamp),
    field("created_time", coerce=as_timestamp),
)
ZHIHU_DESCRIPTION = (
    field("content"),
    field("excerpt"),
    field("description"),
)


def normalize_zhihu(payload: Any, now: Optional[datetime] = None) -> List[NormalizedItem]:
    """Map the Zhihu top-story response (``{"data": [...]}``) to items."""
    now = _now(now)
    raw_items = as_list(dig(payload, "data")) or []

    def build(item: Dict[str, Any]) -> NormalizedItem:
        target = first_of(item, ZHIHU_TARGET, default={})
        link = first_of(target, ZHIHU_LINK, default=ZHIHU_HOME)
        item_id = as_id(item.get("id"))
        return NormalizedItem(
            title=first_of(target, ZHIHU_TITLE, default=Fallbacks.UNTITLED),
            link=link,
            guid=f"zhihu-{item_id}" if item_id else link,
            date=first_of(target, ZHIHU_DATE, default=now),
            description=first_of(target, ZHIHU_DESCRIPTION, default=""),
        )

    return normalize_items(raw_items, build, "zhihu")


def fetch_zhihu(session: Optional[requests.Session] = None) -> List[NormalizedItem]:
    return normalize_zhihu(fetch_json(ZHIHU_API, session))


# ---------- V2EX ----------

V2EX_TITLE = (
    field("title"),
)
V2EX_LINK = (
    field("url", coerce=as_url),
    templated(V2EX_TOPIC_URL, "id"),
)
V2EX_DATE = (
    field("created", coerce=as_timestamp),
)
V2EX_DESCRIPTION = (
    field("content_rendered"),
    field("content"),
)


def normalize_v2ex(payload: Any, now: Optional[datetime] = None) -> List[NormalizedItem]:
    """Map the V2EX hot-topics response (a bare JSON array) to items."""
    now = _now(now)
    raw_items = as_list(payload) or []

    def build(item: Dict[str, Any]) -> NormalizedItem:
        link = first_of(item, V2EX_LINK, default=V2EX_HOME)
        item_id = as_id(item.get("id"))
        return NormalizedItem(
            title=first_of(item, V2EX_TITLE, default=Fallbacks.UNTITLED),
            link=link,
            guid=f"v2ex-{item_id}" if item_id else link,
            date=first_of(item, V2EX_DATE, default=now),
            description=first_of(item, V2EX_DESCRIPTION, default=""),
        )

    return normalize_items(raw_items, build, "v2ex")


def fetch_v2ex(session: Optional[requests.Session] = None) -> List[NormalizedItem]:
    return normalize_v2ex(fetch_json(V2EX_API, session))
