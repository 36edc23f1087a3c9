#!/usr/bin/env python3
"""
Hot Feeds — generate_feeds.py

Fetches every registered hot list, writes one RSS 2.0 file per feed into the
output directory (default ``docs/``, override with FEEDS_OUTPUT_DIR) and then
an index.html summarizing the run.

A failing feed is logged and skipped; its previous file is left in place.
Exit status is non-zero only when the output directory or the index cannot be
written.
"""

import os
import sys
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from build_index import build_index
from build_rss import build_rss
from constants import Paths, get_output_dir
from logger_config import get_logger, log_event
from models import FeedDefinition, FeedError, FeedResult, StorageError
from sources import fetch_v2ex, fetch_zhihu

logger = get_logger(__name__)

# ---------- Registry ----------
# Adding a source means adding one FeedDefinition here.
FEEDS = (
    FeedDefinition(
        id="zhihu-hot",
        filename="zhihu-hot.xml",
        title="Zhihu Hot List",
        link="https://www.zhihu.com/hot",
        description="Top hot list items from Zhihu",
        fetcher=fetch_zhihu,
    ),
    FeedDefinition(
        id="v2ex-hot",
        filename="v2ex-hot.xml",
        title="V2EX Hot Topics",
        link="https://www.v2ex.com/?tab=hot",
        description="Hot topics from V2EX",
        fetcher=fetch_v2ex,
    ),
)


def ensure_output_dir(path: str) -> None:
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"Cannot create output directory {path}: {exc}") from exc
    if not os.path.isdir(path):
        raise StorageError(f"Output path is not a directory: {path}")


def write_text(path: str, text: str) -> None:
    """Write via a sibling temp file so a failed write never truncates the old file."""
    tmp = f"{path}.tmp"
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)


def write_feed(feed: FeedDefinition, output_dir: str,
               build_date: Optional[datetime] = None) -> FeedResult:
    """Fetch, render and persist one feed. Errors propagate to the caller."""
    items = feed.fetcher()
    xml = build_rss(feed.title, feed.link, feed.description, items, build_date=build_date)
    out_path = os.path.join(output_dir, feed.filename)
    write_text(out_path, xml)
    return FeedResult(feed=feed, count=len(items), out_path=out_path)


def run(feeds: Iterable[FeedDefinition] = FEEDS,
        output_dir: Optional[str] = None,
        now: Optional[datetime] = None) -> List[FeedResult]:
    """
    Generate every feed, then the index.

    Returns one FeedResult per feed, in registry order. Raises StorageError
    only when the output directory or the index cannot be written.
    """
    output_dir = output_dir or get_output_dir()
    ensure_output_dir(output_dir)

    results: List[FeedResult] = []
    for feed in feeds:
        out_path = os.path.join(output_dir, feed.filename)
        logger.info(f"Generating {feed.id}...")
        try:
            result = write_feed(feed, output_dir, build_date=now)
        except (FeedError, OSError) as exc:
            result = FeedResult(feed, 0, out_path, ok=False, error=str(exc))
        except Exception as exc:
            logger.exception(f"Unexpected error while generating {feed.id}")
            result = FeedResult(feed, 0, out_path, ok=False, error=f"{type(exc).__name__}: {exc}")
        results.append(result)

        if result.ok:
            log_event(logger, "info", "feed_generated",
                      {"items": result.count, "path": result.out_path}, feed=feed.id)
        else:
            log_event(logger, "error", "feed_failed", {"reason": result.error}, feed=feed.id)

    index_path = os.path.join(output_dir, Paths.INDEX_FILE)
    try:
        write_text(index_path, build_index(results, generated_at=now or datetime.now(timezone.utc)))
    except OSError as exc:
        raise StorageError(f"Cannot write index {index_path}: {exc}") from exc
    log_event(logger, "info", "index_written", {"path": index_path, "feeds": len(results)})
    return results


def main() -> int:
    try:
        results = run()
    except StorageError as exc:
        logger.critical(str(exc))
        return 1

    ok = sum(1 for r in results if r.ok)
    log_event(logger, "info", "run_complete",
              {"succeeded": ok, "failed": len(results) - ok,
               "items": sum(r.count for r in results)})
    return 0


if __name__ == "__main__":
    sys.exit(main())
