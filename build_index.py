#!/usr/bin/env python3
"""
Render index.html: one table row per configured feed, in registry order.

Failed feeds stay listed with status "failed" so a stale file left over from
an earlier run is visibly marked rather than silently served.
"""

import html
import os
from datetime import datetime, timezone
from typing import Iterable, Optional

from models import FeedResult

STYLE = (
    "body{font-family:system-ui,Arial,sans-serif;padding:1rem;}"
    "table{border-collapse:collapse;width:100%;max-width:800px;}"
    "th,td{border:1px solid #ccc;padding:4px 8px;text-align:left;}"
    "caption{font-weight:600;margin-bottom:.5rem;}"
    "code{background:#f5f5f5;padding:2px 4px;border-radius:3px;font-size:.85em;}"
    ".failed{color:#b00020;}"
    "footer{margin-top:1rem;font-size:.8em;color:#666;}"
)


def iso8601(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def file_size(path: Optional[str]) -> int:
    """Size in bytes, or 0 when the file cannot be probed."""
    if not path:
        return 0
    try:
        return os.path.getsize(path)
    except OSError:
        return 0


def build_row(result: FeedResult, generated: str) -> str:
    feed = result.feed
    name = html.escape(feed.title)
    href = html.escape(feed.filename, quote=True)
    if result.ok:
        count, size = result.count, file_size(result.out_path)
        status_cell = "<td>ok</td>"
    else:
        count, size = 0, 0
        reason = html.escape(result.error or "unknown error", quote=True)
        status_cell = f'<td class="failed" title="{reason}">failed</td>'
    return (
        f'<tr><td><a href="{href}">{name}</a></td>'
        f"<td>{count}</td><td>{size}</td><td>{generated}</td>{status_cell}</tr>"
    )


def build_index(results: Iterable[FeedResult], generated_at: Optional[datetime] = None) -> str:
    generated = iso8601(generated_at or datetime.now(timezone.utc))
    rows = "".join(build_row(r, generated) for r in results)
    return (
        '<!DOCTYPE html><html lang="en"><head><meta charset="UTF-8"/>'
        f"<title>Feeds Index</title><style>{STYLE}</style></head><body>"
        "<h1>Generated RSS Feeds</h1>"
        f"<p>Updated at <code>{generated}</code></p>"
        "<table><caption>Available Feeds</caption>"
        "<thead><tr><th>Feed</th><th>Items</th><th>Size (bytes)</th>"
        "<th>Generated</th><th>Status</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>"
        "<footer>Regenerated on a schedule; failed feeds keep their last good file.</footer>"
        "</body></html>\n"
    )
