#!/usr/bin/env python3
"""
Health check script for Hot Feeds output.
Validates the generated feeds and index and reports any issues.
"""

import os
import sys
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, Iterable, List, Optional, Tuple

from constants import Paths, Timing, get_output_dir
from logger_config import get_logger
from models import FeedDefinition

logger = get_logger(__name__)


class HealthCheck:
    """Output validation for one generated docs directory."""

    def __init__(self):
        self.checks: List[Tuple[str, bool, str]] = []

    def add_result(self, check_name: str, passed: bool, message: str = "") -> None:
        """Add a check result."""
        self.checks.append((check_name, passed, message))
        status = "✓ PASS" if passed else "✗ FAIL"
        log_method = logger.info if passed else logger.error
        log_method(f"{status}: {check_name} - {message}")

    def check_file_exists(self, file_path: str, description: str) -> bool:
        """Check if a required file exists."""
        exists = os.path.exists(file_path)
        self.add_result(
            f"File: {description}",
            exists,
            file_path if exists else f"{file_path} not found"
        )
        return exists

    def check_rss_valid(self, rss_path: str) -> bool:
        """Validate a feed is well-formed RSS 2.0 with complete items."""
        name = f"RSS Structure: {os.path.basename(rss_path)}"
        try:
            root = ET.parse(rss_path).getroot()
        except ET.ParseError as e:
            self.add_result(name, False, f"XML parse error: {e}")
            return False
        except OSError as e:
            self.add_result(name, False, f"Cannot read feed: {e}")
            return False

        if root.tag != "rss" or root.get("version") != "2.0":
            self.add_result(name, False, "Root element is not <rss version=\"2.0\">")
            return False

        channel = root.find("channel")
        if channel is None:
            self.add_result(name, False, "Missing channel element")
            return False

        missing = [tag for tag in ("title", "link", "description") if channel.find(tag) is None]
        if missing:
            self.add_result(name, False, f"Missing elements: {missing}")
            return False

        items = channel.findall("item")
        for idx, item in enumerate(items):
            incomplete = [tag for tag in ("title", "link", "guid")
                          if not (item.findtext(tag) or "").strip()]
            if incomplete:
                self.add_result(name, False, f"Item {idx} missing {incomplete}")
                return False

        self.add_result(name, True, f"Valid RSS 2.0 feed with {len(items)} items")
        return True

    def check_recent_build(self, rss_path: str, max_hours: int = Timing.MAX_FEED_AGE_HOURS) -> bool:
        """Check the channel lastBuildDate is within the specified hours."""
        name = f"Recent Build: {os.path.basename(rss_path)}"
        try:
            channel = ET.parse(rss_path).getroot().find("channel")
            text = channel.findtext("lastBuildDate") if channel is not None else None
            if not text:
                self.add_result(name, False, "Missing lastBuildDate")
                return False

            built = parsedate_to_datetime(text)
            if built.tzinfo is None:
                built = built.replace(tzinfo=timezone.utc)
            age_hours = (datetime.now(timezone.utc) - built).total_seconds() / 3600
        except (ET.ParseError, OSError, TypeError, ValueError) as e:
            self.add_result(name, False, f"Error checking build date: {e}")
            return False

        if age_hours > max_hours:
            self.add_result(name, False, f"Feed is {age_hours:.1f} hours old (max: {max_hours})")
            return False

        self.add_result(name, True, f"Feed is {age_hours:.1f} hours old")
        return True

    def check_file_size(self, file_path: str, max_mb: float, description: str) -> bool:
        """Check if file size is within acceptable limits."""
        try:
            size_mb = os.path.getsize(file_path) / (1024 * 1024)
        except OSError as e:
            self.add_result(f"File Size: {description}", False, f"Error: {e}")
            return False

        if size_mb > max_mb:
            self.add_result(
                f"File Size: {description}",
                False,
                f"{size_mb:.2f}MB exceeds limit of {max_mb}MB"
            )
            return False

        self.add_result(f"File Size: {description}", True, f"{size_mb:.2f}MB (limit: {max_mb}MB)")
        return True

    def run_all_checks(self, feeds: Optional[Iterable[FeedDefinition]] = None,
                       output_dir: Optional[str] = None) -> bool:
        """Run all health checks against ``output_dir`` for every registered feed."""
        if feeds is None:
            from generate_feeds import FEEDS
            feeds = FEEDS
        output_dir = output_dir or get_output_dir()
        logger.info(f"Starting health checks in {output_dir}...")

        self.check_file_exists(os.path.join(output_dir, Paths.INDEX_FILE), "Index Page")

        for feed in feeds:
            path = os.path.join(output_dir, feed.filename)
            if not self.check_file_exists(path, feed.title):
                continue
            if self.check_rss_valid(path):
                self.check_recent_build(path)
            self.check_file_size(path, max_mb=Timing.MAX_FEED_SIZE_MB, description=feed.title)

        summary = self.get_summary()
        logger.info(f"Health Check Summary: {summary['passed']}/{summary['total']} passed, "
                    f"{summary['failed']} failed")

        if summary["failed"] > 0:
            logger.error("Failed checks:")
            for name, result, message in self.checks:
                if not result:
                    logger.error(f"  - {name}: {message}")

        return summary["failed"] == 0

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        total = len(self.checks)
        passed = sum(1 for _, result, _ in self.checks if result)

        return {
            "total": total,
            "passed": passed,
            "failed": total - passed,
            "success_rate": (passed / total * 100) if total > 0 else 0
        }


def main() -> int:
    """Run health checks; exit status 0 only when every check passes."""
    health = HealthCheck()
    success = health.run_all_checks()

    summary = health.get_summary()
    print(f"\n{'='*50}")
    print(f"Health Check Results: {summary['passed']}/{summary['total']} passed")
    print(f"Success Rate: {summary['success_rate']:.1f}%")
    print(f"{'='*50}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
