#!/usr/bin/env python3
"""
Constants and configuration values for Hot Feeds.
Centralizes magic numbers and provides documentation for each value.

The feed registry itself lives in generate_feeds.py and is edited in code,
never read from the environment.
"""

import os


# ========== File Paths ==========

class Paths:
    """Standard output locations."""

    OUTPUT_DIR = "docs"  # Served as static content (e.g. GitHub Pages)
    INDEX_FILE = "index.html"


# ========== Upstream HTTP ==========

class Http:
    """Settings shared by every upstream request."""

    USER_AGENT = "Mozilla/5.0 (compatible; hot-feeds/1.0; +FeedGenerator)"
    ACCEPT = "application/json"
    TIMEOUT = 20  # Seconds; a hung upstream must not stall the whole run


# ========== Normalization Fallbacks ==========

class Fallbacks:
    """Values substituted when an upstream item is missing a field."""

    UNTITLED = "Untitled"

    # Epoch values above this are treated as milliseconds rather than seconds
    EPOCH_MILLIS_THRESHOLD = 10 ** 12


# ========== Timing Configuration ==========

class Timing:
    """Time-related constants."""

    # Health check: a feed not rebuilt in this many hours is stale
    MAX_FEED_AGE_HOURS = 24

    # Health check: size ceiling per generated feed
    MAX_FEED_SIZE_MB = 5


def get_output_dir() -> str:
    """Get output directory from environment or default."""
    return os.getenv("FEEDS_OUTPUT_DIR") or Paths.OUTPUT_DIR
