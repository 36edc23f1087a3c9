#!/usr/bin/env python3
"""
Data model and error types shared by the adapters, renderers and orchestrator.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional


class FeedError(Exception):
    """Base class for failures that take a single feed out of a run."""


class FetchError(FeedError):
    """Upstream returned a non-2xx status or could not be reached."""


class ParseError(FeedError):
    """Upstream body was not valid JSON."""


class StorageError(Exception):
    """Output directory or index could not be written. Fatal for the run."""


@dataclass(frozen=True)
class NormalizedItem:
    title: str
    link: str
    guid: str
    date: datetime
    description: str = ""


@dataclass(frozen=True)
class FeedDefinition:
    """One configured feed: channel metadata plus the fetcher bound to its source."""

    id: str
    filename: str
    title: str
    link: str
    description: str
    fetcher: Callable[[], List[NormalizedItem]]


@dataclass
class FeedResult:
    feed: FeedDefinition
    count: int
    out_path: str
    ok: bool = True
    error: Optional[str] = None
