"""Per-source connectors."""

from __future__ import annotations

from typing import List, Optional

import httpx

from ..config import Settings, get_settings
from .base import USER_AGENT, JobSource
from .remoteok import RemoteOKSource
from .remotive import RemotiveSource
from .weworkremotely import WeWorkRemotelySource

__all__ = [
    "USER_AGENT",
    "JobSource",
    "RemoteOKSource",
    "RemotiveSource",
    "WeWorkRemotelySource",
    "default_sources",
]


def default_sources(
    settings: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None
) -> List[JobSource]:
    """The three configured sources, in report order."""
    settings = settings or get_settings()
    common = dict(
        timeout_s=settings.http_timeout_seconds,
        user_agent=settings.user_agent,
        transport=transport,
    )
    return [
        RemoteOKSource(feed_url=settings.remoteok_url, **common),
        WeWorkRemotelySource(feed_url=settings.weworkremotely_url, **common),
        RemotiveSource(feed_url=settings.remotive_url, **common),
    ]
