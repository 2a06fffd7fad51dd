"""String and date helpers shared across the harvester."""

from __future__ import annotations

import hashlib
import re
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional


SLUG_MAX_LENGTH = 100

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")

# Tags expected in stored descriptions; declared, not enforced by clean_html.
ALLOWED_TAGS = ["p", "br", "strong", "em", "ul", "ol", "li", "h1", "h2", "h3", "h4", "h5", "h6", "a"]


def generate_slug(title: str, company: str) -> str:
    """URL-safe slug from title and company: [a-z0-9-], no edge hyphens, max 100 chars."""
    combined = f"{title or ''}-{company or ''}".lower()
    slug = _NON_ALNUM_RE.sub("-", combined).strip("-")
    return slug[:SLUG_MAX_LENGTH].rstrip("-")


def generate_job_id(source_job_id: str, platform: str) -> str:
    """Deterministic dedup key for a record of a given platform."""
    return f"{platform.lower()}-{source_job_id}"


def stable_suffix(*parts: str, length: int = 6) -> str:
    """Short deterministic hex digest of a set of string parts."""
    joined = "|".join(p.strip() for p in parts if p is not None)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:length]


def clean_html(html: Optional[str]) -> str:
    """Remove <script> and <style> blocks; everything else passes through.

    This is not a sanitizer. Do not rely on it for XSS protection.
    """
    if not html:
        return ""
    html = _SCRIPT_RE.sub("", html)
    html = _STYLE_RE.sub("", html)
    return html.strip()


def strip_html(html: Optional[str]) -> str:
    """Drop all tags and collapse whitespace."""
    if not html:
        return ""
    return _WS_RE.sub(" ", _TAG_RE.sub(" ", html)).strip()


def normalize_logo_url(url: Optional[str]) -> Optional[str]:
    """Fix protocol-relative URLs and discard anything that is not absolute."""
    if not url:
        return None
    url = url.strip()
    if url.startswith("//"):
        url = "https:" + url
    if url.startswith(("http://", "https://")):
        return url
    return None


def to_iso8601(value: Any) -> str:
    """Convert a feed date into an ISO-8601 UTC string (`...T...000Z`).

    Accepts ISO strings, RFC-822 strings (RSS pubDate), datetimes, epoch
    seconds and `time.struct_time`. Naive values are taken as UTC.

    Raises:
        ValueError: if the value is missing or cannot be parsed.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError("missing date")

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, time.struct_time):
        dt = datetime(*value[:6], tzinfo=timezone.utc)
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    else:
        s = str(value).strip()
        try:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        except ValueError:
            try:
                dt = parsedate_to_datetime(s)
            except (TypeError, ValueError):
                raise ValueError(f"invalid date: {s!r}") from None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return to_iso8601(datetime.now(timezone.utc))
