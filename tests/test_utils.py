"""
Unit tests for job_harvest/utils.py

Covers slug and job id generation, the HTML helpers, logo URL fixing and
feed date conversion.
"""

import re
import time
from datetime import datetime, timezone

import pytest

from job_harvest.utils import (
    clean_html,
    generate_job_id,
    generate_slug,
    normalize_logo_url,
    stable_suffix,
    strip_html,
    to_iso8601,
)


class TestSlug:
    def test_basic_slug(self):
        assert generate_slug("Senior Backend Engineer", "Acme Corp") == "senior-backend-engineer-acme-corp"

    def test_collapses_runs_and_trims_hyphens(self):
        assert generate_slug("  --C++ / Go!! ", "(Foo) Inc.") == "c-go-foo-inc"

    @pytest.mark.parametrize(
        "title,company",
        [
            ("A" * 150, "Company"),
            ("Développeur Senior ☕", "Société Générale"),
            ("!!!", "???"),
            ("", ""),
            ("Data Engineer - " * 20, "x"),
        ],
    )
    def test_slug_bounds(self, title, company):
        slug = generate_slug(title, company)
        assert len(slug) <= 100
        assert re.fullmatch(r"[a-z0-9-]*", slug)
        assert not slug.startswith("-")
        assert not slug.endswith("-")

    def test_empty_only_without_alphanumerics(self):
        assert generate_slug("!!!", "???") == ""
        assert generate_slug("!!!", "?x?") == "x"

    def test_truncation_trims_trailing_hyphen(self):
        # "word-" repeated puts a hyphen exactly at position 100
        slug = generate_slug("word " * 40, "co")
        assert slug == ("word-" * 20)[:99]


class TestJobId:
    def test_platform_lowercased(self):
        assert generate_job_id("123", "RemoteOK") == "remoteok-123"

    def test_deterministic(self):
        assert generate_job_id("abc", "weworkremotely") == generate_job_id("abc", "weworkremotely")

    def test_stable_suffix(self):
        assert stable_suffix("remoteok-1") == stable_suffix("remoteok-1")
        assert stable_suffix("remoteok-1") != stable_suffix("remoteok-2")
        assert len(stable_suffix("remoteok-1")) == 6


class TestHtml:
    def test_clean_html_removes_script_and_style(self):
        html = "<p>Hi</p><script type='text/javascript'>alert(1)</script><style>p{color:red}</style><b>x</b>"
        assert clean_html(html) == "<p>Hi</p><b>x</b>"

    def test_clean_html_case_insensitive(self):
        assert clean_html("<SCRIPT>bad()</SCRIPT>ok") == "ok"

    def test_clean_html_passes_other_markup_through(self):
        html = '<div onclick="x()"><a href="/y">link</a></div>'
        assert clean_html(html) == html

    def test_clean_html_empty(self):
        assert clean_html("") == ""
        assert clean_html(None) == ""

    def test_strip_html(self):
        assert strip_html("<p>Hello</p>\n\n<ul><li>World</li></ul>") == "Hello World"


class TestLogoUrl:
    def test_protocol_relative(self):
        assert normalize_logo_url("//cdn.example.com/a.png") == "https://cdn.example.com/a.png"

    def test_absolute_kept(self):
        assert normalize_logo_url("http://example.com/a.png") == "http://example.com/a.png"

    def test_relative_discarded(self):
        assert normalize_logo_url("logo.png") is None
        assert normalize_logo_url("/static/logo.png") is None
        assert normalize_logo_url("") is None
        assert normalize_logo_url(None) is None


class TestDates:
    def test_iso_with_offset(self):
        assert to_iso8601("2024-05-01T12:00:00+02:00") == "2024-05-01T10:00:00.000Z"

    def test_naive_iso_is_utc(self):
        assert to_iso8601("2024-05-03T08:30:00") == "2024-05-03T08:30:00.000Z"

    def test_rfc822(self):
        assert to_iso8601("Wed, 01 May 2024 12:00:00 +0000") == "2024-05-01T12:00:00.000Z"

    def test_struct_time(self):
        parsed = time.strptime("2024-05-01 12:00:00", "%Y-%m-%d %H:%M:%S")
        assert to_iso8601(parsed) == "2024-05-01T12:00:00.000Z"

    def test_datetime_and_epoch(self):
        dt = datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        assert to_iso8601(dt) == "2024-05-01T12:00:00.000Z"
        assert to_iso8601(dt.timestamp()) == "2024-05-01T12:00:00.000Z"

    @pytest.mark.parametrize("bad", [None, "", "   ", "not a date"])
    def test_invalid_raises(self, bad):
        with pytest.raises(ValueError):
            to_iso8601(bad)
