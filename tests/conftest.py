"""Shared fixtures: canned feed payloads and an httpx mock transport."""

from typing import Dict, List, Tuple

import httpx
import pytest

from job_harvest.models import Category
from job_harvest.storage import InMemoryJobStore


REMOTEOK_PAYLOAD = [
    {"legal": "API Terms of Service: please link back to RemoteOK."},
    {
        "id": "123",
        "position": "Senior Python Developer",
        "company": "Acme",
        "company_logo": "//cdn.remoteok.com/acme.png",
        "tags": ["python", "usa"],
        "description": "<p>Pay $80k - $120k per year</p><script>track()</script>",
        "url": "https://remoteok.com/remote-jobs/123",
        "date": "2024-05-01T10:00:00+00:00",
    },
    {
        "id": 456,
        "position": "Contract Designer",
        "company": "Globex",
        "company_logo": "logo.png",
        "tags": ["design", "Contract", "europe"],
        "description": "UI and UX work",
        "url": "/remote-jobs/456",
        "date": "2024-05-02T10:00:00+00:00",
    },
]

REMOTIVE_PAYLOAD = {
    "job-count": 2,
    "jobs": [
        {
            "id": 1001,
            "url": "https://remotive.com/remote-jobs/software-dev/backend-engineer-1001",
            "title": "Backend Engineer",
            "company_name": "Initech",
            "company_logo": "https://remotive.com/job/1001/logo",
            "category": "Software Development",
            "job_type": "full_time",
            "publication_date": "2024-05-03T08:30:00",
            "candidate_required_location": "USA",
            "salary": "$100k - $140k",
            "description": "<p>Build APIs in Python.</p>",
        },
        {
            "id": 1002,
            "url": "https://remotive.com/remote-jobs/customer-support/support-agent-1002",
            "title": "Junior Support Agent",
            "company_name": "Umbrella",
            "company_logo": None,
            "category": "Customer Service",
            "job_type": "part_time",
            "publication_date": "2024-05-04T09:00:00",
            "candidate_required_location": "Worldwide",
            "salary": "",
            "description": "Help our customers",
        },
    ],
}

WWR_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>We Work Remotely: Full-Stack Programming Jobs</title>
    <link>https://weworkremotely.com</link>
    <description>Remote full-stack programming jobs</description>
    <item>
      <title>Acme Corp: Senior Backend Engineer</title>
      <link>https://weworkremotely.com/remote-jobs/acme-corp-senior-backend-engineer</link>
      <pubDate>Wed, 01 May 2024 12:00:00 +0000</pubDate>
      <description><![CDATA[<p>Full-time role building Python services.</p>]]></description>
    </item>
    <item>
      <title>Freelance Rails Developer</title>
      <link>https://weworkremotely.com/remote-jobs/freelance-rails-developer/</link>
      <pubDate>Thu, 02 May 2024 12:00:00 +0000</pubDate>
      <description><![CDATA[<p>Freelance gig.</p>]]></description>
    </item>
  </channel>
</rss>
"""


class FeedServer:
    """Routes requests by host to canned (status, response kwargs) pairs."""

    def __init__(self, routes: Dict[str, Tuple[int, dict]]) -> None:
        self.routes = routes
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, kwargs = self.routes.get(request.url.host, (404, {"text": "not found"}))
        return httpx.Response(status, **kwargs)


def all_feeds_ok() -> Dict[str, Tuple[int, dict]]:
    return {
        "remoteok.com": (200, {"json": REMOTEOK_PAYLOAD}),
        "remotive.com": (200, {"json": REMOTIVE_PAYLOAD}),
        "weworkremotely.com": (200, {"content": WWR_FEED, "headers": {"content-type": "application/rss+xml"}}),
    }


@pytest.fixture
def categories():
    return [
        Category(id="cat-dev", name="Software Development", slug="software-development", sort_order=0),
        Category(id="cat-support", name="Customer Support", slug="customer-support", sort_order=1),
        Category(id="cat-design", name="Design & Creative", slug="design-creative", sort_order=2),
    ]


@pytest.fixture
def store(categories):
    return InMemoryJobStore(categories)


@pytest.fixture
def feed_server():
    return FeedServer(all_feeds_ok())
