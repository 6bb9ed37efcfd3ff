"""Tests for website inspection."""

import asyncio
from typing import Optional

import httpx

from leadscout.crawler import Fetcher
from leadscout.enrich import WebsiteInspector
from leadscout.models import (
    BusinessFacts,
    InsightError,
    PerformanceMetrics,
    StructuredInsight,
    WebsiteStatus,
)


class FakeSpeed:
    def __init__(self, result: Optional[PerformanceMetrics] = None, fail: bool = False):
        self.result = result
        self.fail = fail
        self.urls = []

    async def measure(self, url):
        self.urls.append(url)
        if self.fail:
            raise RuntimeError("speed exploded")
        return self.result


class FakeInsights:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.facts = []

    async def analyze(self, facts, prompt_override=None):
        self.facts.append(facts)
        if self.fail:
            raise RuntimeError("model exploded")
        return StructuredInsight(data={"company": {"name": facts.name}})


def make_transport(pages: dict[str, tuple[int, str]]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = pages.get(str(request.url), (404, "<html>not found</html>"))
        if status in (301, 302):
            return httpx.Response(status, headers={"Location": body})
        return httpx.Response(status, text=body, headers={"Content-Type": "text/html"})

    return httpx.MockTransport(handler)


def make_inspector(pages=None, speed=None, insights=None, ssl_ok=False, transport=None):
    ssl_hosts = []

    async def ssl_check(host):
        ssl_hosts.append(host)
        return ssl_ok

    inspector = WebsiteInspector(
        fetcher=Fetcher(transport=transport or make_transport(pages or {})),
        speed=speed or FakeSpeed(),
        insights=insights or FakeInsights(),
        ssl_check=ssl_check,
    )
    inspector.ssl_hosts = ssl_hosts
    return inspector


def make_facts(**kwargs) -> BusinessFacts:
    defaults = {"name": "Acme Plumbing", "website": "http://acme.com/", "types": ["plumber"]}
    defaults.update(kwargs)
    return BusinessFacts(**defaults)


class TestWebsiteInspector:
    """Tests for the website inspector."""

    def test_online_site_with_emails(self):
        html = """<html><body>
            <p>Call or write: office@acme.com</p>
            <a href="https://www.linkedin.com/company/acme-plumbing">LinkedIn</a>
        </body></html>"""
        speed = FakeSpeed(PerformanceMetrics(performance=72))
        inspector = make_inspector(
            pages={
                "http://acme.com/": (301, "https://acme.com/"),
                "https://acme.com/": (200, html),
            },
            speed=speed,
        )

        result = asyncio.run(inspector.inspect("http://acme.com/", make_facts()))

        assert result.website_status == WebsiteStatus.ONLINE
        assert result.final_url == "https://acme.com/"
        assert result.has_ssl
        assert result.emails == ["office@acme.com"]
        assert result.linkedin == "https://www.linkedin.com/company/acme-plumbing"
        assert result.performance.performance == 72
        assert speed.urls == ["https://acme.com/"]
        assert inspector.ssl_hosts == []
        assert result.error is None

    def test_contact_pages_searched_when_home_has_no_email(self):
        contact = """<html><body>
            <a href="mailto:hello@acme.com?subject=Quote">Email</a>
            <a href="https://www.google.com/url?q=https://www.linkedin.com/in/joe-acme">Joe</a>
        </body></html>"""
        inspector = make_inspector(
            pages={
                "http://acme.com/": (200, "<html><body>Welcome</body></html>"),
                "http://acme.com/contact-us": (200, contact),
            },
            ssl_ok=True,
        )

        result = asyncio.run(inspector.inspect("http://acme.com/", make_facts()))

        assert result.emails == ["hello@acme.com"]
        assert result.linkedin == "https://www.linkedin.com/in/joe-acme"
        assert result.has_ssl
        assert inspector.ssl_hosts == ["acme.com"]

    def test_unavailable_site_still_gets_insight(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        insights = FakeInsights()
        speed = FakeSpeed(PerformanceMetrics(error="PageSpeed Insights API failed"))
        inspector = make_inspector(
            transport=httpx.MockTransport(handler),
            insights=insights,
            speed=speed,
        )

        result = asyncio.run(inspector.inspect("http://down.example/", make_facts()))

        assert result.website_status == WebsiteStatus.UNAVAILABLE
        assert result.emails == []
        assert not result.has_ssl
        assert result.performance.error == "PageSpeed Insights API failed"
        assert isinstance(result.insight, StructuredInsight)
        assert len(insights.facts) == 1

    def test_error_status_is_unavailable(self):
        inspector = make_inspector(pages={"https://acme.com/": (500, "<body>oops</body>")})
        result = asyncio.run(inspector.inspect("https://acme.com/", make_facts()))

        assert result.website_status == WebsiteStatus.UNAVAILABLE
        assert result.has_ssl

    def test_no_website(self):
        insights = FakeInsights()
        speed = FakeSpeed()
        inspector = make_inspector(insights=insights, speed=speed)

        result = asyncio.run(inspector.inspect(None, make_facts(website=None)))

        assert result.website_status == WebsiteStatus.UNKNOWN
        assert result.final_url is None
        assert not result.has_ssl
        assert speed.urls == []
        assert insights.facts[0].website is None
        assert result.insight is not None

    def test_insight_sees_canonical_url(self):
        insights = FakeInsights()
        inspector = make_inspector(
            pages={
                "http://acme.com/": (302, "https://www.acme.com/"),
                "https://www.acme.com/": (200, "<body>a@acme.com</body>"),
            },
            insights=insights,
        )

        asyncio.run(inspector.inspect("http://acme.com/", make_facts()))

        assert insights.facts[0].website == "https://www.acme.com/"
        assert insights.facts[0].has_ssl is True

    def test_adapter_crashes_are_contained(self):
        inspector = make_inspector(
            pages={"https://acme.com/": (200, "<body>a@acme.com</body>")},
            speed=FakeSpeed(fail=True),
            insights=FakeInsights(fail=True),
        )

        result = asyncio.run(inspector.inspect("https://acme.com/", make_facts()))

        assert result.website_status == WebsiteStatus.ONLINE
        assert result.performance is None
        assert isinstance(result.insight, InsightError)
        assert "speed exploded" in result.error
