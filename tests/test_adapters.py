"""Tests for the page-speed and insight adapters."""

import asyncio
from types import SimpleNamespace

import anthropic
import httpx
import pytest

from leadscout.enrich import InsightAdapter, ServiceProfile, SpeedAdapter
from leadscout.models import BusinessFacts, InsightError, RawInsight, StructuredInsight

PAGESPEED_PAYLOAD = {
    "lighthouseResult": {
        "categories": {"performance": {"score": 0.37}},
        "audits": {
            "largest-contentful-paint": {"displayValue": "4.1 s"},
            "first-contentful-paint": {"displayValue": "1.9 s"},
            "interactive": {"displayValue": "6.0 s"},
            "metrics": {"details": {"items": [{"observedLoad": 3120}]}},
        },
    }
}


class TestSpeedAdapter:
    """Tests for PageSpeed measurement."""

    def test_parse_full_payload(self):
        metrics = SpeedAdapter.parse(PAGESPEED_PAYLOAD)

        assert metrics.performance == 37
        assert metrics.largest_contentful_paint == "4.1 s"
        assert metrics.first_contentful_paint == "1.9 s"
        assert metrics.time_to_interactive == "6.0 s"
        assert metrics.observed_load_time == 3120
        assert metrics.error is None

    def test_parse_missing_fields(self):
        metrics = SpeedAdapter.parse({"lighthouseResult": {"audits": {}}})

        assert metrics.performance is None
        assert metrics.largest_contentful_paint is None
        assert metrics.observed_load_time is None

    def test_no_key_returns_none(self):
        adapter = SpeedAdapter(api_key="")
        assert asyncio.run(adapter.measure("https://acme.com/")) is None

    def test_measure_calls_service(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json=PAGESPEED_PAYLOAD)

        adapter = SpeedAdapter(api_key="k", transport=httpx.MockTransport(handler))
        metrics = asyncio.run(adapter.measure("https://acme.com/"))

        assert metrics.performance == 37
        assert requests[0].url.params["url"] == "https://acme.com/"

    def test_failure_returns_error_marker(self):
        def handler(request):
            return httpx.Response(500, json={"error": {"message": "Lighthouse failed"}})

        adapter = SpeedAdapter(api_key="secret-key", transport=httpx.MockTransport(handler))
        metrics = asyncio.run(adapter.measure("https://acme.com/"))

        assert metrics.error == "PageSpeed Insights API failed"
        assert metrics.performance is None
        assert "secret-key" not in (metrics.details or "")


class FakeTemplates:
    def __init__(self, templates: dict[str, str]):
        self.templates = templates

    def find_active(self, category):
        return self.templates.get(category)


def make_client(text: str = "", error: Exception = None):
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        return SimpleNamespace(content=[SimpleNamespace(text=text)])

    client = SimpleNamespace(messages=SimpleNamespace(create=create))
    client.calls = calls
    return client


def make_facts(**kwargs) -> BusinessFacts:
    defaults = {
        "name": "Acme Plumbing",
        "website": "https://acme.com/",
        "address": "1 Main St",
        "types": ["plumber", "point_of_interest"],
        "primary_type": "plumber",
        "has_ssl": True,
    }
    defaults.update(kwargs)
    return BusinessFacts(**defaults)


@pytest.fixture
def profile() -> ServiceProfile:
    return ServiceProfile(business_type="Web Designer", service_areas=["SEO", "Web design"])


class TestInsightParsing:
    """Tests for turning model output into an insight."""

    def test_json_object(self):
        insight = InsightAdapter.parse_response('{"company": {"foundingYear": 2019}}')
        assert isinstance(insight, StructuredInsight)
        assert insight.founding_year() == 2019

    def test_fenced_json(self):
        text = 'Here you go:\n```json\n{"publicPosts/JobPosts": [{"content": "Hiring a designer"}]}\n```'
        insight = InsightAdapter.parse_response(text)
        assert isinstance(insight, StructuredInsight)
        assert insight.post_contents() == ["Hiring a designer"]

    def test_prose_is_kept_raw(self):
        insight = InsightAdapter.parse_response("  I could not find this business.  ")
        assert isinstance(insight, RawInsight)
        assert insight.text == "I could not find this business."

    def test_json_array_is_raw(self):
        assert isinstance(InsightAdapter.parse_response("[1, 2, 3]"), RawInsight)


class TestInsightAdapter:
    """Tests for calling the analysis service."""

    def test_unconfigured_returns_error(self, profile):
        adapter = InsightAdapter(api_key="", profile=profile)
        insight = asyncio.run(adapter.analyze(make_facts()))

        assert isinstance(insight, InsightError)
        assert insight.status == "unconfigured"

    def test_structured_response(self, profile):
        client = make_client('{"company": {"name": "Acme", "foundingYear": "2023"}}')
        adapter = InsightAdapter(api_key="k", profile=profile, client=client)

        insight = asyncio.run(adapter.analyze(make_facts()))

        assert isinstance(insight, StructuredInsight)
        assert insight.founding_year() == 2023
        prompt = client.calls[0]["messages"][0]["content"]
        assert "Web Designer" in prompt
        assert "SEO, Web design" in prompt
        assert "Acme Plumbing" in prompt

    def test_connection_error(self, profile):
        error = anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"),
        )
        adapter = InsightAdapter(api_key="k", profile=profile, client=make_client(error=error))

        insight = asyncio.run(adapter.analyze(make_facts()))

        assert isinstance(insight, InsightError)
        assert insight.error == "Insight service error"
        assert insight.status == "Unknown"

    def test_status_error_keeps_code(self, profile):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        error = anthropic.RateLimitError(
            "rate limited",
            response=httpx.Response(429, request=request),
            body=None,
        )
        adapter = InsightAdapter(api_key="k", profile=profile, client=make_client(error=error))

        insight = asyncio.run(adapter.analyze(make_facts()))

        assert isinstance(insight, InsightError)
        assert insight.status == 429


class TestPromptSelection:
    """Tests for choosing and rendering the prompt."""

    def test_default_prompt(self, profile):
        prompt = InsightAdapter(api_key="", profile=profile).build_prompt(make_facts())

        assert prompt.startswith("I am a Web Designer")
        assert '"foundingYear"' in prompt
        assert "SSL Enabled: yes" in prompt

    def test_category_template_wins(self, profile):
        templates = FakeTemplates({"plumber": "Plumbing prompt for {name} at {website}"})
        adapter = InsightAdapter(api_key="", templates=templates, profile=profile)

        assert adapter.build_prompt(make_facts()) == "Plumbing prompt for Acme Plumbing at https://acme.com/"

    def test_secondary_category_template(self, profile):
        templates = FakeTemplates({"point_of_interest": "Generic prompt for {name}"})
        adapter = InsightAdapter(api_key="", templates=templates, profile=profile)

        assert adapter.build_prompt(make_facts()) == "Generic prompt for Acme Plumbing"

    def test_override_wins(self, profile):
        templates = FakeTemplates({"plumber": "category prompt"})
        adapter = InsightAdapter(api_key="", templates=templates, profile=profile)

        assert adapter.build_prompt(make_facts(), "Tell me about {name}") == "Tell me about Acme Plumbing"

    def test_unknown_placeholder(self, profile):
        adapter = InsightAdapter(api_key="", profile=profile)
        assert adapter.build_prompt(make_facts(), "{name} / {employees}") == "Acme Plumbing / N/A"

    def test_unformattable_template_used_verbatim(self, profile):
        adapter = InsightAdapter(api_key="", profile=profile)
        template = "Close the brace } for {name}"
        assert adapter.build_prompt(make_facts(), template) == template
