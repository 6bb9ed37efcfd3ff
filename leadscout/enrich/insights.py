"""Business insight extraction using the Claude API."""

import json
import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import anthropic

from leadscout.config import settings
from leadscout.models import BusinessFacts, Insight, InsightError, RawInsight, StructuredInsight

logger = logging.getLogger(__name__)


class TemplateSource(Protocol):
    def find_active(self, category: str) -> Optional[str]: ...


@dataclass
class ServiceProfile:
    """What the caller sells; biases the prompt toward relevant openings."""

    business_type: str = "Digital Marketer"
    service_areas: list[str] = field(default_factory=list)

    @classmethod
    def from_settings(cls) -> "ServiceProfile":
        return cls(
            business_type=settings.business_type,
            service_areas=list(settings.service_areas),
        )


class _PromptValues(dict):
    def __missing__(self, key: str) -> str:
        return "N/A"


class InsightAdapter:
    """Ask a text-generation model for structured business intelligence."""

    SYSTEM_PROMPT = (
        "You are a business intelligence and marketing intent analyst. "
        "You suggest approachable ways to engage a target business."
    )

    DEFAULT_PROMPT = """I am a {business_type} looking to offer my services to the business below.
Analyse its marketing intent from publicly available information: website performance and
content, search presence, social media presence and recent activity. Identify its leadership
(names, roles, profiles, recent professional activity), recent public or job posts, expansion
plans or product launches, hiring status, and where my services fit.

My services:
Service Types: {service_areas}

Target business:
Business Name: {name}
Website: {website}
Address: {address}
Business Types: {types}
SSL Enabled: {has_ssl}

Infer reasonable assumptions where data is not directly available, but never invent people,
posts or links.

Respond with a single JSON object in this shape:
{{
    "company": {{"name": "", "foundingYear": 2020, "size": "", "description": ""}},
    "leadership": [{{"name": "", "role": "", "linkedin": "", "email": "", "phone": ""}}],
    "socialMedia": [{{"platform": "", "url": ""}}],
    "publicPosts/JobPosts": [{{"date": "", "content": "", "source": ""}}],
    "marketing_intent_analysis": "",
    "marketing_opportunities": "",
    "keyPoints": [],
    "approachable_fields": [{{"field": "", "description": ""}}],
    "approach_strategy": "",
    "possibility": "50%"
}}

Return only the JSON object, no other text."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        templates: Optional[TemplateSource] = None,
        profile: Optional[ServiceProfile] = None,
        client=None,
    ):
        self.api_key = api_key if api_key is not None else settings.anthropic_api_key
        self.templates = templates
        self.profile = profile or ServiceProfile.from_settings()
        self._client = client

    @property
    def client(self):
        """Lazy-load Anthropic client."""
        if self._client is None:
            if not self.api_key:
                raise ValueError("ANTHROPIC_API_KEY not configured")
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                timeout=settings.llm_timeout,
                max_retries=0,
            )
        return self._client

    async def analyze(
        self,
        facts: BusinessFacts,
        prompt_override: Optional[str] = None,
    ) -> Insight:
        """Return a structured insight, a raw-text fallback, or an error object."""
        if not self.api_key and self._client is None:
            logger.warning("Insight analysis unavailable: ANTHROPIC_API_KEY not set")
            return InsightError(
                error="Insight service not configured",
                status="unconfigured",
                details="ANTHROPIC_API_KEY not set",
            )

        prompt = self.build_prompt(facts, prompt_override)

        try:
            text = await self._call_api(prompt)
        except anthropic.APIError as e:
            logger.error(f"Insight call failed for {facts.name}: {e}")
            return InsightError(
                error="Insight service error",
                status=getattr(e, "status_code", None) or "Unknown",
                details=str(e),
            )

        return self.parse_response(text)

    def build_prompt(
        self,
        facts: BusinessFacts,
        prompt_override: Optional[str] = None,
    ) -> str:
        """Render the prompt: override, else category template, else default."""
        template = prompt_override or self._category_template(facts) or self.DEFAULT_PROMPT

        values = _PromptValues(
            business_type=self.profile.business_type or "Digital Marketer",
            service_areas=", ".join(self.profile.service_areas) or "(not specified)",
            name=facts.name,
            website=facts.website or "N/A",
            address=facts.address or "N/A",
            types=", ".join(facts.types) or "N/A",
            has_ssl="yes" if facts.has_ssl else "no",
        )

        try:
            return template.format_map(values)
        except (ValueError, IndexError, AttributeError) as e:
            # Stray braces in a stored template; send it verbatim
            logger.debug(f"Prompt template not formattable ({e}); using it as-is")
            return template

    def _category_template(self, facts: BusinessFacts) -> Optional[str]:
        if self.templates is None:
            return None

        categories = [facts.primary_type] if facts.primary_type else []
        categories.extend(t for t in facts.types if t not in categories)

        for category in categories:
            template = self.templates.find_active(category)
            if template:
                logger.debug(f"Using '{category}' prompt template for {facts.name}")
                return template
        return None

    async def _call_api(self, prompt: str) -> str:
        """Call Claude API; cancelling the await aborts the request."""
        response = await self.client.messages.create(
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            system=self.SYSTEM_PROMPT,
            messages=[
                {"role": "user", "content": prompt}
            ],
        )
        return response.content[0].text

    @staticmethod
    def parse_response(text: str) -> Insight:
        """Parse model output as a JSON object, keeping the text when it is not one."""
        cleaned = text.strip()

        # Handle potential markdown code blocks
        if "```json" in cleaned:
            cleaned = cleaned.split("```json")[1].split("```")[0]
        elif "```" in cleaned:
            cleaned = cleaned.split("```")[1].split("```")[0]

        try:
            data = json.loads(cleaned.strip())
        except json.JSONDecodeError as e:
            logger.info(f"Insight response is not JSON, keeping raw text: {e}")
            return RawInsight(text=text.strip())

        if not isinstance(data, dict):
            return RawInsight(text=text.strip())
        return StructuredInsight(data=data)
