"""Page-performance measurement via PageSpeed Insights."""

import logging
import re
from typing import Any, Optional

import httpx

from leadscout.config import settings
from leadscout.models import PerformanceMetrics

logger = logging.getLogger(__name__)

PAGESPEED_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

_KEY_PARAM = re.compile(r"(key=)[^&\s]+", re.I)


class SpeedAdapter:
    """Measure page performance for a URL.

    Performance scoring is optional: without an API key ``measure`` returns
    None, and a failed call returns metrics carrying an error marker.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.pagespeed_api_key
        self.timeout = timeout or settings.pagespeed_timeout
        self._transport = transport

    async def measure(self, url: str) -> Optional[PerformanceMetrics]:
        """Run PageSpeed Insights for url."""
        if not self.api_key:
            return None

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            ) as client:
                response = await client.get(
                    PAGESPEED_URL,
                    params={"url": url, "key": self.api_key},
                )
                response.raise_for_status()
                payload = response.json()

        except (httpx.HTTPError, ValueError) as e:
            details = _KEY_PARAM.sub(r"\1***", str(e))
            logger.warning(f"PageSpeed measurement failed for {url}: {details}")
            return PerformanceMetrics(error="PageSpeed Insights API failed", details=details)

        return self.parse(payload)

    @staticmethod
    def parse(payload: dict[str, Any]) -> PerformanceMetrics:
        """Map a runPagespeed response; absent fields become None."""
        lighthouse = payload.get("lighthouseResult") or {}
        audits = lighthouse.get("audits") or {}

        score = ((lighthouse.get("categories") or {}).get("performance") or {}).get("score")
        performance = round(score * 100) if isinstance(score, (int, float)) else None

        def display(audit: str) -> Optional[str]:
            return (audits.get(audit) or {}).get("displayValue") or None

        observed_load = None
        items = ((audits.get("metrics") or {}).get("details") or {}).get("items") or []
        if items and isinstance(items[0], dict):
            observed_load = items[0].get("observedLoad")

        return PerformanceMetrics(
            performance=performance,
            largest_contentful_paint=display("largest-contentful-paint"),
            first_contentful_paint=display("first-contentful-paint"),
            time_to_interactive=display("interactive"),
            observed_load_time=observed_load,
        )
