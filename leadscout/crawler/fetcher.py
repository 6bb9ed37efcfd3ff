"""HTTP page navigation for website inspection."""

import logging
from typing import Optional

import httpx

from leadscout.config import settings

logger = logging.getLogger(__name__)


class PageResult:
    """Result of navigating to a page."""

    def __init__(
        self,
        url: str,
        final_url: Optional[str] = None,
        content: Optional[str] = None,
        status_code: int = 0,
        content_type: Optional[str] = None,
        error: Optional[str] = None,
    ):
        self.url = url
        self.final_url = final_url or url
        self.content = content
        self.status_code = status_code
        self.content_type = content_type
        self.error = error

    @property
    def reachable(self) -> bool:
        return self.error is None and 0 < self.status_code < 400


class Fetcher:
    """Navigate to pages the way a browser would: follow redirects, keep the final URL."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.user_agent = user_agent or settings.user_agent
        self.timeout = timeout or settings.navigation_timeout
        self._transport = transport

    async def navigate(self, url: str) -> PageResult:
        """Fetch a URL, following redirects, within the navigation timeout."""
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    url,
                    headers={
                        "User-Agent": self.user_agent,
                        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                        "Accept-Language": "en-US,en;q=0.5",
                    },
                )

                content_type = response.headers.get("content-type", "")
                content = None
                # Only keep markup for HTML/text responses
                if "text/" in content_type or "html" in content_type:
                    content = response.text

                return PageResult(
                    url=url,
                    final_url=str(response.url),
                    content=content,
                    status_code=response.status_code,
                    content_type=content_type,
                )

        except httpx.TimeoutException:
            logger.warning(f"Timeout navigating to {url}")
            return PageResult(url=url, error="Timeout")

        except httpx.RequestError as e:
            logger.warning(f"Request error navigating to {url}: {e}")
            return PageResult(url=url, error=str(e) or type(e).__name__)

        except httpx.InvalidURL as e:
            logger.warning(f"Invalid URL {url}: {e}")
            return PageResult(url=url, error=str(e))

    async def fetch_pages(
        self,
        base_url: str,
        paths: list[str],
    ) -> dict[str, PageResult]:
        """Fetch several paths under the same site, in order."""
        results = {}

        for path in paths:
            if path.startswith("http"):
                url = path
            else:
                url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"

            results[url] = await self.navigate(url)

        return results
