"""HTML extraction of contact details and profile links."""

import logging
import re
from typing import Iterable, Optional
from urllib.parse import parse_qs, unquote, urljoin, urlparse

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# Profile URL segments on the professional network
PROFILE_PATTERN = re.compile(r"linkedin\.com/(in|company)/", re.I)


class ContentExtractor:
    """Pull emails, anchors and profile links out of page markup."""

    # Tags whose text is never rendered
    HIDDEN_TAGS = ["script", "style", "noscript", "template"]

    # Asset names that look like emails (logo@2x.png)
    ASSET_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".css", ".js")

    def visible_text(self, html: str) -> str:
        """Text a visitor would see in the page body."""
        if not html:
            return ""

        soup = BeautifulSoup(html, "lxml")
        for tag in self.HIDDEN_TAGS:
            for element in soup.find_all(tag):
                element.decompose()

        body = soup.find("body") or soup
        text = body.get_text(" ")
        return re.sub(r"\s+", " ", text).strip()

    def find_emails(self, html: str) -> list[str]:
        """Emails matched in both the raw markup and the visible text."""
        if not html:
            return []
        matches = EMAIL_PATTERN.findall(html)
        matches.extend(EMAIL_PATTERN.findall(self.visible_text(html)))
        return self.merge_emails(matches)

    def mailto_targets(self, html: str) -> list[str]:
        """Addresses from mailto: anchors, without their query part."""
        if not html:
            return []

        soup = BeautifulSoup(html, "lxml")
        targets = []
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href.lower().startswith("mailto:"):
                continue
            address = unquote(href[len("mailto:"):].split("?")[0]).strip()
            if address:
                targets.append(address)
        return targets

    def anchors(self, html: str, base_url: Optional[str] = None) -> list[str]:
        """Absolute targets of every anchor on the page."""
        if not html:
            return []

        soup = BeautifulSoup(html, "lxml")
        links = []
        for anchor in soup.find_all("a", href=True):
            href = anchor["href"].strip()
            if not href:
                continue
            links.append(urljoin(base_url, href) if base_url else href)
        return links

    def find_linkedin(self, links: Iterable[str]) -> Optional[str]:
        """First professional-network profile link, unwrapping search redirects."""
        for link in links:
            target = self._unwrap_redirect(link) or link
            if PROFILE_PATTERN.search(target):
                return target
        return None

    def merge_emails(self, *groups: Iterable[str]) -> list[str]:
        """Merge email lists, dropping duplicates and asset names."""
        seen = set()
        merged = []
        for group in groups:
            for email in group:
                email = email.strip().strip(".")
                key = email.lower()
                if not email or key in seen or key.endswith(self.ASSET_SUFFIXES):
                    continue
                seen.add(key)
                merged.append(email)
        return merged

    def _unwrap_redirect(self, link: str) -> Optional[str]:
        """Decode the target of a search-engine redirect (google.com/url?url=...)."""
        if "linkedin.com" not in link.lower():
            return None

        try:
            parsed = urlparse(link)
        except ValueError:
            return None

        host = parsed.netloc.lower()
        if not (host.startswith("google.") or ".google." in host) or parsed.path != "/url":
            return None

        params = parse_qs(parsed.query)
        for name in ("url", "q"):
            if params.get(name):
                return unquote(params[name][0])
        return None
