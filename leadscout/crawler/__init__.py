"""Web crawler components for inspecting business websites."""

from .fetcher import Fetcher, PageResult
from .extractor import ContentExtractor
from .tls import check_ssl

__all__ = ["Fetcher", "PageResult", "ContentExtractor", "check_ssl"]
