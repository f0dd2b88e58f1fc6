"""
Page fetching integrations.

Exports:
    PageFetcher: Fetcher base class
    get_page_fetcher: Build the configured fetcher (http | browser)
"""

from integrations.page_fetcher import PageFetcher, get_page_fetcher, FETCH_STRATEGIES

__all__ = [
    "PageFetcher",
    "get_page_fetcher",
    "FETCH_STRATEGIES",
]
