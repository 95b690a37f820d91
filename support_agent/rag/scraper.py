"""Web Page Fetcher for the Knowledge Base

This module retrieves the configured pages over HTTP and turns them into
RawPage records ready for ingestion.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
import asyncio

import httpx
import structlog

from support_agent.config.settings import ScraperSettings, get_settings
from support_agent.core.exceptions import FetchError
from support_agent.rag.document_processor import ContentChunker
from support_agent.rag.models import PageSource, RawPage
from support_agent.rag.text_extractor import TextExtractor

logger = structlog.get_logger(__name__)
settings = get_settings()


class WebPageFetcher:
    """Sequential fetcher for the knowledge base page list."""

    def __init__(
        self,
        scraper_settings: Optional[ScraperSettings] = None,
        extractor: Optional[TextExtractor] = None,
        chunker: Optional[ContentChunker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the fetcher.

        Args:
            scraper_settings: Page list, timeout, delay and user agent
            extractor: Markup to text converter
            chunker: Used for the page-level section split
            transport: Optional httpx transport override
        """
        self.settings = scraper_settings or settings.scraper
        self.extractor = extractor or TextExtractor()
        self.chunker = chunker or ContentChunker()
        self.transport = transport

    @property
    def pages(self) -> List[PageSource]:
        return list(self.settings.pages)

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Language": "en-US,en;q=0.9",
        }

    def parse_content(self, text: str, page_name: str, url: str) -> RawPage:
        """Build a RawPage from extracted page text."""
        return RawPage(
            page_name=page_name,
            url=url,
            scraped_at=datetime.now(timezone.utc),
            content=tuple(self.chunker.split_sections(text)),
            full_text=text
        )

    async def scrape_page(self, client: httpx.AsyncClient, source: PageSource) -> RawPage:
        """Fetch and parse a single page.

        Args:
            client: Shared HTTP client
            source: Page to fetch

        Returns:
            The parsed page

        Raises:
            FetchError: On any transport or HTTP status failure
        """
        logger.info("Scraping page", page=source.name, url=source.url)

        try:
            response = await client.get(source.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(source.name, source.url, str(e)) from e

        text = self.extractor.extract_text(response.text)
        page = self.parse_content(text, source.name, source.url)

        logger.info("Page scraped", page=source.name, sections=len(page.content))
        return page

    async def fetch_pages(self, sources: Optional[Sequence[PageSource]] = None) -> List[RawPage]:
        """Fetch every configured page, skipping the ones that fail.

        Args:
            sources: Optional page list override

        Returns:
            Successfully fetched pages, possibly empty
        """
        sources = list(sources) if sources is not None else self.pages
        results: List[RawPage] = []

        async with httpx.AsyncClient(
            headers=self.headers,
            timeout=self.settings.timeout_seconds,
            follow_redirects=True,
            transport=self.transport
        ) as client:
            for index, source in enumerate(sources):
                try:
                    results.append(await self.scrape_page(client, source))
                except FetchError as e:
                    logger.error("Skipping page", page=source.name, error=e.message)

                if self.settings.delay_seconds and index < len(sources) - 1:
                    await asyncio.sleep(self.settings.delay_seconds)

        logger.info("Scraping complete", pages_scraped=len(results), pages_configured=len(sources))
        return results
