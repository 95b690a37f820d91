"""Unit tests for the web page fetcher.

HTTP traffic is served by an httpx.MockTransport.
"""

import httpx
import pytest

from support_agent.config.settings import ScraperSettings
from support_agent.core.exceptions import FetchError
from support_agent.rag.models import PageSource
from support_agent.rag.scraper import WebPageFetcher


HOME_HTML = """
<html><head><title>Thoughtful AI</title></head><body>
<nav><a href="/about">About us and our mission</a></nav>
<h1>AI agents for healthcare</h1>
<p>Thoughtful AI automates revenue cycle management for providers.</p>
<footer><p>Copyright Thoughtful AI, all rights reserved.</p></footer>
</body></html>
"""

PAYMENT_HTML = """
<h2>Payment Posting</h2>
<p>PHIL reconciles payments and posts remittances automatically.</p>
"""


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def transport(requests_seen):
    """Mock transport serving two pages, one server error and one connection failure."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        path = request.url.path
        if path == "/":
            return httpx.Response(200, text=HOME_HTML)
        if path == "/payment-posting":
            return httpx.Response(200, text=PAYMENT_HTML)
        if path == "/broken":
            return httpx.Response(500, text="Internal Server Error")
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def scraper_settings():
    """Scraper settings without politeness delay."""
    return ScraperSettings(
        pages=[
            PageSource(url="https://example.com/", name="Home"),
            PageSource(url="https://example.com/broken", name="Broken"),
            PageSource(url="https://example.com/payment-posting", name="Payment Posting"),
            PageSource(url="https://example.com/offline", name="Offline"),
        ],
        delay_seconds=0,
    )


@pytest.fixture
def fetcher(scraper_settings, transport):
    """Create a fetcher using the mock transport."""
    return WebPageFetcher(scraper_settings, transport=transport)


@pytest.mark.asyncio
async def test_fetch_pages_skips_failures(fetcher, requests_seen):
    """Test that failing pages are skipped and the rest are returned in order."""
    pages = await fetcher.fetch_pages()

    assert [page.page_name for page in pages] == ["Home", "Payment Posting"]
    assert len(requests_seen) == 4


@pytest.mark.asyncio
async def test_page_content_is_extracted(fetcher):
    """Test that fetched markup is reduced to content sections."""
    pages = await fetcher.fetch_pages()
    home = pages[0]

    assert home.url == "https://example.com/"
    assert home.content == (
        "AI agents for healthcare",
        "Thoughtful AI automates revenue cycle management for providers.",
    )
    assert "About us and our mission" not in home.full_text
    assert "Copyright" not in home.full_text
    assert home.full_text.startswith("AI agents for healthcare")
    assert home.scraped_at.tzinfo is not None


@pytest.mark.asyncio
async def test_browser_like_headers(fetcher, requests_seen):
    """Test the headers sent with every request."""
    await fetcher.fetch_pages()

    headers = requests_seen[0].headers
    assert "ThoughtfulAI-Bot/1.0" in headers["user-agent"]
    assert headers["accept"] == "text/html,application/xhtml+xml"
    assert headers["accept-language"] == "en-US,en;q=0.9"


@pytest.mark.asyncio
async def test_scrape_page_raises_fetch_error(fetcher, transport):
    """Test that HTTP failures surface as FetchError."""
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(FetchError) as exc_info:
            await fetcher.scrape_page(client, PageSource(url="https://example.com/broken", name="Broken"))

    assert exc_info.value.details["page_name"] == "Broken"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_all_pages_failing_returns_empty_list(transport):
    """Test that total failure is reported as an empty result, not an exception."""
    fetcher = WebPageFetcher(
        ScraperSettings(
            pages=[PageSource(url="https://example.com/offline", name="Offline")],
            delay_seconds=0,
        ),
        transport=transport,
    )

    assert await fetcher.fetch_pages() == []


def test_parse_content(fetcher):
    """Test building a RawPage from extracted text."""
    page = fetcher.parse_content(
        "Heading\n\nFirst section with enough text.\n\nSecond section with enough text.",
        "About",
        "https://example.com/about",
    )

    assert page.page_name == "About"
    assert page.content == ("First section with enough text.", "Second section with enough text.")
    assert page.full_text.startswith("Heading")


def test_default_pages():
    """Test the default page list."""
    names = [page.name for page in WebPageFetcher(ScraperSettings()).pages]

    assert names == [
        "Home",
        "Prior Authorization",
        "Accounts Receivable",
        "Payment Posting",
        "About",
        "Trust and Security",
    ]
