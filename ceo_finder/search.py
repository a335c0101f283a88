"""
Browser-driven search executor.

Loads the search engine's results page in headless Chromium (Playwright) and
turns the HTML into a search outcome. Every query gets its own page in a
shared browser context, so concurrent queries never navigate the same page.
"""
import asyncio
import logging
import random
import re
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from playwright.async_api import async_playwright, Browser, BrowserContext, Page

from ceo_finder.config import config
from ceo_finder.models import Failed, Found, NotFound, SearchOutcome, Snippet
from ceo_finder.queries import search_url

log = logging.getLogger(__name__)

RESULT_SELECTOR = ".g"
CAPTCHA_SELECTORS = (".captcha", "#captcha-form")
SENTENCE_SPLIT_RE = re.compile(r"[.!?]\s+")

HIDE_WEBDRIVER_JS = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined,
});
"""


def is_bot_check(html: str, page_url: str = "") -> bool:
    """Return True when the page is an anti-bot interstitial instead of results."""
    if "/sorry/" in page_url:
        return True
    soup = BeautifulSoup(html, "html.parser")
    return any(soup.select_one(sel) is not None for sel in CAPTCHA_SELECTORS)


def parse_results(html: str, query: str, base_url: str = "") -> List[Snippet]:
    """
    Extract every matching result block from a results page.

    A block matches when one of its sentences contains the first word of the
    query, case-insensitively. The snippet keeps all sentences of the block.
    """
    words = query.split()
    keyword = words[0].lower() if words else ""

    soup = BeautifulSoup(html, "html.parser")
    snippets: List[Snippet] = []
    for block in soup.select(RESULT_SELECTOR):
        text = block.get_text(" ", strip=True)
        sentences = SENTENCE_SPLIT_RE.split(text)
        if not any(keyword in s.lower() for s in sentences):
            continue
        link = block.select_one("a[href]")
        url = urljoin(base_url, link["href"]) if link else ""
        snippets.append(Snippet(sentence=" ".join(sentences).strip(), url=url))
    return snippets


def outcome_from_html(html: str, query: str, base_url: str = "") -> SearchOutcome:
    snippets = parse_results(html, query, base_url)
    if not snippets:
        return NotFound()
    return Found(tuple(snippets))


class BrowserSearchExecutor:
    """
    Runs queries against the search engine through one browser instance.

    Usage::

        async with BrowserSearchExecutor() as executor:
            outcome = await executor.execute(query)
    """

    def __init__(
        self,
        concurrency: Optional[int] = None,
        navigation_timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        headless: Optional[bool] = None,
    ):
        self.concurrency = concurrency or config.max_concurrent_pages
        self._sem = asyncio.Semaphore(self.concurrency)
        self.navigation_timeout = navigation_timeout or config.navigation_timeout
        self.max_retries = config.search_max_retries if max_retries is None else max_retries
        self.retry_backoff = config.search_retry_backoff if retry_backoff is None else retry_backoff
        self.headless = config.headless if headless is None else headless
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def start(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=["--disable-blink-features=AutomationControlled"],
        )
        self._context = await self._browser.new_context(
            user_agent=random.choice(config.user_agents),
            locale="en-US",
        )
        await self._context.add_init_script(HIDE_WEBDRIVER_JS)
        log.info("Browser started (headless=%s, pages=%d)", self.headless, self.concurrency)

    async def stop(self) -> None:
        try:
            if self._context is not None:
                await self._context.close()
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._playwright is not None:
                await self._playwright.stop()
            self._context = self._browser = self._playwright = None
            log.info("Browser stopped")

    async def __aenter__(self) -> "BrowserSearchExecutor":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def _search_once(self, query: str, url: str) -> SearchOutcome:
        async with self._sem:
            page: Page = await self._context.new_page()
            try:
                await page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=int(self.navigation_timeout * 1000),
                )
                html = await page.content()
                page_url = page.url
            finally:
                await page.close()

        if is_bot_check(html, page_url):
            log.warning("Bot check detected for query: %s", query)
            return Failed(f"CAPTCHA or bot check detected for query: {query}", url)
        return outcome_from_html(html, query, page_url)

    async def execute(self, query: str) -> SearchOutcome:
        """
        Search for one query.

        Never raises for per-query problems: navigation and parsing errors
        come back as ``Failed``. Navigation errors are retried up to
        ``max_retries`` times with exponential backoff.
        """
        url = search_url(query)
        log.debug("Searching for: %s", query)

        attempt = 0
        while True:
            try:
                return await self._search_once(query, url)
            except Exception as e:
                if attempt >= self.max_retries:
                    log.error("Search failed for %s: %s", query, e)
                    return Failed(f"Error during search for {query}: {e}", url)
                wait = self.retry_backoff * (2 ** attempt)
                attempt += 1
                log.warning(
                    "Search error on '%s' (attempt %d/%d), retrying in %.1fs: %s",
                    query, attempt, self.max_retries, wait, e
                )
                await asyncio.sleep(wait)
