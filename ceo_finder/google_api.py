"""
Search executor backed by the Google Custom Search JSON API.

Drop-in alternative to the browser executor: same ``execute(query)``
contract, same snippet matching, but no page rendering and no bot checks.
"""
import asyncio
import logging
import threading
import time
from typing import Any, Dict, List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ceo_finder.config import config
from ceo_finder.models import Failed, Found, NotFound, SearchOutcome, Snippet
from ceo_finder.queries import search_url
from ceo_finder.search import SENTENCE_SPLIT_RE

# Initialize logger
log = logging.getLogger(__name__)

# Rate limiting globals
_last_google_ts: float = 0.0
_google_lock = threading.Lock()


class SearchBackendError(Exception):
    """Exception raised when a search backend cannot be used."""
    pass


def snippets_from_items(items: List[Dict[str, Any]], query: str) -> List[Snippet]:
    """Apply the first-word sentence filter to API result items."""
    words = query.split()
    keyword = words[0].lower() if words else ""

    snippets = []
    for item in items:
        text = ". ".join(p for p in (item.get("title", ""), item.get("snippet", "")) if p)
        sentences = SENTENCE_SPLIT_RE.split(text)
        if any(keyword in s.lower() for s in sentences):
            snippets.append(Snippet(" ".join(sentences).strip(), item.get("link", "")))
    return snippets


class ApiSearchExecutor:
    """Google Custom Search client with rate limiting and quota backoff."""

    def __init__(self, api_key: Optional[str] = None, cx_id: Optional[str] = None):
        self.api_key = api_key or config.api_key
        self.cx_id = cx_id or config.cx_id
        self._service = None

    async def start(self) -> None:
        """Build the API service; raises SearchBackendError on failure."""
        if self._service is not None:
            return
        try:
            self._service = build(
                "customsearch",
                "v1",
                developerKey=self.api_key,
                cache_discovery=False
            )
        except Exception as e:
            msg = f"Failed to initialize Google API service: {e}"
            log.error(msg)
            raise SearchBackendError(msg) from e

    async def stop(self) -> None:
        self._service = None

    async def __aenter__(self) -> "ApiSearchExecutor":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    def _respect_rate(self) -> None:
        global _last_google_ts
        # Compute wait time under lock, then release lock for sleeping
        with _google_lock:
            wait = config.google_safe_interval - (time.time() - _last_google_ts)
        if wait > 0:
            log.debug("Rate limiting: waiting %.2f seconds", wait)
            time.sleep(wait)
        with _google_lock:
            _last_google_ts = time.time()

    def _search_blocking(self, query: str, url: str) -> SearchOutcome:
        backoff = 1
        for attempt in range(config.google_max_retries):
            try:
                self._respect_rate()
                resp = (
                    self._service.cse()
                        .list(q=query, cx=self.cx_id, num=10)
                        .execute()
                )
            except HttpError as he:
                status = getattr(he.resp, "status", None)
                # quota exceeded
                if status in (403, 429):
                    backoff = backoff * 2
                    log.warning(
                        "Google quota %s – sleeping %ds (attempt %d/%d)",
                        status, backoff, attempt + 1, config.google_max_retries
                    )
                    time.sleep(backoff)
                    continue
                return Failed(f"Error during search for {query}: {he}", url)
            except Exception as e:
                return Failed(f"Error during search for {query}: {e}", url)

            snippets = snippets_from_items(resp.get("items", []), query)
            return Found(tuple(snippets)) if snippets else NotFound()

        msg = f"Google search failed for '{query}' after {config.google_max_retries} retries"
        log.error(msg)
        return Failed(msg, url)

    async def execute(self, query: str) -> SearchOutcome:
        url = search_url(query)
        if self._service is None:
            return Failed(f"Error during search for {query}: API service not started", url)
        log.debug("Searching API for: %s", query)
        return await asyncio.to_thread(self._search_blocking, query, url)
