"""
Distribution of domains over worker processes.

The domain list is cut into contiguous chunks, one per worker process. Each
worker owns a single search executor (one browser) for its whole chunk,
searches its domains one after another (all queries of a domain at once),
and returns its ResultBuckets. The coordinator folds the returned values in
chunk order; nothing is shared between workers.

Worker log records travel back to the coordinator through a queue and are
written by the coordinator's own handlers, whatever the start method.
"""

import asyncio
import logging
import math
import multiprocessing
from concurrent.futures import ProcessPoolExecutor, as_completed
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Dict, List, Optional, Sequence

from ceo_finder.classifier import classify, merge, merge_all
from ceo_finder.config import config
from ceo_finder.models import ResultBuckets
from ceo_finder.queries import build_queries

# Initialize logger
log = logging.getLogger(__name__)


class DispatchError(Exception):
    """Raised when a worker dies or raises; the whole run is aborted."""
    pass


def chunk(domains: Sequence[str], workers: int) -> List[List[str]]:
    """
    Split domains into at most ``workers`` contiguous chunks.

    Chunk size is ``ceil(len(domains) / workers)``; the last chunk may be
    shorter. An empty input gives no chunks.
    """
    if workers < 1:
        raise ValueError("workers must be at least 1")
    if not domains:
        return []
    size = math.ceil(len(domains) / workers)
    return [list(domains[i:i + size]) for i in range(0, len(domains), size)]


def create_executor(backend: Optional[str] = None):
    """Return an unstarted search executor for the configured backend."""
    backend = backend or config.search_backend
    if backend == "api":
        from ceo_finder.google_api import ApiSearchExecutor
        return ApiSearchExecutor()
    from ceo_finder.search import BrowserSearchExecutor
    return BrowserSearchExecutor()


async def search_domain(domain: str, executor) -> ResultBuckets:
    """Run every query for one domain concurrently and classify the outcomes."""
    queries = build_queries(domain)
    log.info("▶ %s: %d queries", domain, len(queries))
    outcomes = await asyncio.gather(*(executor.execute(q) for q in queries))
    buckets = classify(zip(queries, outcomes))
    counts = buckets.counts()
    log.info(
        "✓ %s: %d found, %d not found, %d failed",
        domain, counts["found"], counts["not_found"], counts["failed"]
    )
    return buckets


async def search_domains(domains: Sequence[str], executor, strict: Optional[bool] = None) -> ResultBuckets:
    """Search domains in order with an already started executor."""
    if strict is None:
        strict = config.strict_merge
    result = ResultBuckets.empty()
    for domain in domains:
        result = merge(result, await search_domain(domain, executor), strict)
    return result


async def _run_chunk_async(domains: Sequence[str]) -> ResultBuckets:
    async with create_executor() as executor:
        return await search_domains(domains, executor)


def run_chunk(domains: Sequence[str], settings: Optional[Dict[str, Any]] = None) -> ResultBuckets:
    """
    Worker process entry point.

    Args:
        domains: The chunk of domains this worker owns
        settings: Snapshot of the coordinator's ``config.as_dict()``

    Returns:
        ResultBuckets for the whole chunk
    """
    if settings:
        config.update_from_dict(settings)
    log.debug("Worker starting on %d domains", len(domains))
    return asyncio.run(_run_chunk_async(domains))


def _init_worker_logging(log_queue, level: int) -> None:
    """Route every record of a worker process to the coordinator's queue."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(QueueHandler(log_queue))
    root.setLevel(level)


def dispatch(domains: Sequence[str], workers: Optional[int] = None) -> ResultBuckets:
    """
    Search all domains across worker processes and fold the results.

    Raises:
        DispatchError: If any worker fails
    """
    workers = workers or config.max_workers
    chunks = chunk(domains, workers)
    if not chunks:
        log.warning("No domains to search")
        return ResultBuckets.empty()

    log.info("Dispatching %d domains to %d workers", len(domains), len(chunks))
    settings = config.as_dict()

    ctx = multiprocessing.get_context(config.worker_start_method or None)
    root = logging.getLogger()
    log_queue = ctx.Queue()
    listener = QueueListener(log_queue, *root.handlers, respect_handler_level=True)
    listener.start()

    executor = ProcessPoolExecutor(
        max_workers=len(chunks),
        mp_context=ctx,
        initializer=_init_worker_logging,
        initargs=(log_queue, root.getEffectiveLevel()),
    )
    try:
        futures = {executor.submit(run_chunk, c, settings): i for i, c in enumerate(chunks)}
        parts: List[ResultBuckets] = [ResultBuckets.empty()] * len(chunks)
        for fut in as_completed(futures):
            index = futures[fut]
            try:
                parts[index] = fut.result()
            except Exception as e:
                log.error("Worker %d failed: %s", index, e)
                executor.shutdown(wait=False, cancel_futures=True)
                raise DispatchError(f"Worker {index} failed: {e}") from e
        # workers exit here, flushing their queued log records
        executor.shutdown(wait=True)
    finally:
        listener.stop()

    return merge_all(parts, strict=config.strict_merge)
