"""
Routing of search outcomes into result buckets, and merging of buckets.

Merging is last-write-wins per query key. The same query string produced
twice (by two workers, or for two duplicate input domains) keeps the later
outcome; ``strict=True`` turns a conflicting overwrite into an error instead.
"""

import logging
from functools import reduce
from typing import Dict, Iterable, Tuple

from ceo_finder.models import Failed, Found, NotFound, ResultBuckets, SearchOutcome

# Initialize logger
log = logging.getLogger(__name__)


class MergeConflictError(Exception):
    """Raised by a strict merge when one query key maps to two different outcomes."""
    pass


def classify(pairs: Iterable[Tuple[str, SearchOutcome]]) -> ResultBuckets:
    """
    Partition (query, outcome) pairs by outcome variant.

    Args:
        pairs: Queries with the outcome the search executor returned

    Returns:
        New ResultBuckets holding every pair in exactly one bucket

    Raises:
        TypeError: If an outcome is not one of the known variants
    """
    found: Dict[str, Found] = {}
    not_found: Dict[str, NotFound] = {}
    failed: Dict[str, Failed] = {}

    for query, outcome in pairs:
        if isinstance(outcome, Failed):
            failed[query] = outcome
        elif isinstance(outcome, Found):
            found[query] = outcome
        elif isinstance(outcome, NotFound):
            not_found[query] = outcome
        else:
            raise TypeError(f"Unknown search outcome for {query!r}: {outcome!r}")

    return ResultBuckets(found=found, not_found=not_found, failed=failed)


def _merge_mapping(name: str, left: Dict, right: Dict, strict: bool) -> Dict:
    for key in left.keys() & right.keys():
        if left[key] != right[key]:
            if strict:
                raise MergeConflictError(f"Conflicting {name} entries for query: {key}")
            log.warning("Overwriting %s entry for query: %s", name, key)
    return {**left, **right}


def merge(left: ResultBuckets, right: ResultBuckets, strict: bool = False) -> ResultBuckets:
    """
    Merge two bucket sets into a new one, ``right`` winning on shared keys.

    Raises:
        MergeConflictError: If ``strict`` and a shared key has different values
    """
    return ResultBuckets(
        found=_merge_mapping("found", left.found, right.found, strict),
        not_found=_merge_mapping("not_found", left.not_found, right.not_found, strict),
        failed=_merge_mapping("failed", left.failed, right.failed, strict),
    )


def merge_all(parts: Iterable[ResultBuckets], strict: bool = False) -> ResultBuckets:
    """Fold bucket sets in order, starting from an empty one."""
    return reduce(lambda acc, part: merge(acc, part, strict), parts, ResultBuckets.empty())
