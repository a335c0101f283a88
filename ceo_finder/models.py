"""
Data models for search outcomes and result buckets.

A query ends in exactly one outcome: ``Found`` with up to three snippets,
``NotFound``, or ``Failed`` with the error and the URL that was tried.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple, Union

MAX_SNIPPETS = 3
NO_RESULTS_MESSAGE = "No results found."


@dataclass(frozen=True)
class Snippet:
    """
    One matching search result.

    Attributes:
        sentence: Text of the result block, sentences joined by spaces
        url: First hyperlink of the result block, empty if there was none
    """
    sentence: str
    url: str = ""


@dataclass(frozen=True)
class Found:
    """Query produced at least one matching snippet."""
    snippets: Tuple[Snippet, ...]

    def __post_init__(self):
        object.__setattr__(self, "snippets", tuple(self.snippets)[:MAX_SNIPPETS])


@dataclass(frozen=True)
class NotFound:
    """Query ran but nothing matched."""
    message: str = NO_RESULTS_MESSAGE


@dataclass(frozen=True)
class Failed:
    """
    Query could not be completed.

    Attributes:
        error: Human readable reason (bot check, navigation error, ...)
        url: Search URL that was attempted
    """
    error: str
    url: str = ""


SearchOutcome = Union[Found, NotFound, Failed]


@dataclass(frozen=True)
class ResultBuckets:
    """
    Outcomes of a run, partitioned by variant and keyed by query.

    Instances are treated as values: classification and merging return new
    objects instead of mutating the mappings in place.
    """
    found: Dict[str, Found] = field(default_factory=dict)
    not_found: Dict[str, NotFound] = field(default_factory=dict)
    failed: Dict[str, Failed] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "ResultBuckets":
        return cls()

    def __len__(self) -> int:
        return len(self.found) + len(self.not_found) + len(self.failed)

    def counts(self) -> Dict[str, int]:
        return {
            "found": len(self.found),
            "not_found": len(self.not_found),
            "failed": len(self.failed),
        }
