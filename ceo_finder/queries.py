"""
Search query construction.

Each domain is turned into one query per (title, site filter) pair, where the
titles depend on the domain suffix.
"""
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

from ceo_finder.config import config
from ceo_finder.domain_utils import domain_suffix

TITLES_BY_SUFFIX: Dict[str, Tuple[str, ...]] = {
    "org": ("Executive Director", "President"),
    "edu": ("President",),
    "net": ("General Manager", "Managing Partner"),
    "com": ("CEO", "Founder"),
    "us": ("General Manager",),
    "info": ("Editor in Chief",),
}

DEFAULT_TITLES: Tuple[str, ...] = (
    "CEO", "Co-founder", "Founder", "President", "Chief Executive Officer",
    "Executive Director", "Brooker", "Owner", "General Manager", "Editor in Chief",
    "Chief Editor", "Managing Partner", "Superintendent", "Head of School",
)

# Sites a query can be restricted to; only the ones listed in
# config.site_filters are used.
KNOWN_SITE_FILTERS: Tuple[str, ...] = ("crunchbase.com", "linkedin.com")

# characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def titles_for(domain: str) -> Tuple[str, ...]:
    return TITLES_BY_SUFFIX.get(domain_suffix(domain), DEFAULT_TITLES)


def build_queries(
    domain: str,
    site_filters: Optional[Sequence[str]] = None,
    year: Optional[str] = None,
) -> List[str]:
    """
    Build every search query for a domain.

    Args:
        domain: Bare domain, e.g. ``acme.org``
        site_filters: Sites to restrict to (defaults to ``config.site_filters``)
        year: Year token (defaults to ``config.search_year``)

    Returns:
        ``len(titles) * len(site_filters)`` queries, titles in table order,
        site filters varying fastest.
    """
    if site_filters is None:
        site_filters = config.site_filters
    if year is None:
        year = config.search_year

    queries = []
    for title in titles_for(domain):
        base = f"current {title.lower()} of {domain} {year}"
        for site in site_filters:
            queries.append(f"{base} {site}")
    return queries


def search_url(query: str, engine_url: Optional[str] = None) -> str:
    """Return the results-page URL for a query."""
    if engine_url is None:
        engine_url = config.search_engine_url
    return engine_url + quote(query, safe=_URI_COMPONENT_SAFE)
