"""
Tests for search query construction.
"""

import unittest

from ceo_finder.queries import (
    DEFAULT_TITLES, TITLES_BY_SUFFIX, build_queries, search_url, titles_for,
)

LINKEDIN = ("linkedin.com",)
BOTH_SITES = ("crunchbase.com", "linkedin.com")


class TestBuildQueries(unittest.TestCase):
    """Tests for build_queries."""

    def test_org_domain(self):
        """acme.org uses the org titles, one query per title."""
        queries = build_queries("acme.org", site_filters=LINKEDIN, year="2024")
        self.assertEqual(queries, [
            "current executive director of acme.org 2024 linkedin.com",
            "current president of acme.org 2024 linkedin.com",
        ])

    def test_mapped_suffix_count(self):
        for suffix, titles in TITLES_BY_SUFFIX.items():
            domain = f"example.{suffix}"
            self.assertEqual(
                len(build_queries(domain, site_filters=BOTH_SITES, year="2024")),
                len(titles) * len(BOTH_SITES),
            )

    def test_unmapped_suffix_uses_default_titles(self):
        self.assertEqual(len(DEFAULT_TITLES), 14)
        queries = build_queries("example.xyz", site_filters=LINKEDIN, year="2024")
        self.assertEqual(len(queries), 14)

    def test_multi_label_domain_lookup(self):
        """mail.example.org is looked up as 'example' and falls back to the defaults."""
        self.assertEqual(titles_for("mail.example.org"), DEFAULT_TITLES)

    def test_domain_without_dot(self):
        self.assertEqual(len(build_queries("localhost", site_filters=LINKEDIN, year="2024")), 14)

    def test_every_query_has_domain_and_year(self):
        for domain in ("acme.org", "foo.com", "mail.example.org", "bar.io"):
            for query in build_queries(domain, site_filters=BOTH_SITES, year="2024"):
                self.assertIn(domain, query)
                self.assertIn("2024", query)

    def test_site_filters_vary_fastest(self):
        queries = build_queries("foo.com", site_filters=BOTH_SITES, year="2024")
        self.assertEqual(queries, [
            "current ceo of foo.com 2024 crunchbase.com",
            "current ceo of foo.com 2024 linkedin.com",
            "current founder of foo.com 2024 crunchbase.com",
            "current founder of foo.com 2024 linkedin.com",
        ])

    def test_deterministic(self):
        first = build_queries("foo.edu", site_filters=LINKEDIN, year="2024")
        second = build_queries("foo.edu", site_filters=LINKEDIN, year="2024")
        self.assertEqual(first, second)


class TestSearchUrl(unittest.TestCase):
    """Tests for search_url."""

    def test_query_is_percent_encoded(self):
        url = search_url("current ceo of foo.com 2024 linkedin.com",
                         engine_url="https://www.google.com/search?q=")
        self.assertEqual(
            url,
            "https://www.google.com/search?q=current%20ceo%20of%20foo.com%202024%20linkedin.com",
        )

    def test_reserved_characters(self):
        url = search_url("a&b/c?(d)", engine_url="https://e/?q=")
        self.assertEqual(url, "https://e/?q=a%26b%2Fc%3F(d)")


if __name__ == "__main__":
    unittest.main()
