"""
Tests for the report writer.
"""

import os
import tempfile
import unittest

import pandas as pd

from ceo_finder.classifier import classify
from ceo_finder.models import Failed, Found, NotFound, Snippet
from ceo_finder.report import (
    FAILED_FILE, FOUND_FILE, NOT_FOUND_FILE, format_results, write_reports, write_summary,
)


def _buckets():
    return classify([
        ("q-found", Found((Snippet("Jane is the current CEO", "https://l/jane"),
                           Snippet("Jane Doe leads Acme", "")))),
        ("q-none", NotFound()),
        ("q-fail", Failed("CAPTCHA or bot check detected for query: q-fail", "https://s/q-fail")),
    ])


class TestFormatResults(unittest.TestCase):
    """Tests for format_results."""

    def test_failed_block(self):
        text = format_results({"q": Failed("boom", "https://s/q")})
        self.assertIn("Query:", text)
        self.assertIn("Error:", text)
        self.assertIn("Search URL:", text)
        self.assertEqual(text, "Query: q\nError: boom\nSearch URL: https://s/q\n")

    def test_not_found_block(self):
        self.assertEqual(format_results({"q": NotFound()}), "Query: q\nNo results found.\n")

    def test_found_block(self):
        text = format_results({"q": Found((Snippet("s1", "u1"), Snippet("s2", "u2")))})
        self.assertEqual(text, "Query: q\nTop 3 Results:\ns1\nURL: u1\ns2\nURL: u2\n")

    def test_blocks_separated_by_blank_line(self):
        text = format_results({"a": NotFound(), "b": NotFound()})
        self.assertEqual(text, "Query: a\nNo results found.\n\n\nQuery: b\nNo results found.\n")

    def test_empty_bucket(self):
        self.assertEqual(format_results({}), "")


class TestWriteReports(unittest.TestCase):
    """Tests for write_reports and write_summary."""

    def test_three_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            written = write_reports(_buckets(), tmp)
            self.assertEqual(
                sorted(os.path.basename(str(p)) for p in written.values()),
                sorted([FOUND_FILE, NOT_FOUND_FILE, FAILED_FILE]),
            )
            with open(os.path.join(tmp, FAILED_FILE), encoding="utf-8") as fh:
                self.assertIn("Search URL: https://s/q-fail", fh.read())
            with open(os.path.join(tmp, FOUND_FILE), encoding="utf-8") as fh:
                self.assertIn("URL: https://l/jane", fh.read())

    def test_overwrites_previous_run(self):
        with tempfile.TemporaryDirectory() as tmp:
            with open(os.path.join(tmp, NOT_FOUND_FILE), "w", encoding="utf-8") as fh:
                fh.write("stale")
            write_reports(classify([]), tmp)
            with open(os.path.join(tmp, NOT_FOUND_FILE), encoding="utf-8") as fh:
                self.assertEqual(fh.read(), "")

    def test_summary_csv(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "summary.csv")
            write_summary(_buckets(), path)
            df = pd.read_csv(path)
            self.assertEqual(len(df), 4)
            self.assertEqual(list(df["Bucket"]), ["found", "found", "not_found", "failed"])

    def test_summary_bad_extension(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValueError):
                write_summary(_buckets(), os.path.join(tmp, "summary.json"))

    def test_summary_legacy_excel_rejected(self):
        """pandas has no writer for the old .xls format."""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "summary.xls")
            with self.assertRaises(ValueError):
                write_summary(_buckets(), path)
            self.assertFalse(os.path.exists(path))

    def test_summary_rank_stays_integer(self):
        """Rows without a rank leave the cell blank instead of turning ranks into floats."""
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "summary.csv")
            write_summary(_buckets(), path)
            with open(path, encoding="utf-8") as fh:
                lines = fh.read().splitlines()
            self.assertTrue(lines[1].startswith("found,q-found,1,"))
            self.assertTrue(lines[2].startswith("found,q-found,2,"))
            self.assertTrue(lines[3].startswith("not_found,q-none,,"))


if __name__ == "__main__":
    unittest.main()
