"""
Report writing: one plain-text file per result bucket, plus an optional
flat spreadsheet summary.
"""
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Union

import pandas as pd

from ceo_finder.models import Failed, Found, NotFound, ResultBuckets, SearchOutcome

log = logging.getLogger(__name__)

FOUND_FILE = "found_results.txt"
NOT_FOUND_FILE = "not_found_results.txt"
FAILED_FILE = "failed_searches.txt"

SUMMARY_COLUMNS = ["Bucket", "Query", "Rank", "Sentence", "URL", "Error"]


def format_entry(query: str, outcome: SearchOutcome) -> str:
    if isinstance(outcome, Failed):
        return f"Query: {query}\nError: {outcome.error}\nSearch URL: {outcome.url}\n"
    if isinstance(outcome, NotFound):
        return f"Query: {query}\n{outcome.message}\n"
    lines = "\n".join(f"{s.sentence}\nURL: {s.url}" for s in outcome.snippets)
    return f"Query: {query}\nTop 3 Results:\n{lines}\n"


def format_results(bucket: Mapping[str, SearchOutcome]) -> str:
    """Render a bucket as text blocks separated by a blank line."""
    return "\n\n".join(format_entry(q, o) for q, o in bucket.items())


def write_reports(buckets: ResultBuckets, output_dir: Union[str, Path] = ".") -> Dict[str, Path]:
    """
    Write the three bucket files, overwriting previous runs.

    Returns:
        Mapping of bucket name to the written path
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    targets = {
        "found": (out / FOUND_FILE, buckets.found),
        "not_found": (out / NOT_FOUND_FILE, buckets.not_found),
        "failed": (out / FAILED_FILE, buckets.failed),
    }
    written = {}
    for name, (path, bucket) in targets.items():
        path.write_text(format_results(bucket), encoding="utf-8")
        log.debug("Wrote %d %s entries -> %s", len(bucket), name, path)
        written[name] = path
    return written


def summary_rows(buckets: ResultBuckets) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for query, outcome in buckets.found.items():
        for rank, snippet in enumerate(outcome.snippets, start=1):
            rows.append({"Bucket": "found", "Query": query, "Rank": rank,
                         "Sentence": snippet.sentence, "URL": snippet.url, "Error": ""})
    for query, outcome in buckets.not_found.items():
        rows.append({"Bucket": "not_found", "Query": query, "Rank": "",
                     "Sentence": "", "URL": "", "Error": ""})
    for query, outcome in buckets.failed.items():
        rows.append({"Bucket": "failed", "Query": query, "Rank": "",
                     "Sentence": "", "URL": outcome.url, "Error": outcome.error})
    return rows


def write_summary(buckets: ResultBuckets, path: Union[str, Path]) -> Path:
    """
    Write every outcome as one table (.csv or .xlsx via pandas).

    Raises:
        ValueError: If the file extension is not supported
    """
    path = Path(path)
    df = pd.DataFrame(summary_rows(buckets), columns=SUMMARY_COLUMNS)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df.to_csv(path, index=False)
    elif suffix == ".xlsx":
        df.to_excel(path, index=False)
    else:
        raise ValueError(f"Summary file must be .csv or .xlsx: {path}")
    log.info("Saved %d summary rows -> %s", len(df), path)
    return path
