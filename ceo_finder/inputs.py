"""
Loading of the input email list.

Plain text files hold one address per line (CRLF in the usual export).
Spreadsheets (.csv, .xlsx, .xls) need an ``Email`` column.
"""
import logging
import os
from typing import List

import pandas as pd

from ceo_finder.domain_utils import extract_domains

log = logging.getLogger(__name__)

EMAIL_COLUMN = "Email"
SPREADSHEET_EXTENSIONS = (".csv", ".xlsx", ".xls")


class InputError(Exception):
    """Exception raised when the input file cannot be used."""
    pass


def read_lines(file_path: str) -> List[str]:
    """
    Read raw input lines from a text file or spreadsheet.

    Raises:
        InputError: If the file is missing, unreadable, or lacks the Email column
    """
    if not os.path.isfile(file_path):
        raise InputError(f"Input file not found: {file_path}")

    lower = file_path.lower()
    try:
        if lower.endswith(SPREADSHEET_EXTENSIONS):
            df = pd.read_csv(file_path) if lower.endswith(".csv") else pd.read_excel(file_path)
            if EMAIL_COLUMN not in df.columns:
                raise InputError(f"Input file must have '{EMAIL_COLUMN}' column: {file_path}")
            return [e for e in df[EMAIL_COLUMN].dropna().astype(str)]

        with open(file_path, encoding="utf-8", newline="") as fh:
            return fh.read().splitlines()
    except InputError:
        raise
    except Exception as e:
        raise InputError(f"Error reading input file: {e}") from e


def load_domains(file_path: str) -> List[str]:
    domains = extract_domains(read_lines(file_path))
    log.info("Loaded %d domains from %s", len(domains), file_path)
    return domains
