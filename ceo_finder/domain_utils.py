"""
Domain helpers: email lines to domains, and the suffix used for title lookup.
"""
from typing import Iterable, List, Optional, Union


def domain_from_email(line: str) -> str:
    # a line without '@' is taken as the domain itself
    return line.rsplit("@", 1)[-1]


def extract_domains(lines: Union[str, Iterable[str]]) -> List[str]:
    """
    Turn raw input lines of the form ``local@domain`` into bare domains.

    Accepts either the whole file content or an iterable of lines. Empty
    lines are skipped; order and duplicates are kept. Malformed lines are
    never rejected.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    domains: List[str] = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        domains.append(domain_from_email(line))
    return domains


def domain_suffix(domain: str) -> Optional[str]:
    """
    Return the label right after the first dot.

    For ``acme.org`` this is ``org``, but for ``mail.example.org`` it is
    ``example``: the second label, not the real TLD. Callers rely on this
    exact behaviour for the title lookup.
    """
    labels = domain.split(".")
    if len(labels) < 2:
        return None
    return labels[1]
