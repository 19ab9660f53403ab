"""Delimited-text parsing and table fragment serialisation."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from pathlib import Path

from bs4 import BeautifulSoup

from ..core.exceptions import TableParseError


Record = list[str]

_JINJA_DELIMITERS = {
    "{{": "&#123;&#123;",
    "{%": "&#123;%",
    "{#": "&#123;#",
}


@dataclass(slots=True)
class ParsedTable:
    """Outcome of reading a table source: every record, or the parse error."""

    rows: list[Record] = field(default_factory=list)
    error: TableParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def read_records(path: Path | str, *, delimiter: str = ",") -> ParsedTable:
    """Collect all records of a delimited file without inferring a header.

    Parse failures are reported through ``ParsedTable.error`` once every
    readable record has been consumed; a missing or unreadable file raises
    ``OSError``.
    """
    rows: list[Record] = []
    with Path(path).open(encoding="utf-8", newline="") as handle:
        reader = csv.reader(handle, delimiter=delimiter, strict=True)
        try:
            for record in reader:
                if record:
                    rows.append(record)
        except (csv.Error, UnicodeDecodeError) as exc:
            line = getattr(reader, "line_num", 0)
            error = TableParseError(f"{path}:{line}: {exc}")
            error.__cause__ = exc
            return ParsedTable(rows=rows, error=error)
    return ParsedTable(rows=rows)


def split_header(rows: list[Record], *, has_header: bool) -> tuple[Record | None, list[Record]]:
    """Return ``(header, body)``; with a header, exactly one record is removed."""
    if not has_header:
        return None, list(rows)
    if not rows:
        return [], []
    return list(rows[0]), [list(row) for row in rows[1:]]


def html_to_fragment(html: str, *, bodyless: bool = True) -> str:
    """Convert an HTML snippet into a fragment the master document can include.

    With ``bodyless`` any ``html``/``head``/``body`` wrappers are dropped. Jinja
    delimiters in the content are turned into character references so an
    ``{% include %}`` renders them literally.
    """
    soup = BeautifulSoup(html, "html.parser")
    if bodyless:
        for node in soup.find_all("head"):
            node.decompose()
        for tag_name in ("html", "body"):
            for node in soup.find_all(tag_name):
                node.unwrap()
    fragment = soup.prettify().strip() + "\n"
    for delimiter, replacement in _JINJA_DELIMITERS.items():
        fragment = fragment.replace(delimiter, replacement)
    return fragment


__all__ = ["ParsedTable", "Record", "html_to_fragment", "read_records", "split_header"]
