"""Page geometry declared by master documents through CSS custom properties.

Documents choose their PDF page size with declarations such as::

    :root { -relaxed-page-width: 210mm; -relaxed-page-height: 297mm; }
    :root { -relaxed-page-size: A4; }

The values are read from the serialised document text, not from computed
styles, and are handed to the PDF printer unvalidated.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, Protocol


PROPERTY_PREFIX = "-relaxed-page-"


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Optional overrides for the printed page size."""

    width: str | None = None
    height: str | None = None
    paper_size: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.width is None and self.height is None and self.paper_size is None

    def as_pdf_options(self) -> dict[str, Any]:
        """Return the Playwright ``page.pdf`` keywords for the declared values."""
        options: dict[str, Any] = {}
        if self.width is not None:
            options["width"] = self.width
        if self.height is not None:
            options["height"] = self.height
        if self.paper_size is not None:
            options["format"] = self.paper_size
        return options


class StyleGeometrySource(Protocol):
    """Anything able to recover page geometry from a rendered document."""

    def extract(self, html: str) -> PageGeometry: ...


def _property_pattern(prefix: str, name: str) -> re.Pattern[str]:
    return re.compile(rf"{re.escape(prefix + name)}: (\S+);", re.MULTILINE)


def _last_match(pattern: re.Pattern[str], text: str) -> str | None:
    matches = pattern.findall(text)
    return matches[-1] if matches else None


class RegexGeometrySource:
    """Match ``<prefix>width|height|size: <value>;`` in the document text."""

    def __init__(self, prefix: str = PROPERTY_PREFIX) -> None:
        self.prefix = prefix
        self._width = _property_pattern(prefix, "width")
        self._height = _property_pattern(prefix, "height")
        self._size = _property_pattern(prefix, "size")

    def extract(self, html: str) -> PageGeometry:
        return PageGeometry(
            width=_last_match(self._width, html),
            height=_last_match(self._height, html),
            paper_size=_last_match(self._size, html),
        )


def extract_page_geometry(html: str) -> PageGeometry:
    """Return the geometry declared in ``html`` using the default property names."""
    return RegexGeometrySource().extract(html)


__all__ = [
    "PROPERTY_PREFIX",
    "PageGeometry",
    "RegexGeometrySource",
    "StyleGeometrySource",
    "extract_page_geometry",
]
