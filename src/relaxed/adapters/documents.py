"""DOM helpers for the master document."""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag


HEADER_SELECTOR = "template.header"
FOOTER_SELECTOR = "template.footer"


@dataclass(frozen=True, slots=True)
class HeaderFooterTemplates:
    """Running header/footer fragments found in a master document."""

    header: str | None = None
    footer: str | None = None

    @property
    def display(self) -> bool:
        """Whether the printer should render running headers and footers at all."""
        return self.header is not None or self.footer is not None


def parse_document(html: str) -> BeautifulSoup:
    """Parse ``html`` and guarantee an ``<html>`` root with ``<head>`` and ``<body>``."""
    soup = BeautifulSoup(html, "lxml")
    root = soup.find("html")
    if not isinstance(root, Tag):
        root = soup.new_tag("html")
        for child in list(soup.contents):
            root.append(child.extract())
        soup.append(root)
    if soup.find("head") is None:
        root.insert(0, soup.new_tag("head"))
    if soup.find("body") is None:
        root.append(soup.new_tag("body"))
    return soup


def normalise_document(html: str) -> tuple[BeautifulSoup, str]:
    """Return the parsed document and its well-formed serialisation."""
    soup = parse_document(html)
    return soup, str(soup)


def _inner_html(soup: BeautifulSoup, selector: str) -> str | None:
    node = soup.select_one(selector)
    if node is None:
        return None
    return node.decode_contents()


def extract_header_footer(soup: BeautifulSoup) -> HeaderFooterTemplates:
    """Return the inner HTML of ``template.header`` and ``template.footer``."""
    return HeaderFooterTemplates(
        header=_inner_html(soup, HEADER_SELECTOR),
        footer=_inner_html(soup, FOOTER_SELECTOR),
    )


__all__ = [
    "FOOTER_SELECTOR",
    "HEADER_SELECTOR",
    "HeaderFooterTemplates",
    "extract_header_footer",
    "normalise_document",
    "parse_document",
]
