"""Server-side expansion of TeX-delimited notation into MathML."""

from __future__ import annotations

import logging
import re
from typing import Protocol

from bs4 import BeautifulSoup, NavigableString, PageElement
from latex2mathml.converter import convert as latex_to_mathml

from ..core.exceptions import UpstreamError


logger = logging.getLogger(__name__)

SKIPPED_PARENTS = frozenset({"script", "style", "code", "pre", "textarea", "template", "math"})

MATH_STYLE_ID = "relaxed-math"
MATH_CSS = """\
math { font-family: "Latin Modern Math", "STIX Two Math", "Cambria Math", serif; }
math[display="block"] { display: block; margin: 1em 0; text-align: center; }
"""

_DELIMITED = (
    r"(?<!\\)\$\$(?P<dollars>.+?)(?<!\\)\$\$"
    r"|\\\[(?P<brackets>.+?)\\\]"
    r"|\\\((?P<parens>.+?)\\\)"
)
_SINGLE_DOLLAR = r"|(?<![\\$])\$(?P<dollar>[^$\n]+?)(?<!\\)\$"

_MATH_PATTERN = re.compile(_DELIMITED, re.DOTALL)
_MATH_PATTERN_WITH_DOLLARS = re.compile(_DELIMITED + _SINGLE_DOLLAR, re.DOTALL)
_DISPLAY_GROUPS = frozenset({"dollars", "brackets"})
_DELIMITER_HINTS = ("$", "\\(", "\\[")
_ESCAPED_DOLLAR = "\\$"


class MathTypesetter(Protocol):
    """Expand the mathematics embedded in an HTML document."""

    def typeset(self, html: str) -> str: ...


class Latex2MathMLTypesetter:
    """Replace TeX-delimited expressions in text nodes with MathML elements.

    Display notation uses ``$$...$$`` or ``\\[...\\]`` and inline notation
    ``\\(...\\)``. Single ``$...$`` pairs are left alone unless
    ``inline_dollars`` is set, so prose mentioning prices survives. A literal
    dollar sign may always be written ``\\$``. Text inside ``script``,
    ``style``, ``code``, ``pre``, ``textarea``, ``template`` and existing
    ``math`` elements is left untouched. A single stylesheet is injected when
    at least one expression was converted.
    """

    input_format = "TeX"

    def __init__(self, *, inline_dollars: bool = False) -> None:
        self.inline_dollars = inline_dollars
        self._pattern = _MATH_PATTERN_WITH_DOLLARS if inline_dollars else _MATH_PATTERN

    def typeset(self, html: str) -> str:
        if not any(hint in html for hint in _DELIMITER_HINTS):
            return html

        soup = BeautifulSoup(html, "html.parser")
        converted = 0
        unescaped = 0
        for node in list(soup.find_all(string=True)):
            if type(node) is not NavigableString:
                continue
            if any(parent.name in SKIPPED_PARENTS for parent in node.parents):
                continue
            text = str(node)
            replacement, count = self._expand(text)
            if count:
                node.replace_with(*replacement)
                converted += count
            elif _ESCAPED_DOLLAR in text:
                node.replace_with(_unescape(text))
                unescaped += 1

        if not converted and not unescaped:
            return html

        if converted:
            logger.debug("Typeset %d TeX expression(s)", converted)
            self._inject_stylesheet(soup)
        return str(soup)

    def _expand(self, text: str) -> tuple[list[PageElement | str], int]:
        pieces: list[PageElement | str] = []
        position = 0
        count = 0
        for match in self._pattern.finditer(text):
            if match.start() > position:
                pieces.append(_unescape(text[position : match.start()]))
            group = match.lastgroup or "parens"
            expression = match.group(group).strip()
            display = "block" if group in _DISPLAY_GROUPS else "inline"
            pieces.extend(self._render(expression, display))
            position = match.end()
            count += 1
        if count and position < len(text):
            pieces.append(_unescape(text[position:]))
        return pieces, count

    def _render(self, expression: str, display: str) -> list[PageElement]:
        try:
            mathml = latex_to_mathml(expression, display=display)
        except Exception as exc:
            raise UpstreamError(f"Failed to typeset TeX expression '{expression}': {exc}") from exc
        fragment = BeautifulSoup(mathml, "html.parser")
        return [child.extract() for child in list(fragment.contents)]

    def _inject_stylesheet(self, soup: BeautifulSoup) -> None:
        if soup.find("style", id=MATH_STYLE_ID) is not None:
            return
        style = soup.new_tag("style", id=MATH_STYLE_ID)
        style.string = MATH_CSS
        head = soup.find("head")
        if head is not None:
            head.append(style)
        else:
            soup.insert(0, style)


def _unescape(text: str) -> str:
    return text.replace(_ESCAPED_DOLLAR, "$")


__all__ = ["MATH_CSS", "SKIPPED_PARENTS", "Latex2MathMLTypesetter", "MathTypesetter"]
