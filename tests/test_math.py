from __future__ import annotations

from bs4 import BeautifulSoup
import pytest

from relaxed.adapters import math as math_module
from relaxed.adapters.math import MATH_STYLE_ID, Latex2MathMLTypesetter
from relaxed.core.exceptions import UpstreamError


@pytest.fixture
def typesetter() -> Latex2MathMLTypesetter:
    return Latex2MathMLTypesetter()


def test_documents_without_math_are_unchanged(typesetter: Latex2MathMLTypesetter) -> None:
    html = "<html><head></head><body><p>No maths here.</p></body></html>"

    assert typesetter.typeset(html) == html


def test_inline_math(typesetter: Latex2MathMLTypesetter) -> None:
    soup = BeautifulSoup(typesetter.typeset("<p>Let \\(x^2\\) be positive.</p>"), "html.parser")

    math = soup.find("math")
    assert math is not None
    assert math.get("display") == "inline"
    assert soup.p.get_text().startswith("Let ")
    assert soup.p.get_text().endswith(" be positive.")


def test_prose_dollars_are_not_math(typesetter: Latex2MathMLTypesetter) -> None:
    html = "<p>Tickets cost $5 and parking $10.</p>"

    result = typesetter.typeset(html)

    assert result == html
    assert "<math" not in result
    assert MATH_STYLE_ID not in result


def test_single_dollars_can_be_enabled() -> None:
    typesetter = Latex2MathMLTypesetter(inline_dollars=True)

    soup = BeautifulSoup(typesetter.typeset("<p>Let $x$ be real.</p>"), "html.parser")

    assert soup.find("math").get("display") == "inline"


@pytest.mark.parametrize("source", ["$$a+b$$", "\\[a+b\\]"])
def test_display_math(typesetter: Latex2MathMLTypesetter, source: str) -> None:
    soup = BeautifulSoup(typesetter.typeset(f"<div>{source}</div>"), "html.parser")

    assert soup.find("math").get("display") == "block"


def test_code_and_scripts_are_skipped(typesetter: Latex2MathMLTypesetter) -> None:
    html = "<pre>\\(x\\)</pre><code>$$y$$</code><script>var a = '\\\\(z\\\\)';</script>"

    assert typesetter.typeset(html) == html


def test_escaped_dollar_next_to_math(typesetter: Latex2MathMLTypesetter) -> None:
    html = typesetter.typeset("<p>Price \\$5 and \\(n\\) items</p>")

    soup = BeautifulSoup(html, "html.parser")
    assert "Price $5 and " in soup.p.get_text()
    assert len(soup.find_all("math")) == 1


def test_escaped_dollar_without_math(typesetter: Latex2MathMLTypesetter) -> None:
    html = typesetter.typeset("<p>Only \\$5 here</p><p>and \\$6 there</p>")

    assert html == "<p>Only $5 here</p><p>and $6 there</p>"
    assert MATH_STYLE_ID not in html


def test_escaped_dollar_kept_inside_code(typesetter: Latex2MathMLTypesetter) -> None:
    html = "<code>echo \\$HOME</code>"

    assert typesetter.typeset(html) == html


def test_stylesheet_injected_once_into_head(typesetter: Latex2MathMLTypesetter) -> None:
    html = typesetter.typeset(
        "<html><head></head><body><p>\\(a\\) and \\(b\\)</p></body></html>"
    )

    soup = BeautifulSoup(html, "html.parser")
    styles = soup.find_all("style", id=MATH_STYLE_ID)
    assert len(styles) == 1
    assert styles[0].parent.name == "head"
    assert len(soup.find_all("math")) == 2


def test_converter_failure_is_upstream_error(
    typesetter: Latex2MathMLTypesetter, monkeypatch: pytest.MonkeyPatch
) -> None:
    def explode(expression: str, display: str = "inline") -> str:
        raise ValueError("unsupported command")

    monkeypatch.setattr(math_module, "latex_to_mathml", explode)

    with pytest.raises(UpstreamError, match="unsupported command"):
        typesetter.typeset("<p>\\(\\foo\\)</p>")
