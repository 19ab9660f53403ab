from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
import pytest

from relaxed.adapters.transformers.utils import CHART_READY_EXPRESSION
from relaxed.core.config import RenderSettings


class StubPage:
    """In-memory stand-in for a Playwright page.

    ``dom`` is the markup the client-side library would have drawn once the
    content is set; ``page_globals`` holds values exposed on ``window``.
    """

    def __init__(
        self,
        *,
        dom: str = "",
        page_globals: Mapping[str, Any] | None = None,
        pdf_error: Exception | None = None,
        goto_error: Exception | None = None,
    ) -> None:
        self.dom = dom
        self.page_globals = dict(page_globals or {})
        self.pdf_error = pdf_error
        self.goto_error = goto_error
        self.content: str | None = None
        self.calls: list[tuple[str, Any]] = []
        self.goto_calls: list[tuple[str, dict[str, Any]]] = []
        self.pdf_options: dict[str, Any] | None = None

    def set_content(self, html: str, **kwargs: Any) -> None:
        self.calls.append(("set_content", kwargs))
        self.content = html

    def goto(self, url: str, **kwargs: Any) -> None:
        self.calls.append(("goto", url))
        self.goto_calls.append((url, kwargs))
        if self.goto_error is not None:
            raise self.goto_error

    def wait_for_selector(self, selector: str, **kwargs: Any) -> None:
        self.calls.append(("wait_for_selector", selector))
        if BeautifulSoup(self.dom, "html.parser").select_one(selector) is None:
            raise PlaywrightTimeoutError(f"Timeout {kwargs.get('timeout')}ms exceeded.")

    def wait_for_function(self, expression: str, **kwargs: Any) -> None:
        self.calls.append(("wait_for_function", expression))
        if not self.page_globals.get("pngData"):
            raise PlaywrightTimeoutError(f"Timeout {kwargs.get('timeout')}ms exceeded.")

    def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.calls.append(("evaluate", arg))
        if expression == CHART_READY_EXPRESSION:
            return self.page_globals.get("pngData")
        soup = BeautifulSoup(self.dom, "html.parser")
        element = soup.select_one(arg["selector"])
        if element is None:
            return None
        for name in arg["strip"]:
            element.attrs.pop(name, None)
        if arg["className"]:
            element["class"] = [*element.get("class", []), arg["className"]]
        return str(element)

    def pdf(self, **kwargs: Any) -> bytes:
        self.calls.append(("pdf", kwargs))
        self.pdf_options = kwargs
        if self.pdf_error is not None:
            raise self.pdf_error
        Path(kwargs["path"]).write_bytes(b"%PDF-1.4\n%stub\n")
        return b""


class RecordingEmitter:
    debug_enabled = False

    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


@pytest.fixture
def emitter() -> RecordingEmitter:
    return RecordingEmitter()


@pytest.fixture
def settings() -> RenderSettings:
    return RenderSettings(readiness_timeout=50, navigation_timeout=50)


@pytest.fixture
def make_page() -> type[StubPage]:
    return StubPage
