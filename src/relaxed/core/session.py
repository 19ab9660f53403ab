"""Browser sessions handed to converters.

A converter borrows a page for the duration of one conversion and replaces
its whole document, so a page must never serve two conversions at once.
`BrowserSession` owns exactly one Playwright instance, one browser and one
page; callers that need parallelism open one session per worker.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from types import TracebackType
from typing import Any, Protocol, runtime_checkable

from .exceptions import RenderingError


logger = logging.getLogger(__name__)

_PLAYWRIGHT_APT_PACKAGES: tuple[str, ...] = (
    "libglib2.0-0",
    "libnspr4",
    "libnss3",
    "libatk1.0-0",
    "libatk-bridge2.0-0",
    "libcups2",
    "libxkbcommon0",
    "libgbm1",
    "libpango-1.0-0",
    "libasound2",
)


@runtime_checkable
class PageSession(Protocol):
    """Subset of the Playwright ``Page`` API the converters rely on."""

    def set_content(self, html: str, **kwargs: Any) -> None: ...

    def goto(self, url: str, **kwargs: Any) -> Any: ...

    def wait_for_selector(self, selector: str, **kwargs: Any) -> Any: ...

    def wait_for_function(self, expression: str, **kwargs: Any) -> Any: ...

    def evaluate(self, expression: str, arg: Any = None) -> Any: ...

    def pdf(self, **kwargs: Any) -> bytes: ...


def _playwright_dependency_hint() -> str:
    packages = " ".join(_PLAYWRIGHT_APT_PACKAGES)
    return (
        "Install Playwright browser dependencies with `playwright install-deps` "
        f"(Debian/Ubuntu: `sudo apt-get install {packages}`)."
    )


def wrap_playwright_error(exc: Exception) -> RenderingError:
    """Return a rendering error with guidance for missing browser dependencies."""
    base_message = str(exc).strip() or exc.__class__.__name__
    message = f"Playwright backend failed: {base_message}. {_playwright_dependency_hint()}"
    return RenderingError(message)


class BrowserSession:
    """Context manager yielding a dedicated headless Chromium page."""

    def __init__(
        self,
        *,
        viewport: dict[str, int] | None = None,
        install_missing_browser: bool = True,
    ) -> None:
        self.viewport = viewport or {"width": 1600, "height": 1200}
        self.install_missing_browser = install_missing_browser
        self._playwright: Any = None
        self._browser: Any = None
        self._page: Any = None

    @property
    def page(self) -> PageSession:
        if self._page is None:
            raise RenderingError("Browser session is not open.")
        return self._page

    def open(self) -> PageSession:
        """Start Playwright, launch Chromium and return the session page."""
        if self._page is not None:
            return self._page

        from playwright.sync_api import Error as PlaywrightError, sync_playwright

        # Silence Node.js deprecation spew emitted by the Playwright driver.
        existing_node_opts = os.environ.get("NODE_OPTIONS", "")
        if "--no-deprecation" not in existing_node_opts:
            os.environ["NODE_OPTIONS"] = (existing_node_opts + " --no-deprecation").strip()

        try:
            self._playwright = sync_playwright().start()
        except PlaywrightError as exc:
            raise wrap_playwright_error(exc) from exc

        try:
            self._browser = self._launch()
        except PlaywrightError as exc:
            self.close()
            raise wrap_playwright_error(exc) from exc

        self._page = self._browser.new_page(viewport=self.viewport)
        logger.debug("Opened browser session with viewport %s", self.viewport)
        return self._page

    def _launch(self) -> Any:
        from playwright.sync_api import Error as PlaywrightError

        try:
            return self._playwright.chromium.launch(headless=True)
        except PlaywrightError as exc:
            msg = str(exc)
            missing = "Executable doesn't exist" in msg or "Failed to launch" in msg
            if not (missing and self.install_missing_browser):
                raise
            logger.info("Chromium is not installed, running `playwright install chromium`.")
            subprocess.run(
                [sys.executable, "-m", "playwright", "install", "chromium"],
                env=os.environ,
                check=True,
            )
            return self._playwright.chromium.launch(headless=True)

    def close(self) -> None:
        """Release the page, the browser and the Playwright driver."""
        from playwright.sync_api import Error as PlaywrightError

        try:
            if self._browser is not None:
                self._browser.close()
        except PlaywrightError:
            logger.debug("Browser was already closed.", exc_info=True)
        finally:
            if self._playwright is not None:
                self._playwright.stop()
            self._page = None
            self._browser = None
            self._playwright = None

    def __enter__(self) -> PageSession:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["BrowserSession", "PageSession", "wrap_playwright_error"]
