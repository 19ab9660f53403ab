"""Primitives used by converter strategies."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from relaxed.core.config import RenderSettings
from relaxed.core.diagnostics import DiagnosticEmitter, ensure_emitter
from relaxed.core.exceptions import ReadinessTimeoutError
from relaxed.core.paths import SourceKind, derive_output_path
from relaxed.core.session import PageSession
from relaxed.core.templates import TemplateRenderer

from .utils import write_artifact


class ConverterStrategy(Protocol):
    """Protocol implemented by concrete converter strategies."""

    def __call__(
        self, source: Path | str, *, page: PageSession | None = None, **options: Any
    ) -> Path | None: ...


@lru_cache(maxsize=8)
def template_renderer(template_dir: Path) -> TemplateRenderer:
    """Return a renderer for ``template_dir``, shared between strategies."""
    return TemplateRenderer(template_dir)


def wait_for_selector(page: PageSession, selector: str, *, timeout: float) -> None:
    """Block until ``selector`` matches, raising ``ReadinessTimeoutError`` on expiry."""
    try:
        page.wait_for_selector(selector, timeout=timeout)
    except PlaywrightTimeoutError as exc:
        raise ReadinessTimeoutError(
            f"Selector '{selector}' did not appear within {timeout:g} ms"
        ) from exc


def wait_for_function(page: PageSession, expression: str, *, timeout: float) -> None:
    """Block until ``expression`` is truthy in the page."""
    try:
        page.wait_for_function(expression, timeout=timeout)
    except PlaywrightTimeoutError as exc:
        raise ReadinessTimeoutError(
            f"Page signal '{expression}' was not set within {timeout:g} ms"
        ) from exc


class StrategySupport:
    """Settings and diagnostics plumbing shared by every strategy."""

    namespace: str = ""

    def __init__(self, settings: RenderSettings | None = None) -> None:
        self.settings = settings or RenderSettings()

    def resolve_settings(self, options: dict[str, Any]) -> RenderSettings:
        settings = options.get("settings")
        return settings if isinstance(settings, RenderSettings) else self.settings

    def renderer(self, settings: RenderSettings) -> TemplateRenderer:
        return template_renderer(Path(settings.template_dir).resolve())

    def emitter(self, options: dict[str, Any]) -> DiagnosticEmitter:
        return ensure_emitter(options.get("emitter"))

    def report_written(self, emitter: DiagnosticEmitter, source: Path, target: Path) -> None:
        emitter.event(
            "artifact_written",
            {"source": str(source), "target": str(target), "kind": self.namespace},
        )


class PageConversionStrategy(StrategySupport):
    """Base class for converters that render a source inside a browser page.

    The sequence is fixed: read the source, render the template, replace the
    page content, wait for readiness, extract the artefact, then write it next
    to the source. Nothing is written when any step fails.
    """

    kind: SourceKind
    template_name: str = ""

    def __call__(
        self, source: Path | str, *, page: PageSession | None = None, **options: Any
    ) -> Path:
        if page is None:
            raise TypeError(f"The '{self.namespace}' converter requires a page session.")
        source = Path(source)
        settings = self.resolve_settings(options)
        emitter = self.emitter(options)

        spec = source.read_text(encoding="utf-8")
        html = self.render_page(source, spec, settings=settings, options=options)
        page.set_content(html, timeout=settings.navigation_timeout)
        artifact = self.extract(page, settings=settings)

        target = self.output_path(source)
        write_artifact(target, artifact)
        self.report_written(emitter, source, target)
        return target

    # --------------------------------------------------------------------- hooks

    def template_data(
        self, source: Path, spec: str, options: dict[str, Any]
    ) -> dict[str, Any]:
        """Sub-classes return the data record handed to their template."""
        raise NotImplementedError

    def render_page(
        self,
        source: Path,
        spec: str,
        *,
        settings: RenderSettings,
        options: dict[str, Any],
    ) -> str:
        data = self.template_data(source, spec, options)
        return self.renderer(settings).render(self.template_name, data)

    def extract(self, page: PageSession, *, settings: RenderSettings) -> str | bytes:
        """Sub-classes must wait for readiness and return the artefact."""
        raise NotImplementedError

    def output_path(self, source: Path) -> Path:
        return derive_output_path(source, self.kind)


__all__ = [
    "ConverterStrategy",
    "PageConversionStrategy",
    "StrategySupport",
    "template_renderer",
    "wait_for_function",
    "wait_for_selector",
]
