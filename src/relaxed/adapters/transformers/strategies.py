"""Concrete converter strategies."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from relaxed.adapters.documents import (
    HeaderFooterTemplates,
    extract_header_footer,
    normalise_document,
)
from relaxed.adapters.geometry import PageGeometry, RegexGeometrySource, StyleGeometrySource
from relaxed.adapters.math import Latex2MathMLTypesetter, MathTypesetter
from relaxed.adapters.tables import ParsedTable, html_to_fragment, read_records, split_header
from relaxed.core.config import RenderSettings
from relaxed.core.diagnostics import DiagnosticEmitter
from relaxed.core.exceptions import (
    ArtifactFormatError,
    ReadinessTimeoutError,
    RenderingError,
    TemplateError,
    UnsupportedSourceError,
    UpstreamError,
)
from relaxed.core.paths import (
    SourceKind,
    classify_source,
    debug_html_path,
    derive_output_path,
    is_template_source,
    resolve_flowchart_config,
    table_has_header,
)
from relaxed.core.session import PageSession

from .base import (
    PageConversionStrategy,
    StrategySupport,
    wait_for_function,
    wait_for_selector,
)
from .utils import CHART_READY_EXPRESSION, SVG_EXTRACTION_SCRIPT, parse_data_url, write_artifact


logger = logging.getLogger(__name__)

_TABLE_KINDS = frozenset({SourceKind.TABLE, SourceKind.HTABLE})


@dataclass(frozen=True, slots=True)
class SvgExtraction:
    """Where the drawn SVG lives and how it is cleaned before being saved."""

    selector: str
    strip_attributes: tuple[str, ...] = ("height",)
    class_name: str | None = None

    def script_argument(self) -> dict[str, Any]:
        return {
            "selector": self.selector,
            "strip": list(self.strip_attributes),
            "className": self.class_name,
        }


class SvgConversionStrategy(PageConversionStrategy):
    """Extract the SVG drawn by a client-side library."""

    extraction: SvgExtraction

    def extract(self, page: PageSession, *, settings: RenderSettings) -> str:
        wait_for_selector(page, self.extraction.selector, timeout=settings.readiness_timeout)
        svg = page.evaluate(SVG_EXTRACTION_SCRIPT, self.extraction.script_argument())
        if not isinstance(svg, str) or not svg:
            raise ArtifactFormatError(
                f"No element matched '{self.extraction.selector}' after rendering."
            )
        return svg


class MermaidToSvgStrategy(SvgConversionStrategy):
    """Render Mermaid diagrams to SVG."""

    namespace = "mermaid"
    kind = SourceKind.MERMAID
    template_name = "mermaid"
    extraction = SvgExtraction("#graph svg", ("height",), "mermaid-svg")

    def __init__(
        self, settings: RenderSettings | None = None, *, default_theme: str = "default"
    ) -> None:
        super().__init__(settings)
        self.default_theme = default_theme

    def template_data(self, source: Path, spec: str, options: dict[str, Any]) -> dict[str, Any]:
        return {"mermaid_spec": spec, "theme": options.get("theme") or self.default_theme}


class FlowchartToSvgStrategy(SvgConversionStrategy):
    """Render flowchart.js diagrams to SVG, applying the resolved JSON configuration."""

    namespace = "flowchart"
    kind = SourceKind.FLOWCHART
    template_name = "flowchart"
    extraction = SvgExtraction("#chart svg", ("height", "width"), "flowchart-svg")

    def template_data(self, source: Path, spec: str, options: dict[str, Any]) -> dict[str, Any]:
        return {"flowchart_spec": spec, "flowchart_conf": resolve_flowchart_config(source)}


class VegaliteToSvgStrategy(SvgConversionStrategy):
    """Render Vega-Lite specifications to SVG."""

    namespace = "vegalite"
    kind = SourceKind.VEGALITE
    template_name = "vegalite"
    extraction = SvgExtraction("#vis svg", ("height", "width"))

    def template_data(self, source: Path, spec: str, options: dict[str, Any]) -> dict[str, Any]:
        return {"vegalite_spec": spec}


class ChartjsToPngStrategy(PageConversionStrategy):
    """Render Chart.js scripts to PNG through the canvas data URL."""

    namespace = "chartjs"
    kind = SourceKind.CHARTJS
    template_name = "chartjs"

    def __init__(
        self,
        settings: RenderSettings | None = None,
        *,
        width: int = 800,
        height: int = 600,
    ) -> None:
        super().__init__(settings)
        self.width = width
        self.height = height

    def template_data(self, source: Path, spec: str, options: dict[str, Any]) -> dict[str, Any]:
        return {
            "chart_spec": spec,
            "width": int(options.get("width") or self.width),
            "height": int(options.get("height") or self.height),
        }

    def render_page(
        self,
        source: Path,
        spec: str,
        *,
        settings: RenderSettings,
        options: dict[str, Any],
    ) -> str:
        html = super().render_page(source, spec, settings=settings, options=options)
        if settings.keep_debug_html:
            debug_path = debug_html_path(source)
            debug_path.write_text(html, encoding="utf-8")
            logger.debug("Saved chart page to %s", debug_path)
        return html

    def extract(self, page: PageSession, *, settings: RenderSettings) -> bytes:
        wait_for_function(page, CHART_READY_EXPRESSION, timeout=settings.readiness_timeout)
        data_url = page.evaluate(CHART_READY_EXPRESSION)
        return parse_data_url(data_url).payload


class TableToFragmentStrategy(StrategySupport):
    """Turn ``*.table.csv`` and ``*.htable.csv`` files into includable table fragments.

    Records are collected in full before anything else happens; a parse error
    is reported and no fragment is written.
    """

    namespace = "table"
    template_name = "table"

    def __call__(
        self, source: Path | str, *, page: PageSession | None = None, **options: Any
    ) -> Path | None:
        source = Path(source)
        if classify_source(source) not in _TABLE_KINDS:
            raise UnsupportedSourceError(
                f"'{source.name}' is not a .table.csv or .htable.csv source"
            )
        parsed = read_records(source, delimiter=options.get("delimiter") or ",")
        return self._complete(source, parsed, options)

    def _complete(self, source: Path, parsed: ParsedTable, options: dict[str, Any]) -> Path | None:
        emitter = self.emitter(options)
        if parsed.error is not None:
            emitter.error(f"Failed to parse table '{source}': {parsed.error}", parsed.error)
            _report_aborted(emitter, source, "parse error")
            return None

        has_header = table_has_header(source)
        header, body = split_header(parsed.rows, has_header=has_header)
        settings = self.resolve_settings(options)
        data = {"header": header, "tbody": body}
        html = self.renderer(settings).render(self.template_name, data)
        fragment = html_to_fragment(html, bodyless=True)

        kind = SourceKind.HTABLE if has_header else SourceKind.TABLE
        target = derive_output_path(source, kind)
        write_artifact(target, fragment)
        self.report_written(emitter, source, target)
        return target


def build_pdf_options(
    output_path: Path,
    templates: HeaderFooterTemplates,
    geometry: PageGeometry,
) -> dict[str, Any]:
    """Return the keyword arguments for ``page.pdf`` in the master pipeline."""
    options: dict[str, Any] = {
        "path": str(output_path),
        "display_header_footer": templates.display,
        "print_background": True,
    }
    if templates.header is not None:
        options["header_template"] = templates.header
    if templates.footer is not None:
        options["footer_template"] = templates.footer
    options.update(geometry.as_pdf_options())
    return options


class MasterDocumentToPdfStrategy(StrategySupport):
    """Print a master document (Jinja template or plain HTML) to PDF.

    Stages: template rendering, math expansion, DOM normalisation and
    header/footer discovery, temporary file, file-URL navigation until the
    network is idle, geometry lookup, PDF emission. A template error is
    reported and aborts without output; every other failure propagates.
    """

    namespace = "master"

    def __init__(
        self,
        settings: RenderSettings | None = None,
        *,
        typesetter: MathTypesetter | None = None,
        geometry_source: StyleGeometrySource | None = None,
    ) -> None:
        super().__init__(settings)
        self.typesetter = typesetter or Latex2MathMLTypesetter()
        self.geometry_source = geometry_source or RegexGeometrySource()

    def __call__(
        self,
        source: Path | str,
        *,
        page: PageSession | None = None,
        temp_path: Path | str | None = None,
        output_path: Path | str | None = None,
        **options: Any,
    ) -> Path | None:
        if page is None:
            raise TypeError("The master document converter requires a page session.")
        source = Path(source)
        output_path = Path(output_path) if output_path else source.with_suffix(".pdf")
        temp_path = Path(temp_path) if temp_path else output_path.with_suffix(".htm")
        settings = self.resolve_settings(options)
        emitter = self.emitter(options)

        html = self._load(source, settings=settings, options=options, emitter=emitter)
        if html is None:
            return None

        if settings.typeset_math:
            html = self._typeset(html)

        soup, html = normalise_document(html)
        templates = extract_header_footer(soup)

        temp_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(html, encoding="utf-8")
        self._navigate(page, temp_path, timeout=settings.navigation_timeout)

        geometry = self.geometry_source.extract(html)
        pdf_options = build_pdf_options(output_path, templates, geometry)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            page.pdf(**pdf_options)
        except PlaywrightError as exc:
            raise UpstreamError(f"PDF emission failed for '{source}': {exc}") from exc

        self.report_written(emitter, source, output_path)
        return output_path

    def _load(
        self,
        source: Path,
        *,
        settings: RenderSettings,
        options: dict[str, Any],
        emitter: DiagnosticEmitter,
    ) -> str | None:
        if not is_template_source(source):
            return source.read_text(encoding="utf-8")
        context = options.get("context")
        data = dict(context) if isinstance(context, Mapping) else None
        try:
            return self.renderer(settings).render_file(source, data)
        except TemplateError as exc:
            emitter.error(f"There was a template error in '{source}': {exc}", exc)
            _report_aborted(emitter, source, "template error")
            return None

    def _typeset(self, html: str) -> str:
        try:
            return self.typesetter.typeset(html)
        except RenderingError:
            raise
        except Exception as exc:
            raise UpstreamError(f"Math typesetting failed: {exc}") from exc

    def _navigate(self, page: PageSession, temp_path: Path, *, timeout: float) -> None:
        url = temp_path.resolve().as_uri()
        try:
            page.goto(url, wait_until="networkidle", timeout=timeout)
        except PlaywrightTimeoutError as exc:
            raise ReadinessTimeoutError(
                f"'{url}' did not reach network idle within {timeout:g} ms"
            ) from exc


def _report_aborted(emitter: DiagnosticEmitter, source: Path, reason: str) -> None:
    emitter.event("conversion_aborted", {"source": str(source), "reason": reason})


__all__ = [
    "ChartjsToPngStrategy",
    "FlowchartToSvgStrategy",
    "MasterDocumentToPdfStrategy",
    "MermaidToSvgStrategy",
    "SvgConversionStrategy",
    "SvgExtraction",
    "TableToFragmentStrategy",
    "VegaliteToSvgStrategy",
    "build_pdf_options",
]
