"""Primary public API for relaxed."""

from __future__ import annotations

from relaxed.adapters.geometry import PageGeometry, extract_page_geometry
from relaxed.adapters.transformers import (
    chartjs2png,
    convert_source,
    flowchart2svg,
    master2pdf,
    mermaid2svg,
    register_converter,
    table2fragment,
    vegalite2svg,
)
from relaxed.core.config import RenderSettings
from relaxed.core.exceptions import (
    ArtifactFormatError,
    ReadinessTimeoutError,
    RenderingError,
    TableParseError,
    TemplateError,
    UnsupportedSourceError,
    UpstreamError,
)
from relaxed.core.paths import SourceKind, classify_source, derive_output_path
from relaxed.core.session import BrowserSession, PageSession
from relaxed.version import get_version


__version__ = get_version()

__all__ = [
    "ArtifactFormatError",
    "BrowserSession",
    "PageGeometry",
    "PageSession",
    "ReadinessTimeoutError",
    "RenderSettings",
    "RenderingError",
    "SourceKind",
    "TableParseError",
    "TemplateError",
    "UnsupportedSourceError",
    "UpstreamError",
    "__version__",
    "chartjs2png",
    "classify_source",
    "convert_source",
    "derive_output_path",
    "extract_page_geometry",
    "flowchart2svg",
    "get_version",
    "master2pdf",
    "mermaid2svg",
    "register_converter",
    "table2fragment",
    "vegalite2svg",
]
