"""Conversion registry exposing high-level helpers for source files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from relaxed.core.exceptions import UnsupportedSourceError
from relaxed.core.paths import SourceKind, classify_source
from relaxed.core.session import PageSession

from .base import ConverterStrategy, PageConversionStrategy
from .strategies import (
    ChartjsToPngStrategy,
    FlowchartToSvgStrategy,
    MasterDocumentToPdfStrategy,
    MermaidToSvgStrategy,
    SvgExtraction,
    TableToFragmentStrategy,
    VegaliteToSvgStrategy,
    build_pdf_options,
)
from .utils import DataUrl, parse_data_url


MASTER = "master"


class ConverterRegistry:
    """Registry storing converter strategies."""

    def __init__(self) -> None:
        self._strategies: dict[str, ConverterStrategy] = {}

    def register(self, name: str, strategy: ConverterStrategy) -> None:
        """Register a converter strategy under a unique name."""
        self._strategies[name] = strategy

    def get(self, name: str) -> ConverterStrategy:
        """Return a registered converter strategy or raise an unsupported-source error."""
        try:
            return self._strategies[name]
        except KeyError as exc:
            raise UnsupportedSourceError(f"No converter registered for '{name}'") from exc

    def is_registered(self, name: str) -> bool:
        """Return True when a converter has been registered under the given name."""
        return name in self._strategies

    def convert(
        self,
        name: str,
        source: Path | str,
        *,
        page: PageSession | None = None,
        **options: Any,
    ) -> Path | None:
        """Execute a converter strategy with the provided arguments."""
        strategy = self.get(name)
        return strategy(source, page=page, **options)


registry = ConverterRegistry()

# Built-in strategies, keyed by source kind.
registry.register(SourceKind.MERMAID.value, MermaidToSvgStrategy())
registry.register(SourceKind.FLOWCHART.value, FlowchartToSvgStrategy())
registry.register(SourceKind.VEGALITE.value, VegaliteToSvgStrategy())
registry.register(SourceKind.CHARTJS.value, ChartjsToPngStrategy())
registry.register(SourceKind.TABLE.value, TableToFragmentStrategy())
registry.register(SourceKind.HTABLE.value, registry.get(SourceKind.TABLE.value))
registry.register(MASTER, MasterDocumentToPdfStrategy())


def register_converter(name: str, strategy: ConverterStrategy) -> None:
    """Expose a helper to register external strategies."""
    registry.register(name, strategy)


def has_converter(name: str) -> bool:
    """Return True when a converter strategy is currently registered."""
    return registry.is_registered(name)


def mermaid2svg(source: Path | str, page: PageSession, **options: Any) -> Path:
    """Convert a ``.mermaid`` diagram to a sibling SVG."""
    return registry.convert(SourceKind.MERMAID.value, source, page=page, **options)


def flowchart2svg(source: Path | str, page: PageSession, **options: Any) -> Path:
    """Convert a ``.flowchart`` diagram to a sibling SVG."""
    return registry.convert(SourceKind.FLOWCHART.value, source, page=page, **options)


def vegalite2svg(source: Path | str, page: PageSession, **options: Any) -> Path:
    """Convert a ``.vegalite.json`` specification to a sibling SVG."""
    return registry.convert(SourceKind.VEGALITE.value, source, page=page, **options)


def chartjs2png(source: Path | str, page: PageSession, **options: Any) -> Path:
    """Convert a ``.chart.js`` script to a sibling PNG."""
    return registry.convert(SourceKind.CHARTJS.value, source, page=page, **options)


def table2fragment(source: Path | str, **options: Any) -> Path | None:
    """Convert a ``.table.csv`` or ``.htable.csv`` file to a sibling ``.j2`` fragment."""
    return registry.convert(SourceKind.TABLE.value, source, **options)


def master2pdf(
    source: Path | str,
    page: PageSession,
    temp_path: Path | str,
    output_path: Path | str,
    **options: Any,
) -> Path | None:
    """Print a master document to ``output_path`` via the ``temp_path`` HTML file."""
    return registry.convert(
        MASTER, source, page=page, temp_path=temp_path, output_path=output_path, **options
    )


def convert_source(
    source: Path | str, page: PageSession | None = None, **options: Any
) -> Path | None:
    """Convert a source file with the converter selected by its filename suffix."""
    kind = classify_source(source)
    if kind is None:
        raise UnsupportedSourceError(f"No converter handles '{Path(source).name}'")
    return registry.convert(kind.value, source, page=page, **options)


__all__ = [
    "MASTER",
    "ChartjsToPngStrategy",
    "ConverterRegistry",
    "ConverterStrategy",
    "DataUrl",
    "FlowchartToSvgStrategy",
    "MasterDocumentToPdfStrategy",
    "MermaidToSvgStrategy",
    "PageConversionStrategy",
    "SvgExtraction",
    "TableToFragmentStrategy",
    "VegaliteToSvgStrategy",
    "build_pdf_options",
    "chartjs2png",
    "convert_source",
    "flowchart2svg",
    "has_converter",
    "master2pdf",
    "mermaid2svg",
    "parse_data_url",
    "register_converter",
    "registry",
    "table2fragment",
    "vegalite2svg",
]
