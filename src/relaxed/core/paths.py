"""Filename conventions mapping source files to their rendered siblings.

Every rule here is a pure function of the path (plus, for flowchart
configuration, the existence of neighbouring files) so dispatch and output
naming can be tested without a browser.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class SourceKind(str, Enum):
    """Source formats recognised by their filename suffix."""

    MERMAID = "mermaid"
    FLOWCHART = "flowchart"
    VEGALITE = "vegalite"
    CHARTJS = "chartjs"
    TABLE = "table"
    HTABLE = "htable"


# Compound suffixes are matched before single extensions, longest first.
_SUFFIX_KINDS: tuple[tuple[str, SourceKind], ...] = (
    (".vegalite.json", SourceKind.VEGALITE),
    (".htable.csv", SourceKind.HTABLE),
    (".table.csv", SourceKind.TABLE),
    (".chart.js", SourceKind.CHARTJS),
    (".flowchart", SourceKind.FLOWCHART),
    (".mermaid", SourceKind.MERMAID),
)

_OUTPUT_SUFFIXES: dict[SourceKind, str] = {
    SourceKind.MERMAID: ".svg",
    SourceKind.FLOWCHART: ".svg",
    SourceKind.VEGALITE: ".svg",
    SourceKind.CHARTJS: ".png",
    SourceKind.TABLE: ".j2",
    SourceKind.HTABLE: ".j2",
}

# Kinds whose source suffix is a single extension rather than a compound one.
_SINGLE_EXTENSION_KINDS = frozenset({SourceKind.MERMAID, SourceKind.FLOWCHART})

TEMPLATE_SUFFIXES: frozenset[str] = frozenset({".j2", ".jinja", ".jinja2"})

FLOWCHART_DEFAULT_CONFIG = "flowchart.default.json"
EMPTY_FLOWCHART_CONFIG = "{}"


def classify_source(path: Path | str) -> SourceKind | None:
    """Return the source kind implied by the filename, or ``None`` if unsupported."""
    name = Path(path).name
    for suffix, kind in _SUFFIX_KINDS:
        if name.endswith(suffix) and len(name) > len(suffix):
            return kind
    return None


def source_suffix(kind: SourceKind) -> str:
    """Return the filename suffix that identifies ``kind``."""
    for suffix, candidate in _SUFFIX_KINDS:
        if candidate is kind:
            return suffix
    raise KeyError(kind)


def output_suffix(kind: SourceKind) -> str:
    """Return the suffix of the artefact produced for ``kind``."""
    return _OUTPUT_SUFFIXES[kind]


def strip_suffix(path: Path | str, suffix: str) -> Path:
    """Remove a literal ``suffix`` from the filename of ``path``."""
    path = Path(path)
    name = path.name
    if not name.endswith(suffix):
        raise ValueError(f"'{path}' does not end with '{suffix}'")
    return path.with_name(name[: -len(suffix)])


def derive_output_path(path: Path | str, kind: SourceKind) -> Path:
    """Return the sibling artefact path for a source of the given kind."""
    path = Path(path)
    target_suffix = output_suffix(kind)
    if kind in _SINGLE_EXTENSION_KINDS:
        return path.with_suffix(target_suffix)
    stem = strip_suffix(path, source_suffix(kind))
    return stem.with_name(stem.name + target_suffix)


def table_has_header(path: Path | str) -> bool:
    """Return True when the table filename marks its first record as a header."""
    return Path(path).name.endswith(source_suffix(SourceKind.HTABLE))


def is_template_source(path: Path | str) -> bool:
    """Return True when a master document must go through the template engine."""
    return Path(path).suffix in TEMPLATE_SUFFIXES


def debug_html_path(path: Path | str) -> Path:
    """Return the sibling HTML file used to inspect a rendered chart page."""
    path = Path(path)
    return path.with_name(path.name + ".htm")


def flowchart_config_candidates(path: Path | str) -> tuple[Path, ...]:
    """Return flowchart configuration files in precedence order."""
    path = Path(path)
    return (
        path.with_name(path.name + ".json"),
        path.parent / FLOWCHART_DEFAULT_CONFIG,
    )


def resolve_flowchart_config(path: Path | str) -> str:
    """Return the raw JSON configuration applying to a flowchart source.

    A ``<spec>.json`` sibling overrides the directory-wide
    ``flowchart.default.json``; the two are never merged. Without either file
    the configuration is an empty object.
    """
    for candidate in flowchart_config_candidates(path):
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8")
    return EMPTY_FLOWCHART_CONFIG


__all__ = [
    "EMPTY_FLOWCHART_CONFIG",
    "FLOWCHART_DEFAULT_CONFIG",
    "TEMPLATE_SUFFIXES",
    "SourceKind",
    "classify_source",
    "debug_html_path",
    "derive_output_path",
    "flowchart_config_candidates",
    "is_template_source",
    "output_suffix",
    "resolve_flowchart_config",
    "source_suffix",
    "strip_suffix",
    "table_has_header",
]
