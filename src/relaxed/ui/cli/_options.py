"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"

SourcesArgument = Annotated[
    list[Path],
    typer.Argument(
        metavar="INPUT...",
        help=(
            "Diagram, chart or table sources: *.mermaid, *.flowchart, *.vegalite.json, "
            "*.chart.js, *.table.csv or *.htable.csv."
        ),
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

MasterArgument = Annotated[
    Path,
    typer.Argument(
        metavar="MASTER",
        help="Master document: a Jinja template (.j2, .jinja, .jinja2) or plain HTML.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="PDF file to write (defaults to the master path with a .pdf suffix).",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

TempOption = Annotated[
    Path | None,
    typer.Option(
        "--temp",
        help=(
            "Intermediate HTML file navigated by the browser "
            "(defaults to the output path with an .htm suffix)."
        ),
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ReadinessTimeoutOption = Annotated[
    float,
    typer.Option(
        "--timeout",
        min=1,
        help="Milliseconds to wait for a diagram or chart to finish drawing.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

NavigationTimeoutOption = Annotated[
    float,
    typer.Option(
        "--navigation-timeout",
        min=1,
        help="Milliseconds allowed for pages to load and reach network idle.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

NoMathOption = Annotated[
    bool,
    typer.Option(
        "--no-math",
        help="Skip TeX to MathML expansion of the master document.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

KeepDebugHtmlOption = Annotated[
    bool,
    typer.Option(
        "--keep-debug-html/--no-debug-html",
        help="Write the rendered chart page next to each *.chart.js source.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]
