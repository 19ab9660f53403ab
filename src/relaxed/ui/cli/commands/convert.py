"""Implementation of the `relaxed convert` command."""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path

import typer

from relaxed.adapters.transformers import convert_source
from relaxed.core.config import (
    DEFAULT_NAVIGATION_TIMEOUT,
    DEFAULT_READINESS_TIMEOUT,
    RenderSettings,
)
from relaxed.core.exceptions import RenderingError, exception_hint
from relaxed.core.paths import SourceKind, classify_source
from relaxed.core.session import BrowserSession

from .._options import (
    KeepDebugHtmlOption,
    NavigationTimeoutOption,
    ReadinessTimeoutOption,
    SourcesArgument,
)
from ..diagnostics import CliEmitter, present_conversion_summary
from ..state import emit_error, emit_warning, get_cli_state


_BROWSERLESS_KINDS = frozenset({SourceKind.TABLE, SourceKind.HTABLE})


def _select_sources(sources: list[Path]) -> list[tuple[Path, SourceKind]]:
    selected: list[tuple[Path, SourceKind]] = []
    for source in sources:
        kind = classify_source(source)
        if kind is None:
            emit_warning(f"Skipping '{source.name}': no converter handles this file type.")
            continue
        selected.append((source, kind))
    return selected


def convert(
    sources: SourcesArgument,
    timeout: ReadinessTimeoutOption = DEFAULT_READINESS_TIMEOUT,
    navigation_timeout: NavigationTimeoutOption = DEFAULT_NAVIGATION_TIMEOUT,
    keep_debug_html: KeepDebugHtmlOption = True,
) -> None:
    """Render diagram, chart and table sources next to their inputs."""
    state = get_cli_state()
    selected = _select_sources(sources)
    if not selected:
        raise typer.BadParameter("Provide at least one supported source file.")

    settings = RenderSettings(
        readiness_timeout=timeout,
        navigation_timeout=navigation_timeout,
        keep_debug_html=keep_debug_html,
    )
    emitter = CliEmitter(state=state)
    needs_browser = any(kind not in _BROWSERLESS_KINDS for _, kind in selected)

    failures = 0
    try:
        with ExitStack() as stack:
            # One page, used by one conversion at a time.
            page = stack.enter_context(BrowserSession()) if needs_browser else None
            for source, kind in selected:
                session = None if kind in _BROWSERLESS_KINDS else page
                try:
                    result = convert_source(source, session, settings=settings, emitter=emitter)
                except (RenderingError, OSError) as exc:
                    failures += 1
                    hint = exception_hint(exc) or type(exc).__name__
                    emit_error(f"Failed to convert '{source.name}': {hint}", exception=exc)
                    continue
                if result is None:
                    failures += 1
    finally:
        present_conversion_summary(state)

    if failures:
        raise typer.Exit(code=1)
