"""Implementation of the `relaxed build` command."""

from __future__ import annotations

import typer

from relaxed.adapters.transformers import master2pdf
from relaxed.core.config import (
    DEFAULT_NAVIGATION_TIMEOUT,
    DEFAULT_READINESS_TIMEOUT,
    RenderSettings,
)
from relaxed.core.exceptions import RenderingError, exception_hint
from relaxed.core.session import BrowserSession

from .._options import (
    MasterArgument,
    NavigationTimeoutOption,
    NoMathOption,
    OutputOption,
    ReadinessTimeoutOption,
    TempOption,
)
from ..diagnostics import CliEmitter, present_conversion_summary
from ..state import emit_error, get_cli_state


def build(
    master: MasterArgument,
    output: OutputOption = None,
    temp: TempOption = None,
    timeout: ReadinessTimeoutOption = DEFAULT_READINESS_TIMEOUT,
    navigation_timeout: NavigationTimeoutOption = DEFAULT_NAVIGATION_TIMEOUT,
    no_math: NoMathOption = False,
) -> None:
    """Print a master document to PDF."""
    state = get_cli_state()
    output_path = (output or master.with_suffix(".pdf")).resolve()
    temp_path = (temp or output_path.with_suffix(".htm")).resolve()
    settings = RenderSettings(
        readiness_timeout=timeout,
        navigation_timeout=navigation_timeout,
        typeset_math=not no_math,
    )
    emitter = CliEmitter(state=state)

    try:
        with BrowserSession() as page:
            result = master2pdf(
                master, page, temp_path, output_path, settings=settings, emitter=emitter
            )
    except (RenderingError, OSError) as exc:
        hint = exception_hint(exc) or type(exc).__name__
        emit_error(f"Failed to build '{master.name}': {hint}", exception=exc)
        raise typer.Exit(code=1) from exc
    finally:
        present_conversion_summary(state)

    if result is None:
        raise typer.Exit(code=1)
