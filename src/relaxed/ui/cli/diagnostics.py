"""Diagnostic emitter bridging the core pipeline with CLI rendering utilities."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from relaxed.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


ARTIFACT_WRITTEN = "artifact_written"
CONVERSION_ABORTED = "conversion_aborted"


class CliEmitter(DiagnosticEmitter):
    """Record converter events on the CLI state and echo them when verbose."""

    def __init__(self, state: CLIState | None = None, *, debug_enabled: bool | None = None) -> None:
        self._state = state or get_cli_state()
        if debug_enabled is None:
            debug_enabled = self._state.show_tracebacks
        self.debug_enabled = bool(debug_enabled)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        data = dict(payload)
        self._state.record_event(name, data)
        message = format_event_message(name, data)
        if message and self._state.verbosity >= 2:
            render_message("info", message)


def present_conversion_summary(state: CLIState) -> list[dict[str, Any]]:
    """Print the artefacts written since the last summary and warn about skipped sources.

    Returns the consumed ``artifact_written`` payloads.
    """
    written = state.consume_events(ARTIFACT_WRITTEN)
    for entry in written:
        source = Path(str(entry.get("source", "")))
        target = Path(str(entry.get("target", "")))
        state.console.print(f"{source.name} -> {target.name}", highlight=False)
    for entry in state.consume_events(CONVERSION_ABORTED):
        message = format_event_message(CONVERSION_ABORTED, entry)
        if message:
            emit_warning(message)
    return written


__all__ = ["ARTIFACT_WRITTEN", "CONVERSION_ABORTED", "CliEmitter", "present_conversion_summary"]
