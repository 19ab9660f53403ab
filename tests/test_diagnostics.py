from __future__ import annotations

import logging

import pytest

from relaxed.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    ensure_emitter,
    format_event_message,
)
from relaxed.core.exceptions import (
    ReadinessTimeoutError,
    RenderingError,
    UpstreamError,
    exception_hint,
    exception_messages,
)


def test_ensure_emitter_defaults_to_logging() -> None:
    assert isinstance(ensure_emitter(None), LoggingEmitter)


def test_ensure_emitter_keeps_given_emitter() -> None:
    emitter = NullEmitter()

    assert ensure_emitter(emitter) is emitter
    assert isinstance(emitter, DiagnosticEmitter)


def test_logging_emitter_formats_known_events(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()

    with caplog.at_level(logging.INFO, logger="relaxed.core.diagnostics"):
        emitter.event("artifact_written", {"target": "a.svg", "kind": "mermaid"})

    assert "Wrote: a.svg (mermaid)" in caplog.text


def test_logging_emitter_errors(caplog: pytest.LogCaptureFixture) -> None:
    emitter = LoggingEmitter()

    with caplog.at_level(logging.ERROR, logger="relaxed.core.diagnostics"):
        emitter.error("conversion failed", ValueError("boom"))

    assert caplog.records[0].levelno == logging.ERROR
    assert caplog.records[0].getMessage() == "conversion failed"


def test_format_event_message() -> None:
    payload = {"source": "t.csv", "reason": "parse error"}
    message = format_event_message("conversion_aborted", payload)

    assert message == "Skipped output for t.csv (parse error)"
    assert format_event_message("unknown", {}) is None


def test_readiness_timeout_is_a_timeout() -> None:
    exc = ReadinessTimeoutError("late")

    assert isinstance(exc, TimeoutError)
    assert isinstance(exc, RenderingError)


def test_exception_messages_follow_the_cause_chain() -> None:
    try:
        try:
            raise ValueError("root cause")
        except ValueError as inner:
            raise UpstreamError("printing failed") from inner
    except UpstreamError as exc:
        assert exception_messages(exc) == ["printing failed", "root cause"]
        assert exception_hint(exc) == "root cause"
