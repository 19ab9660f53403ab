"""Custom exception hierarchy for the rendering pipeline."""

from __future__ import annotations


class RenderingError(RuntimeError):
    """Base exception for conversion failures."""


class TemplateError(RenderingError):
    """Raised when a template is missing or cannot be rendered with its data."""


class ReadinessTimeoutError(RenderingError, TimeoutError):
    """Raised when the page never reaches the awaited readiness condition."""


class ArtifactFormatError(RenderingError, ValueError):
    """Raised when an extracted artefact does not have the expected shape."""


class UpstreamError(RenderingError):
    """Raised when an external collaborator (typesetting, PDF emission) fails."""


class TableParseError(RenderingError):
    """Raised when a delimited table source cannot be parsed."""


class UnsupportedSourceError(RenderingError):
    """Raised when no converter is registered for a source filename."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ArtifactFormatError",
    "ReadinessTimeoutError",
    "RenderingError",
    "TableParseError",
    "TemplateError",
    "UnsupportedSourceError",
    "UpstreamError",
    "exception_hint",
    "exception_messages",
]
