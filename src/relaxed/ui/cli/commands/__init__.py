"""CLI command implementations exposed via `relaxed.ui.cli`."""

from __future__ import annotations

from .build import build
from .convert import convert


__all__ = ["build", "convert"]
