"""Configuration models used by the converters.

RenderSettings

`template_dir` (`Path`)
: Directory holding the HTML templates used to wrap diagram, chart and table
  sources. Defaults to the templates bundled with the package.

`readiness_timeout` (`float`)
: Milliseconds to wait for a readiness selector or page global before the
  conversion fails with a timeout.

`navigation_timeout` (`float`)
: Milliseconds allowed for the master document to reach network idleness.

`keep_debug_html` (`bool`)
: Write the rendered chart page next to its source (`<spec>.htm`) to aid
  troubleshooting.

`typeset_math` (`bool`)
: Expand TeX-delimited notation to MathML before printing the master document.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"

DEFAULT_READINESS_TIMEOUT = 30_000.0
DEFAULT_NAVIGATION_TIMEOUT = 60_000.0


class RenderSettings(BaseModel):
    """Settings shared by every converter strategy."""

    model_config = ConfigDict(extra="forbid")

    template_dir: Path = TEMPLATE_DIR
    readiness_timeout: float = Field(default=DEFAULT_READINESS_TIMEOUT, gt=0)
    navigation_timeout: float = Field(default=DEFAULT_NAVIGATION_TIMEOUT, gt=0)
    keep_debug_html: bool = True
    typeset_math: bool = True


__all__ = [
    "DEFAULT_NAVIGATION_TIMEOUT",
    "DEFAULT_READINESS_TIMEOUT",
    "TEMPLATE_DIR",
    "RenderSettings",
]
