"""Utility helpers shared across converter strategies."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path
import re

from relaxed.core.exceptions import ArtifactFormatError


_DATA_URL_PATTERN = re.compile(r"data:(.+);base64,(.+)")

# Runs in the page: strip sizing attributes, tag the element, return its markup.
SVG_EXTRACTION_SCRIPT = """
({ selector, strip, className }) => {
  const el = document.querySelector(selector);
  if (!el) {
    return null;
  }
  for (const name of strip) {
    el.removeAttribute(name);
  }
  if (className) {
    el.classList.add(className);
  }
  return el.outerHTML;
}
"""

CHART_READY_EXPRESSION = "() => window.pngData"


@dataclass(frozen=True, slots=True)
class DataUrl:
    """Decoded ``data:<mime>;base64,<payload>`` URL."""

    mime: str
    payload: bytes


def parse_data_url(value: object) -> DataUrl:
    """Decode a base64 data URL, raising ``ArtifactFormatError`` on any mismatch."""
    if not isinstance(value, str):
        raise ArtifactFormatError(f"Expected a data URL string, got {type(value).__name__}.")
    match = _DATA_URL_PATTERN.fullmatch(value)
    if match is None:
        preview = value[:40] + ("..." if len(value) > 40 else "")
        raise ArtifactFormatError(f"Could not parse data URL '{preview}'.")
    mime, encoded = match.groups()
    try:
        payload = base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise ArtifactFormatError(f"Data URL payload for '{mime}' is not valid base64.") from exc
    return DataUrl(mime=mime, payload=payload)


def write_artifact(target: Path, artifact: str | bytes) -> None:
    """Write ``artifact`` to ``target`` without leaving a truncated file behind."""
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_name(target.name + ".tmp")
    try:
        if isinstance(artifact, bytes):
            tmp_path.write_bytes(artifact)
        else:
            tmp_path.write_text(artifact, encoding="utf-8")
        tmp_path.replace(target)
    finally:
        tmp_path.unlink(missing_ok=True)


__all__ = [
    "CHART_READY_EXPRESSION",
    "SVG_EXTRACTION_SCRIPT",
    "DataUrl",
    "parse_data_url",
    "write_artifact",
]
