from __future__ import annotations

import base64
from pathlib import Path

import pytest

from relaxed.adapters.transformers.utils import parse_data_url, write_artifact
from relaxed.core.exceptions import ArtifactFormatError


def test_parse_data_url_decodes_payload() -> None:
    payload = b"\x89PNG\r\n\x1a\nrest"
    value = "data:image/png;base64," + base64.b64encode(payload).decode("ascii")

    data_url = parse_data_url(value)

    assert data_url.mime == "image/png"
    assert data_url.payload == payload


@pytest.mark.parametrize(
    "value",
    [
        "image/png;base64,AAAA",
        "data:image/png,AAAA",
        "data:;base64,AAAA",
        "data:image/png;base64,",
        "",
    ],
)
def test_parse_data_url_rejects_malformed_values(value: str) -> None:
    with pytest.raises(ArtifactFormatError):
        parse_data_url(value)


def test_parse_data_url_rejects_invalid_base64() -> None:
    with pytest.raises(ArtifactFormatError):
        parse_data_url("data:image/png;base64,A")


@pytest.mark.parametrize("value", [None, 42, b"data:image/png;base64,AAAA"])
def test_parse_data_url_rejects_non_strings(value: object) -> None:
    with pytest.raises(ArtifactFormatError):
        parse_data_url(value)


def test_write_artifact_replaces_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "out" / "graph.svg"
    target.parent.mkdir()
    target.write_text("old", encoding="utf-8")

    write_artifact(target, "<svg/>")

    assert target.read_text(encoding="utf-8") == "<svg/>"
    assert sorted(p.name for p in target.parent.iterdir()) == ["graph.svg"]


def test_write_artifact_accepts_bytes(tmp_path: Path) -> None:
    target = tmp_path / "chart.png"

    write_artifact(target, b"\x00\x01")

    assert target.read_bytes() == b"\x00\x01"
