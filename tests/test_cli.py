from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any

from playwright.sync_api import Error as PlaywrightError
import pytest
from typer.testing import CliRunner

from relaxed.ui.cli import app, get_cli_state
from relaxed.ui.cli.diagnostics import CliEmitter, present_conversion_summary
from relaxed.ui.cli.state import CLIState


convert_module = importlib.import_module("relaxed.ui.cli.commands.convert")
build_module = importlib.import_module("relaxed.ui.cli.commands.build")


class FakeSession:
    """Context manager standing in for ``BrowserSession``."""

    opened = 0

    def __init__(self, page: Any) -> None:
        self.page = page

    def __enter__(self) -> Any:
        type(self).opened += 1
        return self.page

    def __exit__(self, *exc_info: Any) -> None:
        return None


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_session(monkeypatch: pytest.MonkeyPatch, make_page):
    page = make_page(dom='<div id="graph"><svg height="4"></svg></div>')
    FakeSession.opened = 0

    def factory(*_args: Any, **_kwargs: Any) -> FakeSession:
        return FakeSession(page)

    monkeypatch.setattr(convert_module, "BrowserSession", factory)
    monkeypatch.setattr(build_module, "BrowserSession", factory)
    return page


def test_convert_tables_without_browser(
    runner: CliRunner, tmp_path: Path, fake_session
) -> None:
    source = tmp_path / "data.htable.csv"
    source.write_text("a,b\n1,2\n", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(source)])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "data.j2").exists()
    assert "data.htable.csv -> data.j2" in result.output
    assert FakeSession.opened == 0


def test_convert_diagram_opens_one_session(
    runner: CliRunner, tmp_path: Path, fake_session
) -> None:
    first = tmp_path / "one.mermaid"
    second = tmp_path / "two.mermaid"
    for path in (first, second):
        path.write_text("graph TD; A-->B", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(first), str(second), "--timeout", "50"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "one.svg").exists()
    assert (tmp_path / "two.svg").exists()
    assert FakeSession.opened == 1


def test_convert_skips_unsupported_files(
    runner: CliRunner, tmp_path: Path, fake_session
) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("hello", encoding="utf-8")
    table = tmp_path / "t.table.csv"
    table.write_text("x\n", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(notes), str(table)])

    assert result.exit_code == 0, result.output
    assert "Skipping" in result.output
    assert (tmp_path / "t.j2").exists()


def test_convert_requires_a_supported_source(
    runner: CliRunner, tmp_path: Path, fake_session
) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("hello", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(notes)])

    assert result.exit_code != 0


def test_convert_reports_failures(runner: CliRunner, tmp_path: Path, fake_session) -> None:
    broken = tmp_path / "broken.table.csv"
    broken.write_text('a,"b"c\n', encoding="utf-8")
    good = tmp_path / "good.table.csv"
    good.write_text("a\n", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(broken), str(good)])

    assert result.exit_code == 1
    assert not (tmp_path / "broken.j2").exists()
    assert (tmp_path / "good.j2").exists()


def test_convert_readiness_timeout_fails(
    runner: CliRunner, tmp_path: Path, fake_session
) -> None:
    fake_session.dom = "<div id='graph'></div>"
    source = tmp_path / "late.mermaid"
    source.write_text("graph TD; A-->B", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(source), "--timeout", "50"])

    assert result.exit_code == 1
    assert "late.mermaid" in result.output
    assert not (tmp_path / "late.svg").exists()


def test_build_writes_pdf(runner: CliRunner, tmp_path: Path, fake_session) -> None:
    master = tmp_path / "report.html"
    master.write_text("<p>Hello</p>", encoding="utf-8")
    output = tmp_path / "out" / "report.pdf"

    result = runner.invoke(app, ["build", str(master), "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert output.exists()
    assert (tmp_path / "out" / "report.htm").exists()
    assert fake_session.pdf_options["path"] == str(output.resolve())


def test_build_template_error_exits_with_failure(
    runner: CliRunner, tmp_path: Path, fake_session
) -> None:
    master = tmp_path / "report.j2"
    master.write_text("{% if %}", encoding="utf-8")

    result = runner.invoke(app, ["build", str(master)])

    assert result.exit_code == 1
    assert not (tmp_path / "report.pdf").exists()


def test_build_pdf_failure(runner: CliRunner, tmp_path: Path, fake_session) -> None:
    fake_session.pdf_error = PlaywrightError("printer on fire")
    master = tmp_path / "report.html"
    master.write_text("<p>Hello</p>", encoding="utf-8")

    result = runner.invoke(app, ["build", str(master)])

    assert result.exit_code == 1
    assert "report.html" in result.output


def test_convert_summary_drains_recorded_events(
    runner: CliRunner, tmp_path: Path, fake_session
) -> None:
    broken = tmp_path / "broken.table.csv"
    broken.write_text('a,"b"c\n', encoding="utf-8")
    good = tmp_path / "good.htable.csv"
    good.write_text("h\n1\n", encoding="utf-8")

    result = runner.invoke(app, ["convert", str(broken), str(good)])

    assert result.exit_code == 1
    assert "good.htable.csv -> good.j2" in result.output
    assert "Skipped output for" in result.output
    assert get_cli_state(create=False).events == {}


def test_cli_emitter_records_events_for_the_summary(capsys: pytest.CaptureFixture[str]) -> None:
    state = CLIState()
    emitter = CliEmitter(state=state)

    emitter.event("artifact_written", {"source": "/w/a.mermaid", "target": "/w/a.svg"})
    written = present_conversion_summary(state)

    assert written == [{"source": "/w/a.mermaid", "target": "/w/a.svg"}]
    assert "a.mermaid -> a.svg" in capsys.readouterr().out
    assert state.events == {}
