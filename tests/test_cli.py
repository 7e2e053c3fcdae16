from __future__ import annotations

import json
import textwrap
from pathlib import Path

from click.testing import CliRunner

from stepnest.cli.main import cli

EVENTS = """
events:
  - event: suite.before
    suite: {title: "Cart"}
  - event: test.before
    test: "adds an item"
  - event: step.started
    step: {id: s1, text: "I click \\"Add\\"", meta: ["When I add a book"]}
  - event: step.passed
    step: s1
  - event: test.passed
  - event: suite.after
"""


def _write_events(tmp_path: Path, content: str = EVENTS) -> Path:
    path = tmp_path / "events.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_cli_help_short_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "Usage:" in result.output
    assert "replay" in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert result.output.startswith("stepnest ")


def test_cli_replay_writes_json_report(tmp_path: Path) -> None:
    events_path = _write_events(tmp_path)
    output_dir = tmp_path / "report"
    result = CliRunner().invoke(
        cli, ["replay", str(events_path), "--output-dir", str(output_dir)]
    )
    assert result.exit_code == 0, result.output
    (report,) = output_dir.glob("*-suite.json")
    payload = json.loads(report.read_text(encoding="utf-8"))
    (case,) = payload["cases"]
    assert case["steps"][0]["name"] == "When I add a book"
    assert case["steps"][0]["steps"][0]["name"] == 'I click "Add"'


def test_cli_replay_uses_config_output_dir(tmp_path: Path) -> None:
    events_path = _write_events(tmp_path)
    config = tmp_path / "stepnest.yaml"
    config.write_text("output_dir: from-config\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["replay", str(events_path), "--config", str(config)])
    assert result.exit_code == 0, result.output
    assert len(list((tmp_path / "from-config").glob("*-suite.json"))) == 1


def test_cli_replay_terminal_and_json(tmp_path: Path) -> None:
    events_path = _write_events(tmp_path)
    result = CliRunner().invoke(
        cli,
        [
            "replay",
            str(events_path),
            "--output-dir",
            str(tmp_path / "out"),
            "--format",
            "terminal",
            "--format",
            "json",
            "--no-color",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "  adds an item" in result.output
    assert "    When I add a book" in result.output
    assert "      I click \"Add\"" in result.output
    assert "Summary: passed=1 failed=0 pending=0" in result.output
    assert len(list((tmp_path / "out").glob("*-suite.json"))) == 1


def test_cli_replay_exit_code_reflects_failures(tmp_path: Path) -> None:
    events_path = _write_events(
        tmp_path,
        """
        events:
          - event: suite.before
            suite: {title: "Cart"}
          - event: test.before
            test: "removes an item"
          - event: test.failed
            error: "item still present"
          - event: suite.after
        """,
    )
    result = CliRunner().invoke(
        cli, ["replay", str(events_path), "--output-dir", str(tmp_path / "out")]
    )
    assert result.exit_code == 1


def test_cli_replay_reports_invalid_log(tmp_path: Path) -> None:
    events_path = _write_events(tmp_path, "events:\n  - step: {text: x}\n")
    result = CliRunner().invoke(
        cli, ["replay", str(events_path), "--output-dir", str(tmp_path / "out")]
    )
    assert result.exit_code != 0
    assert "Event log schema validation failed" in result.output


def test_cli_unknown_format(tmp_path: Path) -> None:
    events_path = _write_events(tmp_path)
    result = CliRunner().invoke(cli, ["replay", str(events_path), "--format", "xml"])
    assert result.exit_code != 0
    assert "No report format registered" in result.output


def test_cli_lists_formats() -> None:
    result = CliRunner().invoke(cli, ["formats"])
    assert result.exit_code == 0
    assert result.output.split() == sorted(result.output.split())
    assert {"json", "terminal"} <= set(result.output.split())
