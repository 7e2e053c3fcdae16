from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest

from stepnest.config import ReporterConfig
from stepnest.events import EventDispatcher
from stepnest.plugin import ReportPlugin
from stepnest.replay import load_event_log, parse_event_log, replay

EXAMPLE_LOG = Path(__file__).resolve().parents[1] / "examples" / "login_flow" / "events.yaml"


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "events.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_replay_links_steps_by_id(tmp_path: Path, writer) -> None:
    path = _write(
        tmp_path,
        """
        events:
          - event: test.before
            test: "T"
          - event: step.started
            step: {id: a, text: "first", meta: ["Given"]}
          - event: step.passed
            step: a
          - event: step.started
            step: {text: "second", meta: ["Given"]}
          - event: step.failed
          - event: test.failed
            error: "boom"
        """,
    )
    dispatcher = EventDispatcher()
    plugin = ReportPlugin(writer=writer).register(dispatcher)
    summary = replay(load_event_log(path), dispatcher, plugin)
    assert summary.failed == 1
    assert writer.calls == [
        ("start_case", "T"),
        ("start_step", "Given"),
        ("start_step", "first"),
        ("end_step", "passed"),
        ("start_step", "second"),
        ("end_step", "failed"),
        ("end_step", "failed"),
        ("end_case", "failed", "boom"),
    ]


def test_schema_errors_name_the_record(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        """
        events:
          - event: step.started
            step: {text: "ok"}
          - event: step.skipped
        """,
    )
    with pytest.raises(ValueError) as exc:
        load_event_log(path)
    assert "events/1/event" in str(exc.value)


def test_unknown_step_id_rejected(writer) -> None:
    records = parse_event_log(
        {
            "events": [
                {"event": "test.before", "test": "T"},
                {"event": "step.passed", "step": "missing"},
            ]
        }
    )
    dispatcher = EventDispatcher()
    with pytest.raises(ValueError, match="events/1: unknown step id"):
        replay(records, dispatcher, ReportPlugin(writer=writer).register(dispatcher))


def test_example_log_produces_report(tmp_path: Path) -> None:
    dispatcher = EventDispatcher()
    plugin = ReportPlugin(ReporterConfig(output_dir=tmp_path)).register(dispatcher)
    summary = replay(load_event_log(EXAMPLE_LOG), dispatcher, plugin)
    assert (summary.passed, summary.failed, summary.pending) == (1, 1, 1)

    (report,) = tmp_path.glob("*-suite.json")
    payload = json.loads(report.read_text(encoding="utf-8"))
    names = [case["name"] for case in payload["cases"]]
    assert names == ["remembers the user", "signs in with valid credentials", "rejects a locked account"]

    signs_in = payload["cases"][1]
    assert signs_in["labels"] == [{"name": "tag", "value": "@smoke"}]
    given, welcome = signs_in["steps"]
    assert given["name"] == "Given I am a registered user"
    assert [step["name"] for step in given["steps"]] == [
        'I am on page "/login"',
        'I log in as "ann"',
    ]
    login = given["steps"][1]
    assert [step["name"] for step in login["steps"]] == [
        'I fill field "email", "ann@example.com"',
        'I click "Sign in"',
    ]
    assert login["attachments"][0]["title"] == "page title"
    assert welcome["name"] == 'I see "Welcome, Ann"'

    locked = payload["cases"][2]
    assert locked["status"] == "failed"
    assert locked["failure"]["message"].startswith("expected page")
    (meta,) = locked["steps"]
    assert meta["status"] == "failed"
    assert [step["status"] for step in meta["steps"]] == ["passed", "failed"]


def test_nested_suites_carry_parent_titles(writer) -> None:
    records = parse_event_log(
        {
            "events": [
                {"event": "suite.before", "suite": {"title": "Checkout"}},
                {"event": "suite.before", "suite": {"title": "with coupon"}},
                {"event": "suite.after"},
                {"event": "suite.before", "suite": {"title": "without coupon"}},
                {"event": "suite.after"},
                {"event": "suite.after"},
            ]
        }
    )
    dispatcher = EventDispatcher()
    replay(records, dispatcher, ReportPlugin(writer=writer).register(dispatcher))
    assert [call[1] for call in writer.calls if call[0] == "start_suite"] == [
        "Checkout",
        "Checkout with coupon",
        "Checkout without coupon",
    ]
