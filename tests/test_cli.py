from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from claude_agent_sdk.types import AssistantMessage, ResultMessage, TextBlock, ToolUseBlock

from delegation_tracker import cli
from delegation_tracker.config import get_settings
from delegation_tracker.runtime import AgentRuntimeError, FakeAgentRuntime

REPO_PROFILES = Path(__file__).resolve().parents[1] / "profiles"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TRACKER_") or key in {"ANTHROPIC_API_KEY", "CLAUDE_MODEL"}:
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TRACKER_PROFILE_PATHS", str(REPO_PROFILES))
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_profiles_command_lists_bundled_profiles(capsys) -> None:
    cli.main(["profiles"])

    output = capsys.readouterr().out
    assert "researcher [haiku]" in output
    assert "coder [sonnet]" in output


def test_profiles_command_json(capsys) -> None:
    cli.main(["profiles", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert {item["id"] for item in payload} == {"researcher", "coder", "reviewer"}


def test_profiles_command_reports_errors(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    (tmp_path / "broken.yaml").write_text("id: ''\n", encoding="utf-8")
    monkeypatch.setenv("TRACKER_PROFILE_PATHS", str(tmp_path))
    get_settings.cache_clear()

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["profiles"])

    assert excinfo.value.code == 1
    assert "Profile error" in capsys.readouterr().err


def test_profiles_command_enforces_allowed_tools(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("TRACKER_ALLOWED_TOOLS", "Read,Task")
    get_settings.cache_clear()

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["profiles"])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "outside the allow-list" in err
    assert "coder" in err


def test_run_requires_credentials(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["run"])

    assert excinfo.value.code == 1
    assert "ANTHROPIC_API_KEY is not set" in capsys.readouterr().err


def test_run_rejects_bad_interval(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")

    with pytest.raises(SystemExit):
        cli.main(["run", "--interval", "0"])

    assert "Invalid configuration" in capsys.readouterr().err


def test_run_streams_tracked_output(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    brief = tmp_path / "brief.md"
    brief.write_text("Ship the digest tool.", encoding="utf-8")

    created: list[FakeAgentRuntime] = []

    def fake_runtime(settings, *, agents=None, cwd=None):
        assert settings.claude_model == "claude-haiku-4-5"
        assert set(agents) == {"researcher", "coder", "reviewer"}
        runtime = FakeAgentRuntime(
            [
                AssistantMessage(
                    content=[
                        TextBlock(text="Plan ready."),
                        ToolUseBlock(id="t1", name="Task", input={"subagent_type": "reviewer", "prompt": "Audit"}),
                    ],
                    model="claude-haiku-4-5",
                ),
                ResultMessage(
                    subtype="success",
                    duration_ms=900,
                    duration_api_ms=800,
                    is_error=False,
                    num_turns=2,
                    session_id="s1",
                    total_cost_usd=0.01,
                ),
            ]
        )
        created.append(runtime)
        return runtime

    monkeypatch.setattr(cli, "AgentRuntime", fake_runtime)

    cli.main(["run", "--brief", str(brief), "--model", "claude-haiku-4-5"])

    output = capsys.readouterr().out
    assert "Multi-Agent Orchestration" in output
    assert "Delegating to reviewer subagent: Audit" in output
    assert "Total duration: 900ms | Total cost: $0.0100" in output
    assert "Multi-agent orchestration finished." in output
    assert "Ship the digest tool." in created[0].prompts[0]


def test_run_reports_runtime_failure(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    monkeypatch.setattr(
        cli,
        "AgentRuntime",
        lambda settings, *, agents=None, cwd=None: FakeAgentRuntime(error=AgentRuntimeError("network down")),
    )

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["run"])

    assert excinfo.value.code == 1
    assert "network down" in capsys.readouterr().err


def test_main_without_command_prints_help(capsys) -> None:
    cli.main([])

    assert "usage" in capsys.readouterr().out.lower()
