"""Tests for depswap CLI entrypoints."""

from __future__ import annotations

import io
import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from rich.console import Console

import depswap.main as main
from depswap.cli import cycles as cycles_module
from depswap.cli import rewrite as rewrite_module
from depswap.rewrite.settings import EXCLUSION_MODE_ENV
from depswap.runtime import EventBus, EventType

WORKSPACE = {
    "root": ":app",
    "projects": [
        {"path": ":app", "configurations": {"implementation": ["project(:hit)", "project(:miss)"]}},
        {"path": ":hit", "configurations": {"implementation": ["com.squareup:okio:3.6.0"]}},
        {"path": ":miss"},
    ],
    "modules": [
        {"name": ":hit", "cache_valid": True, "group": "com.example", "version": "1.0"},
        {"name": ":miss", "cache_valid": False, "group": "com.example", "version": "1.0"},
    ],
}

CYCLIC_WORKSPACE = {
    "projects": [
        {"path": ":app", "configurations": {"api": ["project(:a)"]}},
        {"path": ":a", "configurations": {"api": ["project(:b)"]}},
        {"path": ":b", "configurations": {"api": ["project(:a)"]}},
    ],
}


def _write_manifest(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "workspace.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_main_dispatches_rewrite_command(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Verify that `main` parses args and dispatches rewrite_command."""
    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)

    captured: dict[str, object] = {}

    def fake_rewrite_command(args, console=None) -> int:
        captured["args"] = args
        return 0

    monkeypatch.setattr(main, "rewrite_command", fake_rewrite_command)
    argv = ["depswap", "rewrite", "ws.toml", "-o", str(tmp_path / "out.json")]
    monkeypatch.setattr(sys, "argv", argv)

    assert main.main() == 0
    parsed = captured["args"]
    assert parsed.manifest == "ws.toml"
    assert parsed.output == str(tmp_path / "out.json")
    assert parsed.exclusion_mode is None


def test_main_requires_command(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Missing subcommands make the CLI print help and fail."""
    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)
    monkeypatch.setattr(sys, "argv", ["depswap"])

    assert main.main() == 1
    assert "Depswap" in capsys.readouterr().out


def test_rewrite_command_writes_outputs(tmp_path: Path) -> None:
    """The rewrite command exports the rewritten workspace and the build plan."""
    manifest = _write_manifest(tmp_path, WORKSPACE)
    output = tmp_path / "out" / "workspace.json"
    plan = tmp_path / "out" / "plan.json"
    args = SimpleNamespace(
        manifest=str(manifest),
        output=str(output),
        plan=str(plan),
        exclusion_mode=None,
    )

    exit_code = rewrite_module.rewrite_command(args, console=Console(file=None, quiet=True))

    assert exit_code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    app = data["projects"][0]
    assert app["configurations"]["implementation"]["dependencies"] == [
        {"project": ":miss"},
        {"artifact": "com.example:hit:1.0@aar"},
        {"artifact": "com.squareup:okio:3.6.0"},
    ]
    plan_data = json.loads(plan.read_text(encoding="utf-8"))
    assert [m["name"] for m in plan_data["modules"]] == [":miss"]
    assert plan_data["requests"][0]["requested_by"] == ":app"


def test_rewrite_command_reports_cycles(tmp_path: Path) -> None:
    """A true cycle makes the rewrite command fail with exit code 1."""
    manifest = _write_manifest(tmp_path, CYCLIC_WORKSPACE)
    args = SimpleNamespace(manifest=str(manifest), output=None, plan=None, exclusion_mode=None)

    assert rewrite_module.rewrite_command(args, console=Console(quiet=True)) == 1


def test_rewrite_command_rejects_bad_manifest(tmp_path: Path) -> None:
    """Manifest errors are reported as exit code 1."""
    manifest = _write_manifest(tmp_path, {"projects": []})
    args = SimpleNamespace(manifest=str(manifest), output=None, plan=None, exclusion_mode=None)

    assert rewrite_module.rewrite_command(args, console=Console(quiet=True)) == 1


def test_cycles_command_respects_fail_on_cycle(tmp_path: Path) -> None:
    """The cycles command returns non-zero only when fail_on_cycle is set."""
    manifest = _write_manifest(tmp_path, CYCLIC_WORKSPACE)

    args_fail = SimpleNamespace(manifest=str(manifest), limit=5, fail_on_cycle=True)
    args_ignore = SimpleNamespace(manifest=str(manifest), limit=0, fail_on_cycle=False)

    assert cycles_module.cycles_command(args_fail) == 1
    assert cycles_module.cycles_command(args_ignore) == 0


def test_cycles_command_passes_acyclic_workspace(tmp_path: Path) -> None:
    """No cycles, no failure, even with fail_on_cycle."""
    manifest = _write_manifest(tmp_path, WORKSPACE)
    args = SimpleNamespace(manifest=str(manifest), limit=20, fail_on_cycle=True)

    assert cycles_module.cycles_command(args) == 0


def test_rewrite_command_rejects_invalid_environment_mode(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """A bad DEPSWAP_EXCLUSION_MODE fails the command instead of raising."""
    monkeypatch.setenv(EXCLUSION_MODE_ENV, "bogus")
    manifest = _write_manifest(tmp_path, WORKSPACE)
    args = SimpleNamespace(manifest=str(manifest), output=None, plan=None, exclusion_mode=None)

    assert rewrite_module.rewrite_command(args, console=Console(quiet=True)) == 1


def test_rewrite_summary_is_built_from_events(tmp_path: Path) -> None:
    """The printed summary lists substitutions and stale modules."""
    manifest = _write_manifest(tmp_path, WORKSPACE)
    args = SimpleNamespace(manifest=str(manifest), output=None, plan=None, exclusion_mode=None)
    console = Console(file=io.StringIO(), width=200)

    assert rewrite_module.rewrite_command(args, console=console) == 0

    text = console.file.getvalue()
    assert "com.example:hit:1.0@aar" in text
    assert "1 cache hit(s)" in text
    assert "1 module(s) to build: :miss" in text
    assert "1 propagated dependencies" in text


def test_rewrite_summary_counts_each_stale_module_once() -> None:
    """Repeated build requests for one module are listed once."""
    eventbus = EventBus()
    summary = rewrite_module.RewriteSummary(eventbus)

    eventbus.emit(EventType.BUILD_REQUESTED, ":a", module=":lib", configuration="api")
    eventbus.emit(EventType.BUILD_REQUESTED, ":b", module=":lib", configuration="implementation")
    eventbus.emit(EventType.DEPENDENCIES_PROPAGATED, ":lib", parent=":a", count=2)
    eventbus.emit(EventType.PROJECT_VISITED, ":a", parent=None)

    assert summary.builds == [":lib"]
    assert summary.propagated == 2
    assert summary.substitutions == []
