"""
CLI tests for `dao` (run / keys / schedule / version).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest
from typer.testing import CliRunner

from dao.cli.main import app

runner = CliRunner()

ENV = {
    "DAO_ACCOUNT_ADDRESS": "network-" + "0" * 56,
    "DAO_TIME_FOR_PROPOSALS": "1s",
    "DAO_TIME_FOR_VOTING": "1s",
    "DAO_TIME_FOR_GRACE": "1s",
    "DAO_TIME_FOR_APPLY": "1s",
    "DAO_GLOBAL_MSG_DELAY": "10s",
    "LOG_LEVEL": "WARNING",
}


def _write(path: Path, obj: Any) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


@pytest.fixture
def files(tmp_path: Path, make_world) -> Dict[str, Any]:
    w = make_world()
    accounts = [a.to_dict() for a in w.states.accounts().values()]
    return {
        "world": w,
        "state": _write(tmp_path / "state.json", {"accounts": accounts}),
        "tx": _write(tmp_path / "tally.json", w.tally()),
    }


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for cmd in ("run", "keys", "schedule", "version"):
        assert cmd in result.stdout


def test_schedule_json():
    result = runner.invoke(app, ["schedule", "0", "--json"], env=ENV)
    assert result.exit_code == 0, result.output
    windows = json.loads(result.stdout)
    assert windows == {
        "proposalWindow": {"start": 0, "stop": 1000},
        "votingWindow": {"start": 1000, "stop": 2000},
        "graceWindow": {"start": 2000, "stop": 3000},
        "applyWindow": {"start": 3000, "stop": 4000},
    }


def test_schedule_text():
    result = runner.invoke(app, ["schedule", "500"], env=ENV)
    assert result.exit_code == 0
    assert "graceWindow" in result.stdout
    assert "[2500, 3500)" in result.stdout


def test_keys_json(files):
    result = runner.invoke(app, ["keys", str(files["tx"]), "--json"], env=ENV)
    assert result.exit_code == 0, result.output
    keys = json.loads(result.stdout)
    w = files["world"]
    assert keys["sourceKeys"] == ["node-1"]
    assert keys["targetKeys"][-1] == ENV["DAO_ACCOUNT_ADDRESS"]
    assert keys["targetKeys"][-2] == w.issue.id


def test_run_json(files):
    result = runner.invoke(app, ["run", str(files["state"]), str(files["tx"]), "--json"], env=ENV)
    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    w = files["world"]
    assert out["report"]["applied"] is True
    assert out["report"]["committed"] is True
    assert out["accounts"][w.issue.id]["winnerId"] == w.proposals[1].id
    assert [m["when"] for m in out["pending"]] == [12_500]
    assert out["released"] == []


def test_run_with_now_releases_message(files):
    result = runner.invoke(
        app,
        ["run", str(files["state"]), str(files["tx"]), "--now", "12500", "--json"],
        env=ENV,
    )
    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    network = out["accounts"][ENV["DAO_ACCOUNT_ADDRESS"]]
    assert network["next"] == {"fee": 2}
    assert network["nextWindows"]["proposalWindow"] == {"start": 2500, "stop": 3500}
    assert out["pending"] == []
    assert len(out["released"]) == 1


def test_run_text(files):
    result = runner.invoke(app, ["run", str(files["state"]), str(files["tx"])], env=ENV)
    assert result.exit_code == 0, result.output
    assert "applied (This transaction is valid!)" in result.stdout
    assert "pending apply_tally" in result.stdout


def test_run_rejected_exits_nonzero(tmp_path, files):
    tx = dict(files["world"].tally(), timestamp=0)
    result = runner.invoke(
        app, ["run", str(files["state"]), str(_write(tmp_path / "late.json", tx))], env=ENV
    )
    assert result.exit_code == 1
    assert "rejected" in result.stdout


def test_run_bad_json(tmp_path, files):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["run", str(files["state"]), str(bad)], env=ENV)
    assert result.exit_code == 2


def test_version():
    result = runner.invoke(app, ["version"], env=ENV)
    assert result.exit_code == 0
    assert result.stdout.startswith("dao ")
    assert "dao{" in result.stdout
