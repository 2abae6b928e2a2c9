"""
dao — run governance transactions against a local JSON snapshot.

Commands:
  dao run STATE TX [--now MS] [--json]   Validate, apply and commit a transaction
  dao keys TX [--json]                   Accounts the transaction reads and writes
  dao schedule START [--json]            Next cycle's windows starting at START (ms)
  dao version                            Version and effective configuration

STATE is a JSON file holding either a list of account records or
``{"accounts": [...]}``; every record carries its ``type`` tag
("NetworkAccount", "IssueAccount", "ProposalAccount", "NodeAccount").
TX is a JSON file with one transaction in wire form.

Configuration comes from the DAO_* environment variables (see dao.config).

Examples:
  dao run state.json tally.json --json
  dao run state.json tally.json --now 1700000010000
  dao schedule 1700000000000
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer

from ..accounts import account_from_dict
from ..config import load_config
from ..errors import DaoError
from ..logging import setup_logging
from ..runtime.dapp import LocalDapp
from ..runtime.dispatcher import handler_for
from ..state.snapshot import WrappedStates
from ..tally.scheduler import schedule_cycle
from ..version import version_metadata

app = typer.Typer(
    name="dao",
    help="Governance transaction tools (tally, keys, window schedule)",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Log level", envvar="LOG_LEVEL"
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="json or console", envvar="LOG_FORMAT"
    ),
) -> None:
    setup_logging(level=log_level.upper(), log_format=log_format)


def _pretty(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False, default=str)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        typer.echo(f"Error: cannot read {path}: {e}", err=True)
        raise typer.Exit(2)
    except json.JSONDecodeError as e:
        typer.echo(f"Error: {path} is not valid JSON: {e}", err=True)
        raise typer.Exit(2)


def _load_states(path: Path) -> WrappedStates:
    raw = _read_json(path)
    records: List[Any] = raw.get("accounts", []) if isinstance(raw, dict) else raw
    if not isinstance(records, list):
        typer.echo("Error: state file must hold a list of accounts", err=True)
        raise typer.Exit(2)
    try:
        accounts = [account_from_dict(r) for r in records]
    except (KeyError, TypeError, ValueError) as e:
        typer.echo(f"Error: bad account record: {e}", err=True)
        raise typer.Exit(2)
    return WrappedStates.of(*accounts)


def _load_tx(path: Path) -> dict:
    tx = _read_json(path)
    if not isinstance(tx, dict):
        typer.echo("Error: transaction file must hold a JSON object", err=True)
        raise typer.Exit(2)
    return tx


@app.command()
def run(
    state: Path = typer.Argument(..., help="Account snapshot (JSON)"),
    tx: Path = typer.Argument(..., help="Transaction (JSON)"),
    timestamp: Optional[int] = typer.Option(
        None, "--timestamp", help="Apply timestamp in ms (default: the tx timestamp)"
    ),
    now: Optional[int] = typer.Option(
        None, "--now", help="Also release global messages due at this instant (ms)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Validate, apply and commit one transaction against STATE."""
    states = _load_states(state)
    payload = _load_tx(tx)
    dapp = LocalDapp(states, config=load_config())

    try:
        report = dapp.run(payload, timestamp)
    except DaoError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)

    released = dapp.advance(now) if now is not None and report.committed else []

    if json_output:
        typer.echo(
            _pretty(
                {
                    "report": report.to_dict(),
                    "pending": [m.to_dict() for m in dapp.queue.pending()],
                    "released": [m.to_dict() for m in released],
                    "accounts": {k: a.to_dict() for k, a in states.accounts().items()},
                }
            )
        )
    else:
        verdict = "applied" if report.applied else "rejected"
        typer.echo(f"{report.tx_id}: {verdict} ({report.result.reason})")
        if report.error:
            typer.echo(f"  error: {report.error['message']}")
        for write in report.apply_response.account_writes if report.apply_response else []:
            typer.echo(f"  wrote {write.account_id} {write.state_id}")
        for msg in dapp.queue.pending():
            typer.echo(f"  pending {msg.value.get('type')} for {msg.address} at {msg.when}")
        for msg in released:
            typer.echo(f"  released {msg.value.get('type')} for {msg.address} at {msg.when}")

    if not report.applied:
        raise typer.Exit(1)


@app.command()
def keys(
    tx: Path = typer.Argument(..., help="Transaction (JSON)"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """List the accounts TX reads and writes."""
    payload = _load_tx(tx)
    try:
        module = handler_for(payload)
        result = module.keys(payload, config=load_config()).to_dict()
    except DaoError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)

    if json_output:
        typer.echo(_pretty(result))
        return
    for name in ("sourceKeys", "targetKeys"):
        for key in result[name]:
            typer.echo(f"{name[:-4]} {key}")


@app.command()
def schedule(
    start: int = typer.Argument(..., help="Cycle start in ms"),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
) -> None:
    """Show the four windows of a cycle starting at START."""
    windows = schedule_cycle(start, load_config().windows)
    if json_output:
        typer.echo(_pretty(windows.to_dict()))
        return
    for name, rng in windows.to_dict().items():
        typer.echo(f"{name:<15} [{rng['start']}, {rng['stop']})")


@app.command()
def version() -> None:
    """Print version and effective configuration."""
    meta = version_metadata()
    typer.echo(f"dao {meta['version']}")
    typer.echo(meta["config"])


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
