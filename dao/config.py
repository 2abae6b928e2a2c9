"""
dao.config — runtime configuration for the governance handlers.

Knobs read by the Tally handler and the local runtime:
  • The canonical network (DAO global) account address
  • Governance window durations (proposals → voting → grace → apply)
  • The delay between applying a Tally and the global `apply_tally` commit

Every knob has a default, so an empty environment yields a working local setup.

Environment:
  DAO_ACCOUNT_ADDRESS       -> network account id (default: 64 × "0")
  DAO_TIME_FOR_PROPOSALS    -> duration, e.g. "5m", "30s", "250ms", "60" (default: 1m)
  DAO_TIME_FOR_VOTING       -> duration (default: 1m)
  DAO_TIME_FOR_GRACE        -> duration (default: 1m)
  DAO_TIME_FOR_APPLY        -> duration (default: 1m)
  DAO_GLOBAL_MSG_DELAY      -> duration (default: 10s)

A bare number is read as seconds, matching the node's duration syntax; every value is
stored as integer milliseconds, the unit of ledger timestamps.

In code:
    from dao.config import get_config
    cfg = get_config()
    windows = schedule_cycle(ts, cfg.windows)
"""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

from .tally.scheduler import CycleDurations

# ----------------------------- helpers -------------------------------------

DEFAULT_DAO_ACCOUNT_ADDRESS = "0" * 64
DEFAULT_WINDOW_MS = 60 * 1000
DEFAULT_GLOBAL_MSG_DELAY_MS = 10 * 1000

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h|d)?\s*$")
_UNIT_MS = {"ms": 1, "s": 1000, "m": 60_000, "h": 3_600_000, "d": 86_400_000}


def _parse_duration_ms(value: Union[str, int, float]) -> int:
    """
    Parse a tiny duration language into milliseconds.
      "250ms" -> 250
      "30" / "30s" -> 30000
      "5m", "3h", "1d"
    Numbers passed programmatically are taken as milliseconds already.
    """
    if isinstance(value, bool):
        raise TypeError("duration must not be a bool")
    if isinstance(value, (int, float)):
        ms = int(value)
    else:
        m = _DURATION_RE.match(str(value).lower())
        if not m:
            raise ValueError(f"invalid duration: {value!r}")
        num = float(m.group(1))
        unit = m.group(2) or "s"
        ms = int(round(num * _UNIT_MS[unit]))
    if ms < 0:
        raise ValueError("duration must be non-negative")
    return ms


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class DaoConfig:
    dao_account_address: str
    windows: CycleDurations
    global_msg_delay: int = DEFAULT_GLOBAL_MSG_DELAY_MS

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# ------------------------------ loader --------------------------------------


def _validate(cfg: DaoConfig) -> DaoConfig:
    if not cfg.dao_account_address:
        raise ValueError("dao_account_address must be non-empty")
    if cfg.global_msg_delay < 0:
        raise ValueError("global_msg_delay must be ≥ 0")
    return cfg


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int, float]]] = None,
) -> DaoConfig:
    """
    Build a DaoConfig from environment and optional overrides.

    Args:
        env: variables to read (default: os.environ)
        overrides: values that win over `env`; accepted keys:
          'dao_account_address', 'time_for_proposals', 'time_for_voting',
          'time_for_grace', 'time_for_apply', 'global_msg_delay'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    def _duration(key: str, var: str, default: int) -> int:
        if key in overrides:
            return _parse_duration_ms(overrides[key])
        raw = env.get(var)
        if raw is None or raw.strip() == "":
            return default
        return _parse_duration_ms(raw)

    address = str(
        overrides.get(
            "dao_account_address",
            env.get("DAO_ACCOUNT_ADDRESS", DEFAULT_DAO_ACCOUNT_ADDRESS),
        )
    ).strip()

    windows = CycleDurations(
        proposals=_duration("time_for_proposals", "DAO_TIME_FOR_PROPOSALS", DEFAULT_WINDOW_MS),
        voting=_duration("time_for_voting", "DAO_TIME_FOR_VOTING", DEFAULT_WINDOW_MS),
        grace=_duration("time_for_grace", "DAO_TIME_FOR_GRACE", DEFAULT_WINDOW_MS),
        apply=_duration("time_for_apply", "DAO_TIME_FOR_APPLY", DEFAULT_WINDOW_MS),
    )

    return _validate(
        DaoConfig(
            dao_account_address=address,
            windows=windows,
            global_msg_delay=_duration(
                "global_msg_delay", "DAO_GLOBAL_MSG_DELAY", DEFAULT_GLOBAL_MSG_DELAY_MS
            ),
        )
    )


@lru_cache(maxsize=1)
def get_config() -> DaoConfig:
    """
    Process-wide config, read from os.environ on first call.
    """
    return load_config()


# ----------------------------- pretty-print ---------------------------------


def _fmt_ms(n: int) -> str:
    for unit, div in (("d", 86_400_000), ("h", 3_600_000), ("m", 60_000), ("s", 1000)):
        if n >= div and n % div == 0:
            return f"{n // div}{unit}"
    return f"{n}ms"


def summary(cfg: Optional[DaoConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the governance knobs.
    """
    cfg = cfg or get_config()
    w = cfg.windows
    addr = cfg.dao_account_address
    if len(addr) > 12:
        addr = addr[:12] + "…"
    return (
        "dao{"
        f"network={addr}, "
        f"propose={_fmt_ms(w.proposals)}, vote={_fmt_ms(w.voting)}, "
        f"grace={_fmt_ms(w.grace)}, apply={_fmt_ms(w.apply)}, "
        f"global_delay={_fmt_ms(cfg.global_msg_delay)}"
        "}"
    )


__all__ = [
    "DaoConfig",
    "load_config",
    "get_config",
    "summary",
]
