"""
dao.runtime.deferred — staged global messages and their deferred application.

A Tally changes network-wide state (the next parameters and windows). That change must
land on every replica at the same instant and only once the Tally is known to be
accepted, so it travels in two steps:

1. apply: the handler builds a `DeferredGlobalMessage` scheduled for
   ``tx_timestamp + global_msg_delay`` and stages it on the apply response.
2. receipt pass: after the runtime confirms the receipt, the handler hands the staged
   tuple to ``set_global``.

`DeferredQueue` is the local side of ``set_global``: commands are staged per
transaction, marked confirmed, and released by `due(now)` in ``(when, seq)`` order.
Commands that are never confirmed never apply; `discard` drops them when the runtime
aborts the transaction.

`CycleLog` is the append-only record of every `apply_tally` message applied to the
network account. Replicas compare logs instead of sharing a mutable singleton.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from ..accounts.network import NetworkAccount
from ..errors import InvalidTransaction
from ..logging import get_logger
from ..types.windows import Windows

log = get_logger(__name__)

APPLY_TALLY = "apply_tally"


@dataclass(frozen=True)
class DeferredGlobalMessage:
    address: str
    value: Dict[str, Any]
    when: int
    source: str

    def as_tuple(self) -> Tuple[str, Dict[str, Any], int, str]:
        return (self.address, self.value, self.when, self.source)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "value": self.value,
            "when": self.when,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DeferredGlobalMessage":
        return cls(
            address=str(d["address"]),
            value=dict(d["value"]),
            when=int(d["when"]),
            source=str(d["source"]),
        )


def apply_tally_value(
    *, when: int, network: str, next_params: Mapping[str, Any], next_windows: Windows
) -> Dict[str, Any]:
    """The wire payload of an ``apply_tally`` global message."""
    return {
        "type": APPLY_TALLY,
        "timestamp": when,
        "network": network,
        "next": dict(next_params),
        "nextWindows": next_windows.to_dict(),
    }


# --------------------------------------------------------------------------------------
# Cycle log
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleTransition:
    when: int
    source: str
    issue: int
    next: Dict[str, Any]
    next_windows: Windows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "when": self.when,
            "source": self.source,
            "issue": self.issue,
            "next": dict(self.next),
            "nextWindows": self.next_windows.to_dict(),
        }


def apply_tally_message(network: NetworkAccount, value: Mapping[str, Any]) -> NetworkAccount:
    """Return the network account after an ``apply_tally`` message takes effect."""
    if value.get("type") != APPLY_TALLY:
        raise InvalidTransaction(
            f"expected {APPLY_TALLY!r} message, got {value.get('type')!r}"
        )
    if value.get("network") != network.id:
        raise InvalidTransaction(
            "apply_tally message targets a different network account",
            data={"network": value.get("network"), "expected": network.id},
        )
    return network.with_next(
        value.get("next") or {},
        Windows.from_dict(value["nextWindows"]),
        int(value["timestamp"]),
    )


class CycleLog:
    """Append-only list of applied cycle transitions."""

    def __init__(self) -> None:
        self._entries: List[CycleTransition] = []

    def append(self, network: NetworkAccount, msg: DeferredGlobalMessage) -> NetworkAccount:
        nxt = apply_tally_message(network, msg.value)
        self._entries.append(
            CycleTransition(
                when=msg.when,
                source=msg.source,
                issue=network.issue,
                next=dict(nxt.next),
                next_windows=nxt.next_windows,  # type: ignore[arg-type]
            )
        )
        return nxt

    def __iter__(self) -> Iterator[CycleTransition]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def last(self) -> Optional[CycleTransition]:
        return self._entries[-1] if self._entries else None


# --------------------------------------------------------------------------------------
# Deferred queue
# --------------------------------------------------------------------------------------


@dataclass(order=True)
class _Entry:
    when: int
    seq: int
    tx_id: str = field(compare=False)
    msg: DeferredGlobalMessage = field(compare=False)


class DeferredQueue:
    """
    Global messages keyed by scheduled instant.

    Only messages whose originating transaction is confirmed are released by `due`;
    release order is ``(when, seq)`` so equal instants keep staging order.
    """

    def __init__(self) -> None:
        self._heap: List[_Entry] = []
        self._seq = itertools.count()
        self._confirmed: Set[str] = set()

    def stage(self, tx_id: str, msg: DeferredGlobalMessage) -> None:
        heapq.heappush(self._heap, _Entry(msg.when, next(self._seq), tx_id, msg))

    def confirm(self, tx_id: str) -> None:
        self._confirmed.add(tx_id)

    def discard(self, tx_id: str) -> None:
        self._confirmed.discard(tx_id)
        self._heap = [e for e in self._heap if e.tx_id != tx_id]
        heapq.heapify(self._heap)

    def pending(self) -> List[DeferredGlobalMessage]:
        return [e.msg for e in sorted(self._heap)]

    def due(self, now: int) -> List[DeferredGlobalMessage]:
        """Pop confirmed messages with ``when <= now``; unconfirmed ones stay queued."""
        ready: List[_Entry] = []
        held: List[_Entry] = []
        while self._heap and self._heap[0].when <= now:
            entry = heapq.heappop(self._heap)
            if entry.tx_id in self._confirmed:
                ready.append(entry)
            else:
                held.append(entry)
        for entry in held:
            heapq.heappush(self._heap, entry)
        live = {e.tx_id for e in self._heap}
        for entry in ready:
            if entry.tx_id not in live:
                self._confirmed.discard(entry.tx_id)
            log.debug("global_msg_due", tx_id=entry.tx_id, when=entry.when, address=entry.msg.address)
        return [e.msg for e in ready]

    def __len__(self) -> int:
        return len(self._heap)


__all__ = [
    "APPLY_TALLY",
    "DeferredGlobalMessage",
    "apply_tally_value",
    "CycleTransition",
    "CycleLog",
    "apply_tally_message",
    "DeferredQueue",
]
