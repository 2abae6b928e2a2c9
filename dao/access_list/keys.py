"""
dao.access_list.keys — the accounts a transaction reads and writes.

The runtime uses the declaration to place and lock accounts before validate/apply run.
It must be exhaustive: an account touched by apply but missing here is read stale or
written without a lock.

    source_keys : accounts the submitter owns (written)
    target_keys : every other account the handler reads or writes
    all_keys    : source_keys + target_keys, in that order

Two transactions whose key sets overlap must be applied serially; `conflicts_with`
answers that question the same way the execution scheduler's LockSet does (any
write/write or read/write overlap).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple


@dataclass
class TransactionKeys:
    source_keys: List[str] = field(default_factory=list)
    target_keys: List[str] = field(default_factory=list)
    all_keys: List[str] = field(default_factory=list)

    def lockset(self) -> Tuple[FrozenSet[str], FrozenSet[str]]:
        """(reads, writes). Handlers may write any declared account, so all keys are writes."""
        keys = frozenset(self.all_keys)
        return keys, keys

    def conflicts_with(self, other: "TransactionKeys") -> bool:
        reads, writes = self.lockset()
        o_reads, o_writes = other.lockset()
        return bool(writes & o_writes or writes & o_reads or reads & o_writes)

    def to_dict(self) -> dict:
        return {
            "sourceKeys": list(self.source_keys),
            "targetKeys": list(self.target_keys),
            "allKeys": list(self.all_keys),
        }


__all__ = ["TransactionKeys"]
