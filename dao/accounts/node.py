"""
dao.accounts.node — identity of a transaction submitter.

The Tally handler only touches the node's timestamp. A node account that does not yet
exist is created on the fly by `create_relevant_account`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping

from .base import HashedAccount


@dataclass(frozen=True)
class NodeAccount(HashedAccount):
    id: str
    timestamp: int = 0
    type: str = "NodeAccount"

    def touched(self, timestamp: int) -> "NodeAccount":
        return replace(self, timestamp=timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "NodeAccount":
        return cls(id=str(d["id"]), timestamp=int(d.get("timestamp", 0) or 0))
