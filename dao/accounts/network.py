"""
dao.accounts.network — the singleton DAO global account.

Holds the current issue number, the windows of the running cycle, the parameters in
force (`current`) and the staged successor (`next`, `next_windows`) written by the
`apply_tally` global message.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from ..types.windows import Windows
from .base import HashedAccount


@dataclass(frozen=True)
class NetworkAccount(HashedAccount):
    id: str
    issue: int
    windows: Windows
    current: Dict[str, Any] = field(default_factory=dict)
    next: Dict[str, Any] = field(default_factory=dict)
    next_windows: Optional[Windows] = None
    timestamp: int = 0
    type: str = "NetworkAccount"

    def with_next(
        self, next_params: Mapping[str, Any], next_windows: Windows, timestamp: int
    ) -> "NetworkAccount":
        return replace(
            self, next=dict(next_params), next_windows=next_windows, timestamp=timestamp
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "issue": self.issue,
            "windows": self.windows.to_dict(),
            "current": dict(self.current),
            "next": dict(self.next),
            "nextWindows": self.next_windows.to_dict() if self.next_windows else None,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "NetworkAccount":
        nw = d.get("nextWindows")
        return cls(
            id=str(d["id"]),
            issue=int(d["issue"]),
            windows=Windows.from_dict(d["windows"]),
            current=dict(d.get("current") or {}),
            next=dict(d.get("next") or {}),
            next_windows=Windows.from_dict(nw) if nw else None,
            timestamp=int(d.get("timestamp", 0) or 0),
        )
