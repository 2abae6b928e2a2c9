"""
dao.accounts.issue — one governance cycle's ballot.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

from .base import HashedAccount


@dataclass(frozen=True)
class IssueAccount(HashedAccount):
    id: str
    number: int
    active: bool = True
    proposal_count: int = 0
    winner_id: Optional[str] = None
    timestamp: int = 0
    type: str = "IssueAccount"

    @property
    def tallied(self) -> bool:
        return self.winner_id is not None

    def with_winner(self, winner_id: str, timestamp: int) -> "IssueAccount":
        return replace(self, winner_id=winner_id, timestamp=timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "number": self.number,
            "active": self.active,
            "proposalCount": self.proposal_count,
            "winnerId": self.winner_id,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "IssueAccount":
        winner = d.get("winnerId")
        return cls(
            id=str(d["id"]),
            number=int(d["number"]),
            active=bool(d.get("active", True)),
            proposal_count=int(d.get("proposalCount", 0) or 0),
            winner_id=str(winner) if winner is not None else None,
            timestamp=int(d.get("timestamp", 0) or 0),
        )
