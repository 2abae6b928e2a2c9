"""
dao.accounts.proposal — one candidate proposal within an issue.

`power` is accumulated by vote transactions before the Tally runs; `parameters` is the
opaque next-state payload adopted network-wide if the proposal wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Union

from .base import HashedAccount

Power = Union[int, float]


@dataclass(frozen=True)
class ProposalAccount(HashedAccount):
    id: str
    power: Power = 0
    winner: bool = False
    parameters: Dict[str, Any] = field(default_factory=dict)
    number: int = 0
    timestamp: int = 0
    type: str = "ProposalAccount"

    def with_winner(self, flag: bool) -> "ProposalAccount":
        return replace(self, winner=flag)

    def touched(self, timestamp: int) -> "ProposalAccount":
        return replace(self, timestamp=timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "power": self.power,
            "winner": self.winner,
            "parameters": dict(self.parameters),
            "number": self.number,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ProposalAccount":
        return cls(
            id=str(d["id"]),
            power=d.get("power", 0) or 0,
            winner=bool(d.get("winner", False)),
            parameters=dict(d.get("parameters") or {}),
            number=int(d.get("number", 0) or 0),
            timestamp=int(d.get("timestamp", 0) or 0),
        )
