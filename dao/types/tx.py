"""
dao.types.tx — the Tally transaction.

Wire shape (the only bit-exact external format the handler owns):

    {"type": "tally", "nodeId": str, "from": str, "issue": str,
     "proposals": [str, ...], "timestamp": int}

`Tally.from_dict` copies each field as sent, whatever its type; `validate_fields` owns
the type checks and their reason strings.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping

TALLY = "tally"


def tx_hash(tx: Mapping[str, Any]) -> str:
    """Deterministic id: SHA3-256 over the sorted-key JSON of the wire form."""
    blob = json.dumps(dict(tx), sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha3_256(blob.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Tally:
    node_id: Any
    from_: Any
    issue: Any
    proposals: Any
    timestamp: Any = 0
    type: str = TALLY

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Tally":
        return cls(
            node_id=d.get("nodeId"),
            from_=d.get("from"),
            issue=d.get("issue"),
            proposals=d.get("proposals"),
            timestamp=d.get("timestamp"),
            type=str(d.get("type", TALLY)),
        )

    def to_dict(self) -> Dict[str, Any]:
        proposals = list(self.proposals) if isinstance(self.proposals, (list, tuple)) else self.proposals
        return {
            "type": self.type,
            "nodeId": self.node_id,
            "from": self.from_,
            "issue": self.issue,
            "proposals": proposals,
            "timestamp": self.timestamp,
        }

    @property
    def tx_id(self) -> str:
        return tx_hash(self.to_dict())


__all__ = ["TALLY", "Tally", "tx_hash"]
