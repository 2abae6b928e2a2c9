"""
dao.types.result — containers passed between the runtime and the handlers.

* `IncomingTransactionResult` — mutable verdict filled in by validate_fields/validate.
  The runtime creates it with ``success=False`` and hands it to each stage.
* `ApplyResponse` — per-transaction apply output; `app_defined_data` carries the
  staged global message between apply and the receipt pass.
* `WrappedResponse` — what `create_wrapped_response` hands back to the runtime for
  its own bookkeeping (hash/timestamp of a touched account).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from ..runtime.deferred import DeferredGlobalMessage


@dataclass
class IncomingTransactionResult:
    success: bool = False
    reason: str = ""
    txn_timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success, "reason": self.reason}
        if self.txn_timestamp is not None:
            out["txnTimestamp"] = self.txn_timestamp
        return out


@dataclass
class AppDefinedData:
    global_msg: Optional["DeferredGlobalMessage"] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"globalMsg": self.global_msg.to_dict() if self.global_msg else None}


@dataclass
class WrappedResponse:
    account_id: str
    account_created: bool
    state_id: str
    timestamp: int
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.data.to_dict() if hasattr(self.data, "to_dict") else self.data
        return {
            "accountId": self.account_id,
            "accountCreated": self.account_created,
            "stateId": self.state_id,
            "timestamp": self.timestamp,
            "data": data,
        }


@dataclass
class ApplyResponse:
    tx_id: str
    tx_timestamp: int
    app_defined_data: AppDefinedData = field(default_factory=AppDefinedData)
    account_writes: List[WrappedResponse] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txId": self.tx_id,
            "txTimestamp": self.tx_timestamp,
            "appDefinedData": self.app_defined_data.to_dict(),
            "accountWrites": [w.to_dict() for w in self.account_writes],
        }


__all__ = [
    "IncomingTransactionResult",
    "AppDefinedData",
    "WrappedResponse",
    "ApplyResponse",
]
