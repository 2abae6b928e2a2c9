"""
dao.errors — governance-layer exceptions.

The Tally handler reports failures two ways:

* *Malformed* transactions (wrong field types) are rejected before consensus by
  raising `MalformedTransaction`; nothing is mutated.
* *Invalid* transactions (stale issue, double tally, outside the grace window…)
  are reported by `validate` through an `IncomingTransactionResult` reason
  string. `InvalidTransaction` is only raised when a later phase (apply,
  receipt pass) is driven with input that validation would have refused.

Hierarchy
---------
DaoError (base)
 ├─ MalformedTransaction : field/shape violation, raised by validate_fields
 ├─ InvalidTransaction   : semantic violation detected outside validate
 ├─ AccountNotFound      : typed snapshot lookup missed
 └─ DispatchError        : transaction type has no handler

These classes import nothing from the rest of the package so they can be used
from any layer without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class DaoError(Exception):
    """
    Base governance error.

    Attributes:
        message: Human-readable explanation (doubles as the rejection reason).
        code:    Stable machine code string (e.g., 'MALFORMED_TX').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "dao error"
    code: str = "DAO_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for logs and results."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class MalformedTransaction(DaoError):
    """
    A transaction field is missing or has the wrong type.

    `field` names the offending wire key ("nodeId", "from", ...).
    """
    def __init__(
        self,
        message: str = "malformed transaction",
        *,
        field: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = dict(data or {})
        if field is not None:
            d.setdefault("field", field)
        super().__init__(message=message, code="MALFORMED_TX", data=d or None)


class InvalidTransaction(DaoError):
    """Semantic rule violation raised from apply/receipt phases."""
    def __init__(
        self,
        message: str = "invalid transaction",
        *,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code="INVALID_TX", data=data)


class AccountNotFound(DaoError):
    """
    A referenced account is absent from the state snapshot, or present with a
    different account kind than expected.
    """
    def __init__(
        self,
        account_id: str,
        *,
        kind: Optional[str] = None,
        message: Optional[str] = None,
    ):
        d: Dict[str, Any] = {"account_id": account_id}
        if kind is not None:
            d["kind"] = kind
        label = kind or "account"
        super().__init__(
            message=message or f"{label} {account_id} doesn't exist",
            code="ACCOUNT_NOT_FOUND",
            data=d,
        )
        self.account_id = account_id
        self.kind = kind


class DispatchError(DaoError):
    """Raised when a transaction cannot be classified or routed."""
    def __init__(self, message: str = "cannot dispatch transaction", *, tx_type: Any = None):
        super().__init__(
            message=message,
            code="DISPATCH_ERROR",
            data={"type": tx_type} if tx_type is not None else None,
        )


# -------- helper utilities ---------------------------------------------------


def error_to_result_fields(err: DaoError) -> Dict[str, Any]:
    """
    Map a DaoError to IncomingTransactionResult-like fields.

    Returns:
        {"success": False, "reason": <message>, "error": {code, message, data?}}
    """
    return {"success": False, "reason": err.message, "error": err.to_dict()}


__all__ = [
    "DaoError",
    "MalformedTransaction",
    "InvalidTransaction",
    "AccountNotFound",
    "DispatchError",
    "error_to_result_fields",
]
