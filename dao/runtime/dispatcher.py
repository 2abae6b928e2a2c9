"""
dao.runtime.dispatcher — route a transaction to its handler module.

    tally → dao.tx.tally

Handler modules are imported lazily at dispatch time to keep module import cost low
and to avoid import cycles with the runtime adapters they receive.
"""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any, Dict, Mapping

from ..errors import DispatchError

HANDLERS: Dict[str, str] = {
    "tally": "dao.tx.tally",
}

_REQUIRED = ("validate_fields", "validate", "apply", "transaction_receipt_pass", "keys")


def _get(obj: Any, *names: str, default: Any = None) -> Any:
    """Tolerant getter over mapping or attribute lookup."""
    for n in names:
        if isinstance(obj, Mapping) and n in obj:
            return obj[n]
        if hasattr(obj, n):
            return getattr(obj, n)
    return default


def resolve_tx_type(tx: Any) -> str:
    """Normalized transaction type from ``type`` (or ``kind``)."""
    explicit = _get(tx, "type", "kind")
    if explicit is None:
        raise DispatchError("transaction has no type")
    return str(explicit).strip().lower()


def handler_for(tx: Any) -> ModuleType:
    """
    Return the handler module for `tx`.

    Raises
    ------
    DispatchError
        If the type is unknown or the module lacks a lifecycle function.
    """
    kind = resolve_tx_type(tx)
    path = HANDLERS.get(kind)
    if path is None:
        raise DispatchError(f"unknown transaction type: {kind!r}", tx_type=kind)
    module = importlib.import_module(path)
    missing = [name for name in _REQUIRED if not hasattr(module, name)]
    if missing:
        raise DispatchError(
            f"{kind} handler not available (missing {', '.join(missing)})", tx_type=kind
        )
    return module


__all__ = ["HANDLERS", "resolve_tx_type", "handler_for"]
