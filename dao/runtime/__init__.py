"""
dao.runtime — what sits between a ledger runtime and the transaction handlers.

    dispatcher : route a transaction to its handler module
    dapp       : the callback surface handlers use, plus an in-memory single replica
    deferred   : staged global messages and the cycle log
"""

from .dapp import Dapp, LocalDapp, RunReport
from .deferred import (APPLY_TALLY, CycleLog, CycleTransition,
                       DeferredGlobalMessage, DeferredQueue,
                       apply_tally_message, apply_tally_value)
from .dispatcher import HANDLERS, handler_for, resolve_tx_type

__all__ = [
    "Dapp",
    "LocalDapp",
    "RunReport",
    "APPLY_TALLY",
    "CycleLog",
    "CycleTransition",
    "DeferredGlobalMessage",
    "DeferredQueue",
    "apply_tally_message",
    "apply_tally_value",
    "HANDLERS",
    "handler_for",
    "resolve_tx_type",
]
