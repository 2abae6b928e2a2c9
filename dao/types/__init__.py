"""
dao.types — value types shared by the governance handlers.

Public surface (re-exported):
    WindowRange, Windows          : governance time windows
    Tally                         : the Tally transaction (wire form helpers)
    IncomingTransactionResult     : validation verdict
    ApplyResponse, WrappedResponse: apply-phase outputs handed to the runtime
"""

from __future__ import annotations

from .result import (AppDefinedData, ApplyResponse, IncomingTransactionResult,
                     WrappedResponse)
from .tx import TALLY, Tally, tx_hash
from .windows import WINDOW_NAMES, WindowRange, Windows

__all__ = [
    "WINDOW_NAMES",
    "WindowRange",
    "Windows",
    "TALLY",
    "Tally",
    "tx_hash",
    "IncomingTransactionResult",
    "AppDefinedData",
    "ApplyResponse",
    "WrappedResponse",
]
