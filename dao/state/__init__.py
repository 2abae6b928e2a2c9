"""
dao.state — account snapshots handed to handlers by the runtime.
"""

from __future__ import annotations

from .snapshot import WrappedAccount, WrappedStates

__all__ = ["WrappedAccount", "WrappedStates"]
