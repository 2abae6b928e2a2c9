"""
dao.access_list — key declarations used by the runtime for placement and locking.
"""

from __future__ import annotations

from .keys import TransactionKeys

__all__ = ["TransactionKeys"]
