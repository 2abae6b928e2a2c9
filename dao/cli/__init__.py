"""Developer-facing command line tools for the governance handlers.

These are convenience wrappers for running a Tally against a local JSON snapshot.
They are not a node.
"""

from __future__ import annotations

__all__ = ["main"]
