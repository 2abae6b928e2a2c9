"""
dao — governance transaction handlers for a sharded, account-based ledger.

The package implements the Tally transaction: validation, winner resolution under the
margin rule, scheduling of the next governance cycle, and the staged `apply_tally`
global message committed after receipt confirmation.

Only lightweight metadata is exposed at import time; import handlers from their
subpackages (``dao.tx.tally``, ``dao.runtime.dispatcher``).
"""

from .version import __version__

__all__ = ["__version__"]
