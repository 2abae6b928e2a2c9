"""
dao.tally — pure tally logic: winner resolution and cycle scheduling.
"""

from __future__ import annotations

from .resolver import TallyOutcome, margin_for, rank_proposals, resolve_winner
from .scheduler import CycleDurations, cycle_length, schedule_cycle

__all__ = [
    "TallyOutcome",
    "margin_for",
    "rank_proposals",
    "resolve_winner",
    "CycleDurations",
    "cycle_length",
    "schedule_cycle",
]
