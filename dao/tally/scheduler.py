"""
dao.tally.scheduler — derive the next governance cycle's windows.

The cycle starts at the instant the Tally is applied and runs

    proposalWindow = [T, T + proposals)
    votingWindow   = proposalWindow.next_range(voting)
    graceWindow    = votingWindow.next_range(grace)
    applyWindow    = graceWindow.next_range(apply)

so the four ranges are contiguous and non-overlapping by construction.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..types.windows import WindowRange, Windows


@dataclass(frozen=True)
class CycleDurations:
    """Window lengths in milliseconds."""

    proposals: int
    voting: int
    grace: int
    apply: int

    def __post_init__(self) -> None:
        for name in ("proposals", "voting", "grace", "apply"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} duration must be non-negative")


def schedule_cycle(start: int, durations: CycleDurations) -> Windows:
    proposal_window = WindowRange(start, durations.proposals)
    voting_window = proposal_window.next_range(durations.voting)
    grace_window = voting_window.next_range(durations.grace)
    apply_window = grace_window.next_range(durations.apply)
    return Windows(
        proposal_window=proposal_window,
        voting_window=voting_window,
        grace_window=grace_window,
        apply_window=apply_window,
    )


def cycle_length(durations: CycleDurations) -> int:
    return durations.proposals + durations.voting + durations.grace + durations.apply


__all__ = ["CycleDurations", "schedule_cycle", "cycle_length"]
