"""
dao.types.windows — governance time windows.

A `WindowRange` is a half-open interval ``[start, start + duration)`` over ledger
timestamps (milliseconds). A governance cycle is four ranges chained end to end:

    proposal → voting → grace → apply

`Windows` holds the four ranges of one cycle and is replaced wholesale each time a
Tally schedules the next cycle.

Wire form (kept compatible with the ledger's account JSON):
    {"start": 1000, "stop": 61000}
    {"proposalWindow": {...}, "votingWindow": {...}, "graceWindow": {...}, "applyWindow": {...}}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

WINDOW_NAMES: Tuple[str, ...] = (
    "proposalWindow",
    "votingWindow",
    "graceWindow",
    "applyWindow",
)


@dataclass(frozen=True)
class WindowRange:
    start: int
    duration: int

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError("window duration must be non-negative")

    @property
    def end(self) -> int:
        return self.start + self.duration

    def includes(self, instant: int) -> bool:
        return self.start <= instant < self.end

    def excludes(self, instant: int) -> bool:
        """True iff `instant` lies outside ``[start, end)``."""
        return not self.includes(instant)

    def next_range(self, duration: int) -> "WindowRange":
        """A new range of `duration` that begins exactly where this one ends."""
        return WindowRange(self.end, duration)

    def to_dict(self) -> Dict[str, int]:
        return {"start": self.start, "stop": self.end}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "WindowRange":
        start = int(d["start"])
        if "stop" in d:
            return cls(start, int(d["stop"]) - start)
        return cls(start, int(d["duration"]))


@dataclass(frozen=True)
class Windows:
    proposal_window: WindowRange
    voting_window: WindowRange
    grace_window: WindowRange
    apply_window: WindowRange

    def __iter__(self) -> Iterator[WindowRange]:
        return iter(
            (self.proposal_window, self.voting_window, self.grace_window, self.apply_window)
        )

    def is_contiguous(self) -> bool:
        ranges = list(self)
        return all(a.end == b.start for a, b in zip(ranges, ranges[1:]))

    def phase_at(self, instant: int) -> Optional[str]:
        for name, rng in zip(WINDOW_NAMES, self):
            if rng.includes(instant):
                return name
        return None

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {name: rng.to_dict() for name, rng in zip(WINDOW_NAMES, self)}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Windows":
        missing = [n for n in WINDOW_NAMES if n not in d]
        if missing:
            raise KeyError(f"windows missing {', '.join(missing)}")
        return cls(*(WindowRange.from_dict(d[n]) for n in WINDOW_NAMES))


__all__ = ["WINDOW_NAMES", "WindowRange", "Windows"]
