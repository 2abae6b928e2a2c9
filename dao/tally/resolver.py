"""
dao.tally.resolver — pick the winning proposal of an issue.

Margin rule
-----------
With ``N`` proposals on the issue, the front-runner must beat the runner-up by a
relative margin of ``1 / (2 * (N + 1))``:

    first.power >= second.power + margin * second.power

Otherwise no proposal is adopted and the issue's default proposal (proposal 1, the
"no change" choice) wins. With fewer than two proposals the default also wins.

Ordering
--------
Proposals are ranked by power descending, then by account id ascending. The id
tie-break makes the ranking a total order, so every replica ranks equal-power
proposals identically regardless of the order the transaction listed them in.

Arithmetic uses `fractions.Fraction` so the comparison is exact at the boundary, for
integer and float powers alike.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, List, Optional, Tuple

from ..accounts.proposal import ProposalAccount


def margin_for(proposal_count: int) -> Fraction:
    """Minimum relative lead needed to win outright for an issue with N proposals."""
    if proposal_count < 0:
        raise ValueError("proposal_count must be non-negative")
    return Fraction(1, 2 * (proposal_count + 1))


def _rank_key(p: ProposalAccount) -> Tuple[Fraction, str]:
    return (-Fraction(p.power), p.id)


def rank_proposals(proposals: Iterable[ProposalAccount]) -> List[ProposalAccount]:
    return sorted(proposals, key=_rank_key)


@dataclass(frozen=True)
class TallyOutcome:
    winner: ProposalAccount
    proposals: Tuple[ProposalAccount, ...]
    margin: Fraction
    margin_to_win: Optional[Fraction] = None
    decided: bool = False

    def to_dict(self) -> dict:
        return {
            "winner": self.winner.id,
            "decided": self.decided,
            "margin": str(self.margin),
            "marginToWin": float(self.margin_to_win) if self.margin_to_win is not None else None,
            "ranking": [(p.id, p.power) for p in self.proposals],
        }


def resolve_winner(
    proposals: Iterable[ProposalAccount],
    proposal_count: int,
    default: ProposalAccount,
) -> TallyOutcome:
    """
    Rank `proposals`, apply the margin rule and return updated proposal values.

    Every returned proposal has ``winner=False`` except the chosen winner. When the
    default proposal wins and is also among `proposals`, the flagged copy replaces it in
    the returned tuple. Inputs are not modified.
    """
    ranked = rank_proposals(proposals)
    margin = margin_for(proposal_count)

    winner = default
    decided = False
    margin_to_win: Optional[Fraction] = None
    if len(ranked) >= 2:
        first, second = ranked[0], ranked[1]
        second_power = Fraction(second.power)
        margin_to_win = second_power + margin * second_power
        if Fraction(first.power) >= margin_to_win:
            winner = first
            decided = True

    flagged = winner.with_winner(True)
    cleared = tuple(
        flagged if p.id == winner.id else p.with_winner(False) for p in ranked
    )
    return TallyOutcome(
        winner=flagged,
        proposals=cleared,
        margin=margin,
        margin_to_win=margin_to_win,
        decided=decided,
    )


__all__ = ["TallyOutcome", "margin_for", "rank_proposals", "resolve_winner"]
