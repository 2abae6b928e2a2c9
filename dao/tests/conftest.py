"""
Shared fixtures for the governance handler tests.

`make_world` builds a consistent snapshot for one open issue:

    network  : issue 1, windows scheduled from t=0 with 1s per phase
               (grace window = [2000, 3000))
    issue    : proposal_count = len(powers)
    proposals: proposal k gets powers[k-1]; proposal 1 is the default
    node     : "node-1", the submitter

and a Tally for it timestamped inside the grace window.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

import pytest
from hypothesis import HealthCheck, settings

from dao.accounts import (IssueAccount, NetworkAccount, NodeAccount,
                          ProposalAccount, issue_id, proposal_id)
from dao.config import DaoConfig, load_config
from dao.state.snapshot import WrappedStates
from dao.tally.scheduler import schedule_cycle

settings.register_profile(
    "dev",
    settings(max_examples=100, deadline=None, suppress_health_check=(HealthCheck.too_slow,)),
)
settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        derandomize=True,
        suppress_health_check=(HealthCheck.too_slow,),
    ),
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci" if os.getenv("CI") else "dev"))


NETWORK = "network-" + "0" * 56
NODE = "node-1"
TALLY_TS = 2500


@pytest.fixture
def cfg() -> DaoConfig:
    return load_config(
        env={},
        overrides={
            "dao_account_address": NETWORK,
            "time_for_proposals": 1000,
            "time_for_voting": 1000,
            "time_for_grace": 1000,
            "time_for_apply": 1000,
            "global_msg_delay": 10_000,
        },
    )


@dataclass
class World:
    cfg: DaoConfig
    network: NetworkAccount
    issue: IssueAccount
    proposals: List[ProposalAccount]
    node: Optional[NodeAccount]
    states: WrappedStates = field(init=False)

    def __post_init__(self) -> None:
        accounts: List[Any] = [self.network, self.issue, *self.proposals]
        if self.node is not None:
            accounts.append(self.node)
        self.states = WrappedStates.of(*accounts)

    @property
    def default(self) -> ProposalAccount:
        return self.proposals[0]

    def tally(self, **over: Any) -> Dict[str, Any]:
        tx: Dict[str, Any] = {
            "type": "tally",
            "nodeId": NODE,
            "from": NODE,
            "issue": self.issue.id,
            "proposals": [p.id for p in self.proposals],
            "timestamp": TALLY_TS,
        }
        tx.update(over)
        return tx

    def current(self, account_id: str) -> Any:
        return self.states[account_id].data


@pytest.fixture
def make_world(cfg: DaoConfig):
    def _make(
        powers: Sequence[Any] = (0, 140, 100),
        *,
        number: int = 1,
        with_node: bool = True,
        **issue_over: Any,
    ) -> World:
        proposals = [
            ProposalAccount(
                id=proposal_id(number, k),
                power=power,
                parameters={"fee": k},
                number=k,
            )
            for k, power in enumerate(powers, start=1)
        ]
        issue = IssueAccount(id=issue_id(number), number=number, proposal_count=len(proposals))
        if issue_over:
            issue = replace(issue, **issue_over)
        network = NetworkAccount(
            id=cfg.dao_account_address,
            issue=number,
            windows=schedule_cycle(0, cfg.windows),
            current={"fee": 0},
        )
        node = NodeAccount(NODE) if with_node else None
        return World(cfg=cfg, network=network, issue=issue, proposals=proposals, node=node)

    return _make
