"""
dao.accounts — governance account records.

    NetworkAccount   : singleton global state (current issue, windows, next parameters)
    IssueAccount     : one governance cycle's ballot
    ProposalAccount  : one candidate proposal with accumulated voting power
    NodeAccount      : identity of a transaction submitter
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Type, Union

from .base import (account_hash, default_proposal_id, hash_id, issue_id,
                   proposal_id)
from .issue import IssueAccount
from .network import NetworkAccount
from .node import NodeAccount
from .proposal import ProposalAccount

Account = Union[NetworkAccount, IssueAccount, ProposalAccount, NodeAccount]

ACCOUNT_TYPES: Dict[str, Type[Any]] = {
    "NetworkAccount": NetworkAccount,
    "IssueAccount": IssueAccount,
    "ProposalAccount": ProposalAccount,
    "NodeAccount": NodeAccount,
}


def account_from_dict(d: Mapping[str, Any]) -> Account:
    """Decode an account from its wire form using the ``type`` tag."""
    kind = d.get("type")
    cls = ACCOUNT_TYPES.get(str(kind))
    if cls is None:
        raise ValueError(f"unknown account type: {kind!r}")
    return cls.from_dict(d)


__all__ = [
    "Account",
    "ACCOUNT_TYPES",
    "account_from_dict",
    "NetworkAccount",
    "IssueAccount",
    "ProposalAccount",
    "NodeAccount",
    "account_hash",
    "hash_id",
    "issue_id",
    "proposal_id",
    "default_proposal_id",
]
