"""
dao.accounts.base — shared helpers for governance account records.

Accounts are frozen dataclasses. Handlers never mutate an account they read from a
snapshot; they derive the next value with `dataclasses.replace` and hand it back to the
runtime, which owns persistence.

Account hash
------------
``sha3_256(cbor2.dumps(account.to_dict(), canonical=True))`` rendered as hex. Canonical
CBOR gives every replica the same bytes for the same record regardless of dict ordering.

Account ids
-----------
Issue and proposal ids are derived, not chosen: ``blake2b-256("issue-{n}")`` and
``blake2b-256("issue-{n}-proposal-{k}")`` as lowercase hex. Proposal 1 of every issue is
the default ("no change") proposal.
"""

from __future__ import annotations

import hashlib
from typing import Any, Mapping

import cbor2

DEFAULT_PROPOSAL_INDEX = 1


def hash_id(text: str) -> str:
    """BLAKE2b-256 hex digest of `text` (UTF-8)."""
    return hashlib.blake2b(text.encode("utf-8"), digest_size=32).hexdigest()


def issue_id(number: int) -> str:
    return hash_id(f"issue-{int(number)}")


def proposal_id(issue_number: int, index: int) -> str:
    return hash_id(f"issue-{int(issue_number)}-proposal-{int(index)}")


def default_proposal_id(issue_number: int) -> str:
    """Id of the canonical null-choice proposal of an issue."""
    return proposal_id(issue_number, DEFAULT_PROPOSAL_INDEX)


def account_hash(record: Mapping[str, Any]) -> str:
    return hashlib.sha3_256(cbor2.dumps(dict(record), canonical=True)).hexdigest()


class HashedAccount:
    """Mixin giving dataclass accounts a content hash over their wire form."""

    def to_dict(self) -> dict:  # pragma: no cover - overridden
        raise NotImplementedError

    @property
    def hash(self) -> str:
        return account_hash(self.to_dict())


__all__ = [
    "DEFAULT_PROPOSAL_INDEX",
    "hash_id",
    "issue_id",
    "proposal_id",
    "default_proposal_id",
    "account_hash",
    "HashedAccount",
]
