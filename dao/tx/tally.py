"""
dao.tx.tally — the Tally transaction handler.

A Tally closes voting on the network's current issue. The runtime drives it through

    validate_fields → validate → (consensus) → apply → transaction_receipt_pass

and calls `keys` beforehand to place and lock every account the handler touches.

apply
  * ranks the submitted proposals and applies the margin rule (dao.tally.resolver);
  * schedules the next cycle's four windows starting at the apply timestamp
    (dao.tally.scheduler);
  * stages an ``apply_tally`` global message for ``tx_timestamp + global_msg_delay``
    on the apply response;
  * records the winner on the issue, the winner flags on the proposals, and touches
    the timestamps of the submitter, the issue and the winner.

transaction_receipt_pass
  commits the staged message through ``dapp.set_global`` once the receipt is accepted,
  so every replica applies the network change at the same instant.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Set, Union

from ..access_list.keys import TransactionKeys
from ..accounts import (IssueAccount, NetworkAccount, NodeAccount,
                        ProposalAccount, default_proposal_id,
                        proposal_id)
from ..config import DaoConfig, get_config
from ..errors import InvalidTransaction, MalformedTransaction
from ..logging import get_logger
from ..runtime.dapp import Dapp
from ..runtime.deferred import DeferredGlobalMessage, apply_tally_value
from ..state.snapshot import WrappedStates
from ..tally.resolver import resolve_winner
from ..tally.scheduler import schedule_cycle
from ..types.result import (ApplyResponse, IncomingTransactionResult,
                            WrappedResponse)
from ..types.tx import Tally

log = get_logger(__name__)

TxLike = Union[Tally, Mapping[str, Any]]

VALID_REASON = "This transaction is valid!"


def _as_tally(tx: TxLike) -> Tally:
    return tx if isinstance(tx, Tally) else Tally.from_dict(tx)


def _reject(response: IncomingTransactionResult, reason: str) -> IncomingTransactionResult:
    response.success = False
    response.reason = reason
    log.debug("tally_rejected", reason=reason)
    return response


# --------------------------------------------------------------------------------------
# Validation
# --------------------------------------------------------------------------------------


def validate_fields(
    tx: TxLike, response: Optional[IncomingTransactionResult] = None
) -> IncomingTransactionResult:
    """
    Shape check. Raises MalformedTransaction at the first bad field, after recording
    the reason on `response`.
    """
    t = _as_tally(tx)
    response = response if response is not None else IncomingTransactionResult()

    checks = (
        ("nodeId", isinstance(t.node_id, str), "a string"),
        ("from", isinstance(t.from_, str), "a string"),
        ("issue", isinstance(t.issue, str), "a string"),
        ("proposals", isinstance(t.proposals, (list, tuple)), "an array"),
        (
            "timestamp",
            isinstance(t.timestamp, int) and not isinstance(t.timestamp, bool),
            "an integer",
        ),
    )
    for name, ok, expected in checks:
        if not ok:
            response.success = False
            response.reason = f'tx "{name}" field must be {expected}.'
            raise MalformedTransaction(response.reason, field=name)
    return response


def validate(
    tx: TxLike,
    wrapped_states: WrappedStates,
    response: Optional[IncomingTransactionResult] = None,
    *,
    config: Optional[DaoConfig] = None,
) -> IncomingTransactionResult:
    """
    Semantic check against the current snapshot. Never raises for an invalid
    transaction; the first failing rule's reason is returned on `response`.
    """
    cfg = config or get_config()
    t = _as_tally(tx)
    response = response if response is not None else IncomingTransactionResult()

    network = wrapped_states.find(cfg.dao_account_address, NetworkAccount)
    issue = wrapped_states.find(t.issue, IssueAccount)

    if network is None or network.id != cfg.dao_account_address:
        return _reject(response, "To account must be the network account")
    if issue is None:
        return _reject(response, "Issue doesn't exist")
    if issue.number != network.issue:
        return _reject(
            response,
            f"This issue number {issue.number} does not match the current network issue {network.issue}",
        )
    if not issue.active:
        return _reject(response, "This issue is no longer active")
    if issue.winner_id is not None:
        return _reject(response, "The winner for this issue has already been determined")
    if len(t.proposals) != issue.proposal_count:
        return _reject(
            response,
            "The number of proposals sent in with the transaction doesnt match the issues proposalCount",
        )
    for pid in t.proposals:
        if wrapped_states.find(pid, ProposalAccount) is None:
            return _reject(response, f"Proposal {pid} doesn't exist")
    seen: Set[str] = set()
    members = {proposal_id(issue.number, k) for k in range(1, issue.proposal_count + 1)}
    for pid in t.proposals:
        if pid in seen:
            return _reject(response, f"Proposal {pid} is listed more than once")
        if pid not in members:
            return _reject(response, f"Proposal {pid} is not part of issue {issue.number}")
        seen.add(pid)
    if network.windows.grace_window.excludes(t.timestamp):
        return _reject(
            response, "Network is not within the time window to tally votes for proposals"
        )

    response.success = True
    response.reason = VALID_REASON
    return response


# --------------------------------------------------------------------------------------
# Apply / receipt
# --------------------------------------------------------------------------------------


def apply(
    tx: TxLike,
    tx_timestamp: int,
    wrapped_states: WrappedStates,
    dapp: Dapp,
    apply_response: ApplyResponse,
    *,
    config: Optional[DaoConfig] = None,
) -> None:
    cfg = config or get_config()
    t = _as_tally(tx)
    address = cfg.dao_account_address

    from_ = wrapped_states.require(t.from_, NodeAccount)
    wrapped_states.require(address, NetworkAccount)
    issue = wrapped_states.require(t.issue, IssueAccount)
    if issue.winner_id is not None:
        raise InvalidTransaction(
            "The winner for this issue has already been determined",
            data={"issue": issue.id, "winnerId": issue.winner_id},
        )

    proposals = [wrapped_states.require(pid, ProposalAccount) for pid in t.proposals]
    default_id = default_proposal_id(issue.number)
    default = next((p for p in proposals if p.id == default_id), None)
    if default is None:
        default = wrapped_states.require(default_id, ProposalAccount)

    outcome = resolve_winner(proposals, issue.proposal_count, default)
    winner = outcome.winner.touched(tx_timestamp)

    next_windows = schedule_cycle(tx_timestamp, cfg.windows)
    when = tx_timestamp + cfg.global_msg_delay
    value = apply_tally_value(
        when=when, network=address, next_params=winner.parameters, next_windows=next_windows
    )
    apply_response.app_defined_data.global_msg = DeferredGlobalMessage(
        address=address, value=value, when=when, source=address
    )

    writes = [p for p in outcome.proposals if p.id != winner.id]
    writes += [
        winner,
        issue.with_winner(winner.id, tx_timestamp),
        from_.touched(tx_timestamp),
    ]
    for account in writes:
        wrapped_states.put(account)
        apply_response.account_writes.append(
            dapp.create_wrapped_response(account.id, False, account.hash, account.timestamp, account)
        )

    log.info(
        "tally_applied",
        issue=issue.id,
        number=issue.number,
        winner=winner.id,
        decided=outcome.decided,
        margin=str(outcome.margin),
        when=when,
    )
    dapp.log("Applied tally tx", issue.id, winner.id)


def transaction_receipt_pass(
    tx: TxLike,
    wrapped_states: WrappedStates,
    dapp: Dapp,
    apply_response: ApplyResponse,
) -> None:
    t = _as_tally(tx)
    issue = wrapped_states.require(t.issue, IssueAccount)
    default_id = default_proposal_id(issue.number)

    msg = apply_response.app_defined_data.global_msg
    if msg is None:
        raise InvalidTransaction(
            "no staged global message for tally receipt", data={"issue": issue.id}
        )
    dapp.set_global(msg.address, msg.value, msg.when, msg.source)
    log.info("tally_committed", issue=issue.id, when=msg.when, default_proposal=default_id)
    dapp.log("PostApplied tally tx", issue.id, default_id)


# --------------------------------------------------------------------------------------
# Keys / accounts
# --------------------------------------------------------------------------------------


def keys(
    tx: TxLike,
    result: Optional[TransactionKeys] = None,
    *,
    config: Optional[DaoConfig] = None,
) -> TransactionKeys:
    cfg = config or get_config()
    t = _as_tally(tx)
    result = result if result is not None else TransactionKeys()
    result.source_keys = [t.from_]
    result.target_keys = [*t.proposals, t.issue, cfg.dao_account_address]
    result.all_keys = [*result.source_keys, *result.target_keys]
    return result


def create_relevant_account(
    dapp: Dapp,
    account: Optional[Union[NodeAccount, IssueAccount]],
    account_id: str,
    account_created: bool = False,
) -> WrappedResponse:
    """Wrap `account` for the runtime, creating a bare NodeAccount when it is missing."""
    if account is None:
        account = NodeAccount(account_id)
        account_created = True
    return dapp.create_wrapped_response(
        account_id, account_created, account.hash, account.timestamp, account
    )


__all__ = [
    "VALID_REASON",
    "validate_fields",
    "validate",
    "apply",
    "transaction_receipt_pass",
    "keys",
    "create_relevant_account",
]
