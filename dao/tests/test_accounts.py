import pytest

from dao.accounts import (IssueAccount, NetworkAccount, NodeAccount,
                          ProposalAccount, account_from_dict, default_proposal_id,
                          hash_id, issue_id, proposal_id)
from dao.errors import AccountNotFound
from dao.state.snapshot import WrappedStates
from dao.tally.scheduler import CycleDurations, schedule_cycle


def test_derived_ids():
    assert len(issue_id(1)) == 64
    assert issue_id(1) == hash_id("issue-1")
    assert proposal_id(3, 2) == hash_id("issue-3-proposal-2")
    assert default_proposal_id(3) == proposal_id(3, 1)
    assert issue_id(1) != issue_id(2)


def test_hash_ignores_construction_order():
    a = ProposalAccount(id="p", power=5, parameters={"a": 1, "b": 2})
    b = ProposalAccount(id="p", power=5, parameters={"b": 2, "a": 1})
    assert a.hash == b.hash
    assert a.hash != a.with_winner(True).hash


@pytest.mark.parametrize(
    "account",
    [
        NetworkAccount(id="n", issue=4, windows=schedule_cycle(0, CycleDurations(1, 2, 3, 4))),
        IssueAccount(id="i", number=4, proposal_count=2, winner_id="p"),
        ProposalAccount(id="p", power=12, parameters={"fee": 1}, number=2),
        NodeAccount(id="node", timestamp=3),
    ],
)
def test_account_from_dict_dispatches_on_type(account):
    assert account_from_dict(account.to_dict()) == account


def test_unknown_account_type():
    with pytest.raises(ValueError):
        account_from_dict({"type": "Mystery", "id": "x"})


def test_typed_lookups():
    states = WrappedStates.of(NodeAccount("n1"), IssueAccount(id="i1", number=1))
    assert states.find("n1", NodeAccount) == NodeAccount("n1")
    assert states.find("n1", IssueAccount) is None
    assert states.find(None, NodeAccount) is None
    assert states.find("missing", NodeAccount) is None
    with pytest.raises(AccountNotFound) as ei:
        states.require("n1", IssueAccount)
    assert ei.value.message == "IssueAccount n1 doesn't exist"


def test_put_replaces_and_rewraps():
    states = WrappedStates.of(NodeAccount("n1"))
    states.put(NodeAccount("n1").touched(9))
    wrapped = states["n1"]
    assert wrapped.timestamp == 9
    assert wrapped.state_id == NodeAccount("n1", timestamp=9).hash
    assert len(states) == 1
