import pytest

from dao.accounts import NetworkAccount
from dao.errors import InvalidTransaction
from dao.runtime.dapp import LocalDapp
from dao.runtime.deferred import (APPLY_TALLY, CycleLog, DeferredGlobalMessage,
                                  DeferredQueue, apply_tally_message,
                                  apply_tally_value)
from dao.state.snapshot import WrappedStates
from dao.tally.scheduler import CycleDurations, schedule_cycle

NET = "net"
WINDOWS = schedule_cycle(0, CycleDurations(10, 10, 10, 10))


def _msg(when, **next_params):
    value = apply_tally_value(
        when=when,
        network=NET,
        next_params=next_params,
        next_windows=schedule_cycle(when, CycleDurations(10, 10, 10, 10)),
    )
    return DeferredGlobalMessage(address=NET, value=value, when=when, source=NET)


def _network():
    return NetworkAccount(id=NET, issue=1, windows=WINDOWS)


def test_due_releases_confirmed_in_time_order():
    q = DeferredQueue()
    for tx_id, when in (("a", 30), ("b", 10), ("c", 20)):
        q.stage(tx_id, _msg(when))
        q.confirm(tx_id)
    assert [m.when for m in q.pending()] == [10, 20, 30]
    assert [m.when for m in q.due(25)] == [10, 20]
    assert q.due(25) == []
    assert [m.when for m in q.due(30)] == [30]
    assert len(q) == 0


def test_equal_instants_keep_staging_order():
    q = DeferredQueue()
    q.stage("a", _msg(5, fee=1))
    q.stage("b", _msg(5, fee=2))
    q.confirm("a")
    q.confirm("b")
    assert [m.value["next"]["fee"] for m in q.due(5)] == [1, 2]


def test_unconfirmed_messages_are_held():
    q = DeferredQueue()
    q.stage("a", _msg(5))
    assert q.due(100) == []
    assert len(q) == 1
    q.confirm("a")
    assert [m.when for m in q.due(100)] == [5]


def test_discarded_messages_vanish():
    q = DeferredQueue()
    q.stage("a", _msg(5))
    q.stage("b", _msg(6))
    q.confirm("a")
    q.confirm("b")
    q.discard("a")
    assert [m.when for m in q.due(100)] == [6]


def test_message_dict_form():
    m = _msg(7, fee=3)
    d = m.to_dict()
    assert set(d) == {"address", "value", "when", "source"}
    assert d["value"]["type"] == APPLY_TALLY
    assert DeferredGlobalMessage.from_dict(d) == m
    assert m.as_tuple() == (NET, m.value, 7, NET)


def test_apply_tally_message_sets_next():
    nxt = apply_tally_message(_network(), _msg(40, fee=9).value)
    assert nxt.next == {"fee": 9}
    assert nxt.next_windows == schedule_cycle(40, CycleDurations(10, 10, 10, 10))
    assert nxt.timestamp == 40
    assert nxt.windows == WINDOWS


def test_apply_tally_message_rejects_wrong_type():
    value = dict(_msg(40).value, type="something_else")
    with pytest.raises(InvalidTransaction):
        apply_tally_message(_network(), value)


def test_apply_tally_message_rejects_other_network():
    value = dict(_msg(40).value, network="other")
    with pytest.raises(InvalidTransaction):
        apply_tally_message(_network(), value)


def test_cycle_log_appends():
    log = CycleLog()
    assert log.last() is None
    net = log.append(_network(), _msg(40, fee=1))
    net = log.append(net, _msg(80, fee=2))
    assert len(log) == 2
    assert [t.when for t in log] == [40, 80]
    assert log.last().next == {"fee": 2}
    assert log.last().to_dict()["nextWindows"] == net.next_windows.to_dict()


def test_set_global_outside_receipt_is_confirmed(cfg):
    states = WrappedStates.of(NetworkAccount(id=NET, issue=1, windows=WINDOWS))
    dapp = LocalDapp(states, config=cfg)
    m = _msg(50, fee=4)
    dapp.set_global(*m.as_tuple())
    assert dapp.advance(50) == [m]
    assert states.require(NET, NetworkAccount).next == {"fee": 4}


def test_release_forgets_confirmation():
    q = DeferredQueue()
    q.stage("a", _msg(5))
    q.confirm("a")
    assert [m.when for m in q.due(5)] == [5]
    # a later message under the same id needs its own confirmation
    q.stage("a", _msg(9))
    assert q.due(100) == []
    q.confirm("a")
    assert [m.when for m in q.due(100)] == [9]


def test_confirmation_kept_while_messages_remain():
    q = DeferredQueue()
    q.stage("a", _msg(5))
    q.stage("a", _msg(50))
    q.confirm("a")
    assert [m.when for m in q.due(10)] == [5]
    assert [m.when for m in q.due(50)] == [50]
