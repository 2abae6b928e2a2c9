"""
dao.runtime.dapp — the runtime surface handlers call back into.

`Dapp` is the protocol the handlers depend on:

    create_wrapped_response(account_id, account_created, hash, timestamp, data)
    set_global(address, value, when, source)
    log(*args)

`LocalDapp` is a single-replica, in-memory implementation. It drives a transaction
through the full lifecycle against a `WrappedStates` snapshot, stages global messages
in a `DeferredQueue` at apply time, confirms them in the receipt pass, and applies due
messages to the network account through the `CycleLog`. Tests and the CLI use it; a
networked runtime supplies its own implementation of the protocol.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (Any, Dict, List, Mapping, Optional, Protocol, Tuple,
                    runtime_checkable)

from ..accounts.network import NetworkAccount
from ..config import DaoConfig, get_config
from ..errors import DaoError, InvalidTransaction, MalformedTransaction
from ..logging import bind_tx_context, clear_tx_context, get_logger
from ..state.snapshot import WrappedStates
from ..types.result import (ApplyResponse, IncomingTransactionResult,
                            WrappedResponse)
from ..types.tx import tx_hash
from .deferred import CycleLog, DeferredGlobalMessage, DeferredQueue

log = get_logger(__name__)


@runtime_checkable
class Dapp(Protocol):
    def create_wrapped_response(
        self, account_id: str, account_created: bool, hash: str, timestamp: int, data: Any
    ) -> WrappedResponse: ...

    def set_global(self, address: str, value: Dict[str, Any], when: int, source: str) -> None: ...

    def log(self, *args: Any) -> None: ...


@dataclass
class RunReport:
    tx_id: str
    result: IncomingTransactionResult
    keys: Dict[str, List[str]] = field(default_factory=dict)
    apply_response: Optional[ApplyResponse] = None
    committed: bool = False
    error: Optional[Dict[str, Any]] = None

    @property
    def applied(self) -> bool:
        return self.apply_response is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "txId": self.tx_id,
            "result": self.result.to_dict(),
            "keys": self.keys,
            "applied": self.applied,
            "committed": self.committed,
            "applyResponse": self.apply_response.to_dict() if self.apply_response else None,
            "error": self.error,
        }


class LocalDapp:
    """In-memory runtime for one replica."""

    def __init__(self, states: WrappedStates, *, config: Optional[DaoConfig] = None):
        self.states = states
        self.config = config or get_config()
        self.queue = DeferredQueue()
        self.cycle_log = CycleLog()
        self.log_lines: List[Tuple[Any, ...]] = []
        self._inflight: Dict[str, Tuple[Any, Mapping[str, Any], ApplyResponse]] = {}
        self._receipt_tx: Optional[str] = None

    # -- Dapp protocol -------------------------------------------------------

    def create_wrapped_response(
        self, account_id: str, account_created: bool, hash: str, timestamp: int, data: Any
    ) -> WrappedResponse:
        return WrappedResponse(
            account_id=account_id,
            account_created=account_created,
            state_id=hash,
            timestamp=timestamp,
            data=data,
        )

    def set_global(self, address: str, value: Dict[str, Any], when: int, source: str) -> None:
        msg = DeferredGlobalMessage(address=address, value=value, when=when, source=source)
        tx_id = self._receipt_tx or f"global:{address}:{when}"
        if msg not in self.queue.pending():
            self.queue.stage(tx_id, msg)
        self.queue.confirm(tx_id)

    def log(self, *args: Any) -> None:
        self.log_lines.append(args)
        log.info("dapp_log", message=str(args[0]) if args else "", args=[str(a) for a in args[1:]])

    # -- lifecycle -----------------------------------------------------------

    def submit(self, tx: Mapping[str, Any], timestamp: Optional[int] = None) -> RunReport:
        """
        Run field validation, validation and apply. The staged global message waits
        in the queue, unconfirmed, until `confirm_receipt` (or `abort`).
        """
        from .dispatcher import handler_for

        module = handler_for(tx)
        tx_id = tx_hash(tx)
        response = IncomingTransactionResult()
        report = RunReport(tx_id=tx_id, result=response)

        bind_tx_context(tx_id=tx_id, tx_type=tx.get("type"))
        try:
            try:
                module.validate_fields(tx, response)
            except MalformedTransaction as e:
                report.error = e.to_dict()
                return report

            ts = int(timestamp) if timestamp is not None else int(tx["timestamp"])
            response.txn_timestamp = ts
            report.keys = module.keys(tx, config=self.config).to_dict()
            self._ensure_relevant_accounts(module, report.keys.get("sourceKeys", []))

            module.validate(tx, self.states, response, config=self.config)
            if not response.success:
                return report

            apply_response = ApplyResponse(tx_id=tx_id, tx_timestamp=ts)
            try:
                module.apply(tx, ts, self.states, self, apply_response, config=self.config)
            except DaoError as e:
                response.success = False
                response.reason = e.message
                report.error = e.to_dict()
                return report

            msg = apply_response.app_defined_data.global_msg
            if msg is not None:
                self.queue.stage(tx_id, msg)
            self._inflight[tx_id] = (module, tx, apply_response)
            report.apply_response = apply_response
            return report
        finally:
            clear_tx_context("tx_id", "tx_type")

    def confirm_receipt(self, tx_id: str) -> None:
        """Receipt accepted by consensus: run the handler's receipt pass."""
        try:
            module, tx, apply_response = self._inflight.pop(tx_id)
        except KeyError:
            raise InvalidTransaction(f"no applied transaction {tx_id}") from None
        self._receipt_tx = tx_id
        try:
            module.transaction_receipt_pass(tx, self.states, self, apply_response)
        finally:
            self._receipt_tx = None

    def abort(self, tx_id: str) -> None:
        """Drop an applied-but-unconfirmed transaction; its staged message never applies."""
        self._inflight.pop(tx_id, None)
        self.queue.discard(tx_id)

    def run(self, tx: Mapping[str, Any], timestamp: Optional[int] = None) -> RunReport:
        """submit + confirm_receipt in one step."""
        report = self.submit(tx, timestamp)
        if report.applied:
            self.confirm_receipt(report.tx_id)
            report.committed = True
        return report

    def advance(self, now: int) -> List[DeferredGlobalMessage]:
        """Apply every confirmed global message due at `now` to its network account."""
        applied = self.queue.due(now)
        for msg in applied:
            network = self.states.require(msg.address, NetworkAccount)
            self.states.put(self.cycle_log.append(network, msg))
            log.info("global_msg_applied", address=msg.address, when=msg.when)
        return applied

    # -- helpers -------------------------------------------------------------

    def _ensure_relevant_accounts(self, module: Any, account_ids: List[str]) -> None:
        create = getattr(module, "create_relevant_account", None)
        if create is None:
            return
        for account_id in account_ids:
            if account_id in self.states:
                continue
            wrapped = create(self, None, account_id)
            if wrapped.account_created:
                self.states.put(wrapped.data)


__all__ = ["Dapp", "LocalDapp", "RunReport"]
