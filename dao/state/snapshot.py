"""
dao.state.snapshot — the account snapshot handed to a handler by the runtime.

The runtime resolves every id declared by `keys()` and passes the results as a
``WrappedStates`` mapping (account id → `WrappedAccount`). Handlers read accounts through
typed lookups; a missing id and an id of the wrong account kind are the same miss:

    find(id, IssueAccount)     -> IssueAccount | None
    require(id, IssueAccount)  -> IssueAccount, or raises AccountNotFound

Writes replace the wrapped value (`put`); the runtime persists whatever the snapshot
holds once apply returns.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import (Any, Dict, Iterator, Mapping, MutableMapping, Optional,
                    Type, TypeVar)

from ..errors import AccountNotFound

A = TypeVar("A")


@dataclass(frozen=True)
class WrappedAccount:
    account_id: str
    data: Any
    timestamp: int = 0
    state_id: str = ""

    @classmethod
    def wrap(cls, account: Any) -> "WrappedAccount":
        return cls(
            account_id=account.id,
            data=account,
            timestamp=int(getattr(account, "timestamp", 0)),
            state_id=account.hash,
        )


class WrappedStates(MutableMapping[str, WrappedAccount]):
    """Mutable mapping of account id → WrappedAccount with typed lookups."""

    def __init__(self, accounts: Optional[Mapping[str, WrappedAccount]] = None):
        self._items: Dict[str, WrappedAccount] = dict(accounts or {})

    @classmethod
    def of(cls, *accounts: Any) -> "WrappedStates":
        return cls({a.id: WrappedAccount.wrap(a) for a in accounts})

    # -- MutableMapping ------------------------------------------------------

    def __getitem__(self, key: str) -> WrappedAccount:
        return self._items[key]

    def __setitem__(self, key: str, value: WrappedAccount) -> None:
        self._items[key] = value

    def __delitem__(self, key: str) -> None:
        del self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    # -- typed access --------------------------------------------------------

    def find(self, account_id: Any, kind: Type[A]) -> Optional[A]:
        if not isinstance(account_id, str):
            return None
        wrapped = self._items.get(account_id)
        if wrapped is None or not isinstance(wrapped.data, kind):
            return None
        return wrapped.data

    def require(self, account_id: str, kind: Type[A]) -> A:
        found = self.find(account_id, kind)
        if found is None:
            raise AccountNotFound(account_id, kind=kind.__name__)
        return found

    def put(self, account: Any) -> None:
        """Replace (or insert) an account value, refreshing its wrapper metadata."""
        prev = self._items.get(account.id)
        wrapped = WrappedAccount.wrap(account)
        if prev is not None:
            wrapped = replace(prev, data=account, timestamp=wrapped.timestamp, state_id=wrapped.state_id)
        self._items[account.id] = wrapped

    def accounts(self) -> Dict[str, Any]:
        return {k: w.data for k, w in self._items.items()}


__all__ = ["WrappedAccount", "WrappedStates"]
