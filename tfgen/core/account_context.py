"""
Last known AWS account and region.

The HTTP layer writes the cache after a successful identity check and reads
it when generating; generation itself only ever receives an explicit
AccountContext.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AccountContext:
    account: Optional[str] = None
    region: Optional[str] = None
    connected: bool = False


class AccountCache:
    """Process-wide holder with last-write-wins semantics."""

    def __init__(self):
        self._context = AccountContext()

    def get(self) -> AccountContext:
        return self._context

    def update(self, context: AccountContext) -> None:
        self._context = context

    def clear(self) -> None:
        self._context = AccountContext()


account_cache = AccountCache()
