from __future__ import annotations

from typing import Protocol

from swap_tracker.domain.entities.pool import PoolSummary
from swap_tracker.domain.entities.swap_price import PoolQuote


class QuoterPort(Protocol):
    def quote(self, *, pool: PoolSummary, token_address: str) -> PoolQuote:
        ...
