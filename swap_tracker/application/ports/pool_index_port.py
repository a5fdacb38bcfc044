from __future__ import annotations

from typing import Protocol

from swap_tracker.domain.entities.pool import PoolSummary


class PoolIndexPort(Protocol):
    def discover(self, *, token_address: str) -> list[PoolSummary]:
        ...
