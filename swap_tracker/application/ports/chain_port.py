from __future__ import annotations

from typing import Protocol

from swap_tracker.domain.entities.pool import MintInfo
from swap_tracker.domain.entities.pool_state import Bin, BinPoolState, CurvePoolState


class ChainPort(Protocol):
    def get_mints(self, *, addresses: list[str]) -> dict[str, MintInfo]:
        ...

    def get_epoch(self) -> int:
        ...

    def get_slot(self) -> int:
        ...


class CurvePoolStatePort(Protocol):
    def get_curve_pool_state(self, *, pool_address: str) -> CurvePoolState | None:
        ...


class BinPoolStatePort(Protocol):
    def get_bin_pool_state(self, *, pool_address: str) -> BinPoolState | None:
        ...

    def get_bins(
        self,
        *,
        pool_address: str,
        active_id: int,
        swap_for_y: bool,
        array_count: int,
    ) -> dict[int, Bin]:
        ...
