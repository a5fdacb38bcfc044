from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


PoolModel = Literal["damm_v2", "dlmm"]

POOL_MODELS: tuple[PoolModel, ...] = ("damm_v2", "dlmm")


@dataclass(frozen=True)
class NativeAsset:
    mint: str
    symbol: str


@dataclass(frozen=True)
class PoolSummary:
    pool_address: str
    mint_a: str
    mint_b: str
    reserve_a: str | None
    reserve_b: str | None
    tvl: str | None
    fee_bps: str | None
    model: PoolModel
    symbol_a: str | None = None
    symbol_b: str | None = None
    name: str | None = None
    bin_step: int | None = None


@dataclass(frozen=True)
class TransferFee:
    epoch: int
    maximum_fee: int
    basis_points: int


@dataclass(frozen=True)
class TransferFeeSchedule:
    older: TransferFee
    newer: TransferFee

    def fee_at(self, epoch: int) -> TransferFee:
        return self.newer if epoch >= self.newer.epoch else self.older


@dataclass(frozen=True)
class MintInfo:
    address: str
    decimals: int
    transfer_fee: TransferFeeSchedule | None = None
