from __future__ import annotations

from swap_tracker.domain.entities.pool import MintInfo


BASIS_POINT_MAX = 10_000


def calculate_transfer_fee(*, mint: MintInfo, amount: int, epoch: int) -> int:
    if mint.transfer_fee is None or amount <= 0:
        return 0
    fee = mint.transfer_fee.fee_at(epoch)
    if fee.basis_points == 0:
        return 0
    raw_fee = -(-amount * fee.basis_points // BASIS_POINT_MAX)
    return min(raw_fee, fee.maximum_fee)


def amount_after_transfer_fee(*, mint: MintInfo, amount: int, epoch: int) -> int:
    return amount - calculate_transfer_fee(mint=mint, amount=amount, epoch=epoch)
