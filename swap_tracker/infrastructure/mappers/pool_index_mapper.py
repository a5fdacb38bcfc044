from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from swap_tracker.domain.entities.pool import PoolSummary


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _percent_to_bps(value: Any) -> str | None:
    text = _str_or_none(value)
    if text is None:
        return None
    try:
        return str(Decimal(text) * Decimal("100"))
    except InvalidOperation:
        return None


def map_damm_v2_row_to_pool_summary(row: Mapping[str, Any]) -> PoolSummary:
    return PoolSummary(
        pool_address=str(row["pool_address"]).strip(),
        mint_a=str(row["token_a_mint"]).strip(),
        mint_b=str(row["token_b_mint"]).strip(),
        reserve_a=_str_or_none(row.get("token_a_amount")),
        reserve_b=_str_or_none(row.get("token_b_amount")),
        tvl=_str_or_none(row.get("tvl")),
        fee_bps=_str_or_none(row.get("fee_bps")),
        model="damm_v2",
        symbol_a=_str_or_none(row.get("token_a_symbol")),
        symbol_b=_str_or_none(row.get("token_b_symbol")),
    )


def map_dlmm_row_to_pool_summary(row: Mapping[str, Any]) -> PoolSummary:
    bin_step = row.get("bin_step")
    return PoolSummary(
        pool_address=str(row["address"]).strip(),
        mint_a=str(row["mint_x"]).strip(),
        mint_b=str(row["mint_y"]).strip(),
        reserve_a=_str_or_none(row.get("reserve_x_amount")),
        reserve_b=_str_or_none(row.get("reserve_y_amount")),
        tvl=_str_or_none(row.get("liquidity")),
        fee_bps=_percent_to_bps(row.get("base_fee_percentage")),
        model="dlmm",
        symbol_a=_str_or_none(row.get("mint_x_symbol")),
        symbol_b=_str_or_none(row.get("mint_y_symbol")),
        name=_str_or_none(row.get("name")),
        bin_step=int(bin_step) if bin_step is not None else None,
    )
