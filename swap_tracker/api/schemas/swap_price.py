from __future__ import annotations

from pydantic import BaseModel, Field


class SwapPriceResponse(BaseModel):
    pool_address: str
    amount_out_for_1_native: str = Field(..., description="Token received for one native unit.")
    total_tvl: str = Field(..., description="Pool TVL reported by the index, 2 decimal places.")
    token_symbol: str | None = None
    token_address: str
    observed_at: str
    spot_price: str | None = Field(None, description="Current pool price as token per native unit.")
    fee: str | None = Field(None, description="Fee paid in the native asset.")
    price_impact: str | None = Field(None, description="Price impact in percent.")
    min_amount_out: str | None = Field(None, description="Minimum received after slippage.")
    pool_model: str | None = None


class ObservationsResponse(BaseModel):
    total: int
    data: list[dict]
