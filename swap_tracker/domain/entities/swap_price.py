from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from swap_tracker.domain.entities.pool import PoolModel


@dataclass(frozen=True)
class Quote:
    amount_in: int
    amount_out: int
    min_amount_out: int
    total_fee: int
    price_impact: Decimal | None = None


@dataclass(frozen=True)
class PoolQuote:
    quote: Quote
    output_decimals: int
    fee_decimals: int
    spot_price: Decimal | None
    token_symbol: str | None
    model: PoolModel


@dataclass(frozen=True)
class PriceObservation:
    pool_address: str
    amount_out_for_1_native: str
    total_tvl: str
    token_symbol: str | None
    token_address: str
    observed_at: datetime
    spot_price: str | None = None
    fee: str | None = None
    price_impact: str | None = None
    min_amount_out: str | None = None
    pool_model: PoolModel | None = None

    def to_record(self) -> dict:
        record = {
            "pool_address": self.pool_address,
            "amount_out_for_1_native": self.amount_out_for_1_native,
            "total_tvl": self.total_tvl,
            "token_symbol": self.token_symbol,
            "token_address": self.token_address,
        }
        optional = {
            "spot_price": self.spot_price,
            "fee": self.fee,
            "price_impact": self.price_impact,
            "min_amount_out": self.min_amount_out,
            "pool_model": self.pool_model,
        }
        record.update({key: value for key, value in optional.items() if value is not None})
        return record
