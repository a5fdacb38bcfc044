from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal

from swap_tracker.domain.entities.pool import PoolSummary
from swap_tracker.domain.entities.swap_price import PoolQuote, PriceObservation
from swap_tracker.domain.services.decimal_amount import DecimalAmount, quantize_places
from swap_tracker.domain.services.pool_selection import parse_liquidity


AMOUNT_PLACES = 6
TVL_PLACES = 2
SPOT_PRICE_PLACES = 9
FEE_PLACES = 9
PRICE_IMPACT_PLACES = 3

DEFAULT_DISPLAY_LABELS = {
    "token_address": "MintB",
    "token_symbol": "Symbol name",
    "pool_address": "Pool address",
    "total_tvl": "TVL",
    "amount_out_for_1_native": "Price",
    "min_amount_out": "Minimum received",
    "fee": "Paid to Liquidity Provider",
    "spot_price": "Current Pool Price",
    "price_impact": "Price Impact",
    "pool_model": "Pool type",
}


def _optional_places(value: Decimal | None, places: int) -> str | None:
    if value is None:
        return None
    return quantize_places(value, places)


def build_price_observation(
    *,
    pool: PoolSummary,
    pool_quote: PoolQuote,
    token_address: str,
    observed_at: datetime,
) -> PriceObservation:
    quote = pool_quote.quote
    return PriceObservation(
        pool_address=pool.pool_address,
        amount_out_for_1_native=DecimalAmount(quote.amount_out, pool_quote.output_decimals).to_fixed(AMOUNT_PLACES),
        total_tvl=quantize_places(parse_liquidity(pool.tvl), TVL_PLACES),
        token_symbol=pool_quote.token_symbol,
        token_address=token_address,
        observed_at=observed_at,
        spot_price=_optional_places(pool_quote.spot_price, SPOT_PRICE_PLACES),
        fee=DecimalAmount(quote.total_fee, pool_quote.fee_decimals).to_fixed(FEE_PLACES),
        price_impact=_optional_places(quote.price_impact, PRICE_IMPACT_PLACES),
        min_amount_out=DecimalAmount(quote.min_amount_out, pool_quote.output_decimals).to_fixed(AMOUNT_PLACES),
        pool_model=pool_quote.model,
    )


def to_display_record(record: Mapping[str, object], labels: Mapping[str, str]) -> dict:
    return {labels.get(key, key): value for key, value in record.items()}
