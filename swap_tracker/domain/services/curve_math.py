from __future__ import annotations

from decimal import Decimal

from swap_tracker.domain.entities.pool_state import CurveBaseFee, CurveDynamicFee, CurvePoolState
from swap_tracker.domain.entities.swap_price import Quote


Q64 = 1 << 64
Q128 = 1 << 128
FEE_DENOMINATOR = 1_000_000_000
MAX_FEE_NUMERATOR = 500_000_000
BASIS_POINT_MAX = 10_000
DYNAMIC_FEE_SCALE = 100_000_000_000

ACTIVATION_BY_SLOT = 0
ACTIVATION_BY_TIMESTAMP = 1

FEE_SCHEDULER_LINEAR = 0
FEE_SCHEDULER_EXPONENTIAL = 1


def _div_ceil(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def sqrt_price_to_price(sqrt_price: int, decimals_a: int, decimals_b: int) -> Decimal:
    """Price of token A in units of token B (B per A), decimal adjusted."""
    if sqrt_price <= 0:
        raise ValueError("Invalid sqrt_price.")
    sqrt_value = Decimal(sqrt_price) / Decimal(Q64)
    decimal_adjust = Decimal(10) ** Decimal(decimals_a - decimals_b)
    return sqrt_value * sqrt_value * decimal_adjust


def current_point(state: CurvePoolState, *, current_slot: int, current_time: int) -> int:
    if state.activation_type == ACTIVATION_BY_TIMESTAMP:
        return current_time
    return current_slot


def base_fee_numerator(base_fee: CurveBaseFee, *, point: int, activation_point: int) -> int:
    if base_fee.period_frequency == 0:
        return base_fee.cliff_fee_numerator

    if point < activation_point:
        period = base_fee.number_of_period
    else:
        period = min(
            base_fee.number_of_period,
            (point - activation_point) // base_fee.period_frequency,
        )

    if base_fee.fee_scheduler_mode == FEE_SCHEDULER_EXPONENTIAL:
        keep = Decimal(BASIS_POINT_MAX - base_fee.reduction_factor) / Decimal(BASIS_POINT_MAX)
        return int(Decimal(base_fee.cliff_fee_numerator) * keep**period)

    reduced = base_fee.cliff_fee_numerator - period * base_fee.reduction_factor
    return max(reduced, 0)


def dynamic_fee_numerator(dynamic_fee: CurveDynamicFee) -> int:
    if not dynamic_fee.initialized or dynamic_fee.variable_fee_control == 0:
        return 0
    square_vfa_bin = (dynamic_fee.volatility_accumulator * dynamic_fee.bin_step) ** 2
    v_fee = square_vfa_bin * dynamic_fee.variable_fee_control
    return (v_fee + DYNAMIC_FEE_SCALE - 1) // DYNAMIC_FEE_SCALE


def total_fee_numerator(state: CurvePoolState, *, point: int) -> int:
    total = base_fee_numerator(
        state.base_fee,
        point=point,
        activation_point=state.activation_point,
    ) + dynamic_fee_numerator(state.dynamic_fee)
    return min(total, MAX_FEE_NUMERATOR)


def next_sqrt_price_from_input(*, sqrt_price: int, liquidity: int, amount_in: int, a_to_b: bool) -> int:
    if liquidity <= 0:
        raise ValueError("Pool has no liquidity.")
    if amount_in == 0:
        return sqrt_price
    if a_to_b:
        # sqrt_price decreases: L * sqrtP / (L + amount * sqrtP), rounded up
        product = amount_in * sqrt_price
        denominator = liquidity + product
        return _div_ceil(liquidity * sqrt_price, denominator)
    return sqrt_price + (amount_in << 128) // liquidity


def amount_out_between(*, sqrt_price: int, next_sqrt_price: int, liquidity: int, a_to_b: bool) -> int:
    if a_to_b:
        return (liquidity * (sqrt_price - next_sqrt_price)) >> 128
    lower, upper = sqrt_price, next_sqrt_price
    if lower == 0 or upper == 0:
        raise ValueError("Invalid sqrt_price.")
    return (liquidity * (upper - lower)) // (lower * upper)


def spot_amount_out(*, sqrt_price: int, amount_in: int, a_to_b: bool) -> Decimal:
    squared = Decimal(sqrt_price) * Decimal(sqrt_price)
    if a_to_b:
        return Decimal(amount_in) * squared / Decimal(Q128)
    if squared == 0:
        raise ValueError("Invalid sqrt_price.")
    return Decimal(amount_in) * Decimal(Q128) / squared


def price_impact_percent(*, spot_out: Decimal, actual_out: int) -> Decimal | None:
    if spot_out <= 0:
        return None
    return (spot_out - Decimal(actual_out)) / spot_out * Decimal(100)


def apply_slippage(amount: int, slippage_bps: int) -> int:
    if slippage_bps < 0 or slippage_bps > BASIS_POINT_MAX:
        raise ValueError("slippage_bps must be between 0 and 10000.")
    return amount * (BASIS_POINT_MAX - slippage_bps) // BASIS_POINT_MAX


def quote_exact_in(
    state: CurvePoolState,
    *,
    a_to_b: bool,
    amount_in: int,
    slippage_bps: int,
    point: int,
) -> Quote:
    """Quote an exact-input swap against the pool's single price range.

    The trading fee is charged on the input amount before it reaches the
    curve, so ``total_fee`` is denominated in the input token.
    """
    if amount_in <= 0:
        raise ValueError("amount_in must be positive.")
    if state.liquidity <= 0:
        raise ValueError("Pool has no liquidity.")

    fee_numerator = total_fee_numerator(state, point=point)
    trading_fee = _div_ceil(amount_in * fee_numerator, FEE_DENOMINATOR)
    amount_after_fee = amount_in - trading_fee

    next_sqrt_price = next_sqrt_price_from_input(
        sqrt_price=state.sqrt_price,
        liquidity=state.liquidity,
        amount_in=amount_after_fee,
        a_to_b=a_to_b,
    )
    if a_to_b and next_sqrt_price < state.sqrt_min_price:
        raise ValueError("Swap exceeds the pool's minimum price.")
    if not a_to_b and next_sqrt_price > state.sqrt_max_price:
        raise ValueError("Swap exceeds the pool's maximum price.")

    amount_out = amount_out_between(
        sqrt_price=state.sqrt_price,
        next_sqrt_price=next_sqrt_price,
        liquidity=state.liquidity,
        a_to_b=a_to_b,
    )
    spot_out = spot_amount_out(sqrt_price=state.sqrt_price, amount_in=amount_after_fee, a_to_b=a_to_b)

    return Quote(
        amount_in=amount_in,
        amount_out=amount_out,
        min_amount_out=apply_slippage(amount_out, slippage_bps),
        total_fee=trading_fee,
        price_impact=price_impact_percent(spot_out=spot_out, actual_out=amount_out),
    )
