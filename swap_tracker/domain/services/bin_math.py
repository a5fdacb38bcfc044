from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from swap_tracker.domain.entities.pool_state import Bin, BinPoolState
from swap_tracker.domain.entities.swap_price import Quote
from swap_tracker.domain.services.curve_math import apply_slippage, price_impact_percent


Q64 = 1 << 64
BASIS_POINT_MAX = 10_000
BINS_PER_ARRAY = 70
FEE_PRECISION = 1_000_000_000
MAX_FEE_RATE = 100_000_000
VARIABLE_FEE_SCALE = 100_000_000_000


def _div_ceil(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def bin_price(bin_id: int, bin_step: int, decimals_x: int, decimals_y: int) -> Decimal:
    """Price of X in units of Y at ``bin_id``: (1 + step/10000)^id * 10^(dx - dy)."""
    base = Decimal(1) + Decimal(bin_step) / Decimal(BASIS_POINT_MAX)
    return base**bin_id * Decimal(10) ** Decimal(decimals_x - decimals_y)


def bin_price_q64(bin_id: int, bin_step: int) -> int:
    base = Decimal(1) + Decimal(bin_step) / Decimal(BASIS_POINT_MAX)
    return int(base**bin_id * Decimal(Q64))


def bin_array_index(bin_id: int) -> int:
    return bin_id // BINS_PER_ARRAY


def bin_array_indexes(active_id: int, *, swap_for_y: bool, count: int) -> list[int]:
    start = bin_array_index(active_id)
    step = -1 if swap_for_y else 1
    return [start + step * offset for offset in range(max(1, count))]


def base_fee_rate(state: BinPoolState) -> int:
    params = state.static_parameters
    return params.base_factor * state.bin_step * 10 * 10**params.base_fee_power_factor


def variable_fee_rate(state: BinPoolState, volatility_accumulator: int) -> int:
    control = state.static_parameters.variable_fee_control
    if control == 0:
        return 0
    square_vfa_bin = (volatility_accumulator * state.bin_step) ** 2
    return (square_vfa_bin * control + VARIABLE_FEE_SCALE - 1) // VARIABLE_FEE_SCALE


def total_fee_rate(state: BinPoolState, volatility_accumulator: int) -> int:
    return min(base_fee_rate(state) + variable_fee_rate(state, volatility_accumulator), MAX_FEE_RATE)


@dataclass(frozen=True)
class VolatilityReference:
    index_reference: int
    volatility_reference: int


def volatility_reference_at(state: BinPoolState, *, current_time: int) -> VolatilityReference:
    static = state.static_parameters
    variable = state.variable_parameters
    elapsed = current_time - variable.last_update_timestamp

    if elapsed < static.filter_period:
        return VolatilityReference(
            index_reference=variable.index_reference,
            volatility_reference=variable.volatility_reference,
        )
    if elapsed < static.decay_period:
        volatility_reference = (
            variable.volatility_accumulator * static.reduction_factor // BASIS_POINT_MAX
        )
    else:
        volatility_reference = 0
    return VolatilityReference(index_reference=state.active_id, volatility_reference=volatility_reference)


def volatility_accumulator_at(state: BinPoolState, reference: VolatilityReference, bin_id: int) -> int:
    delta = abs(reference.index_reference - bin_id) * BASIS_POINT_MAX
    return min(
        reference.volatility_reference + delta,
        state.static_parameters.max_volatility_accumulator,
    )


def _bin_q64_price(bin_row: Bin, bin_step: int) -> int:
    return bin_row.price if bin_row.price > 0 else bin_price_q64(bin_row.bin_id, bin_step)


def simulate_bin_swap(
    state: BinPoolState,
    bins: Mapping[int, Bin],
    *,
    amount_in: int,
    swap_for_y: bool,
    slippage_bps: int,
    current_time: int,
) -> Quote:
    """Walk bin liquidity from the active bin in the trade direction.

    ``swap_for_y`` sells X for Y and moves towards lower bin ids. The walk
    stays inside the loaded bins and the pool's bin id range. The fee is
    charged on the input, bin by bin, at the rate implied by the volatility
    accumulator of each crossed bin.
    """
    if amount_in <= 0:
        raise ValueError("amount_in must be positive.")
    if not bins:
        raise ValueError("No bin liquidity loaded for the pool.")

    static = state.static_parameters
    lowest = max(min(bins), static.min_bin_id)
    highest = min(max(bins), static.max_bin_id)
    reference = volatility_reference_at(state, current_time=current_time)
    direction = -1 if swap_for_y else 1

    remaining = amount_in
    amount_out = 0
    total_fee = 0
    bin_id = state.active_id

    while remaining > 0 and lowest <= bin_id <= highest:
        bin_row = bins.get(bin_id)
        available = 0
        if bin_row is not None:
            available = bin_row.amount_y if swap_for_y else bin_row.amount_x

        if available > 0:
            price = _bin_q64_price(bin_row, state.bin_step)
            if price <= 0:
                raise ValueError(f"Invalid price for bin {bin_id}.")
            fee_rate = total_fee_rate(state, volatility_accumulator_at(state, reference, bin_id))
            if swap_for_y:
                max_in = _div_ceil(available * Q64, price)
            else:
                max_in = _div_ceil(available * price, Q64)
            max_fee = _div_ceil(max_in * fee_rate, FEE_PRECISION - fee_rate)
            max_in_with_fee = max_in + max_fee

            if remaining >= max_in_with_fee:
                consumed, bin_out, bin_fee = max_in_with_fee, available, max_fee
            else:
                bin_fee = _div_ceil(remaining * fee_rate, FEE_PRECISION)
                net_in = remaining - bin_fee
                if swap_for_y:
                    bin_out = (net_in * price) >> 64
                else:
                    bin_out = (net_in << 64) // price
                consumed, bin_out = remaining, min(bin_out, available)

            remaining -= consumed
            amount_out += bin_out
            total_fee += bin_fee

        if remaining > 0:
            bin_id += direction

    if amount_out == 0:
        raise ValueError("Insufficient liquidity in loaded bins.")

    consumed_in = amount_in - remaining
    active_row = bins.get(state.active_id)
    active_price = (
        _bin_q64_price(active_row, state.bin_step)
        if active_row is not None
        else bin_price_q64(state.active_id, state.bin_step)
    )
    net_in = Decimal(consumed_in - total_fee)
    if active_price <= 0:
        spot_out = Decimal(0)
    elif swap_for_y:
        spot_out = net_in * Decimal(active_price) / Decimal(Q64)
    else:
        spot_out = net_in * Decimal(Q64) / Decimal(active_price)

    return Quote(
        amount_in=consumed_in,
        amount_out=amount_out,
        min_amount_out=apply_slippage(amount_out, slippage_bps),
        total_fee=total_fee,
        price_impact=price_impact_percent(spot_out=spot_out, actual_out=amount_out),
    )
