from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CurveBaseFee:
    cliff_fee_numerator: int
    fee_scheduler_mode: int
    number_of_period: int
    period_frequency: int
    reduction_factor: int


@dataclass(frozen=True)
class CurveDynamicFee:
    initialized: bool
    max_volatility_accumulator: int
    variable_fee_control: int
    bin_step: int
    volatility_accumulator: int


@dataclass(frozen=True)
class CurvePoolState:
    """Decoded constant-product pool account.

    Square-root prices are Q64.64 fixed point and liquidity carries 64
    fractional bits, so ``amount_b = liquidity * delta_sqrt_price >> 128``.
    """

    token_a_mint: str
    token_b_mint: str
    liquidity: int
    sqrt_min_price: int
    sqrt_max_price: int
    sqrt_price: int
    activation_point: int
    activation_type: int
    base_fee: CurveBaseFee
    dynamic_fee: CurveDynamicFee


@dataclass(frozen=True)
class BinStaticParameters:
    base_factor: int
    filter_period: int
    decay_period: int
    reduction_factor: int
    variable_fee_control: int
    max_volatility_accumulator: int
    min_bin_id: int
    max_bin_id: int
    base_fee_power_factor: int


@dataclass(frozen=True)
class BinVariableParameters:
    volatility_accumulator: int
    volatility_reference: int
    index_reference: int
    last_update_timestamp: int


@dataclass(frozen=True)
class BinPoolState:
    token_x_mint: str
    token_y_mint: str
    active_id: int
    bin_step: int
    static_parameters: BinStaticParameters
    variable_parameters: BinVariableParameters


@dataclass(frozen=True)
class Bin:
    bin_id: int
    amount_x: int
    amount_y: int
    price: int
