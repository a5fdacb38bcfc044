from __future__ import annotations

import struct

from solders.pubkey import Pubkey

from swap_tracker.domain.entities.pool import MintInfo, TransferFee, TransferFeeSchedule
from swap_tracker.domain.entities.pool_state import (
    Bin,
    BinPoolState,
    BinStaticParameters,
    BinVariableParameters,
    CurveBaseFee,
    CurveDynamicFee,
    CurvePoolState,
)
from swap_tracker.domain.services.bin_math import BINS_PER_ARRAY


DLMM_PROGRAM_ID = Pubkey.from_string("LBUZKhRxPF3XUpBCjp4YzTKgLccjZhTSDM9QuVaPkxo")
BIN_ARRAY_SEED = b"bin_array"

# Token mints. Extension-bearing mints are padded to the token-account length.
MINT_DECIMALS_OFFSET = 44
MINT_BASE_SIZE = 82
MINT_ACCOUNT_TYPE_OFFSET = 165
MINT_TLV_OFFSET = 166
EXTENSION_TRANSFER_FEE_CONFIG = 1
TRANSFER_FEE_CONFIG_SIZE = 108

# Constant-product pool account.
CURVE_POOL_MIN_SIZE = 481

# Bin pool account.
BIN_POOL_MIN_SIZE = 152

# Bin array account.
BIN_ARRAY_BINS_OFFSET = 56
BIN_SIZE = 144


def _u8(data: bytes, offset: int) -> int:
    return data[offset]


def _u16(data: bytes, offset: int) -> int:
    return struct.unpack_from("<H", data, offset)[0]


def _u32(data: bytes, offset: int) -> int:
    return struct.unpack_from("<I", data, offset)[0]


def _i32(data: bytes, offset: int) -> int:
    return struct.unpack_from("<i", data, offset)[0]


def _u64(data: bytes, offset: int) -> int:
    return struct.unpack_from("<Q", data, offset)[0]


def _i64(data: bytes, offset: int) -> int:
    return struct.unpack_from("<q", data, offset)[0]


def _u128(data: bytes, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 16], "little")


def _pubkey(data: bytes, offset: int) -> str:
    return str(Pubkey.from_bytes(bytes(data[offset : offset + 32])))


def _require_size(data: bytes, size: int, *, kind: str) -> None:
    if len(data) < size:
        raise ValueError(f"{kind} account too short: {len(data)} < {size} bytes.")


def _transfer_fee(value: bytes, offset: int) -> TransferFee:
    return TransferFee(
        epoch=_u64(value, offset),
        maximum_fee=_u64(value, offset + 8),
        basis_points=_u16(value, offset + 16),
    )


def _find_transfer_fee_config(data: bytes) -> TransferFeeSchedule | None:
    if len(data) <= MINT_TLV_OFFSET:
        return None

    cursor = MINT_TLV_OFFSET
    while cursor + 4 <= len(data):
        extension_type = _u16(data, cursor)
        length = _u16(data, cursor + 2)
        start = cursor + 4
        if extension_type == 0:
            break
        if extension_type == EXTENSION_TRANSFER_FEE_CONFIG:
            if length < TRANSFER_FEE_CONFIG_SIZE or start + length > len(data):
                raise ValueError("Malformed transfer fee extension.")
            value = data[start : start + length]
            return TransferFeeSchedule(older=_transfer_fee(value, 72), newer=_transfer_fee(value, 90))
        cursor = start + length
    return None


def decode_mint(address: str, data: bytes) -> MintInfo:
    _require_size(data, MINT_BASE_SIZE, kind="Mint")
    return MintInfo(
        address=address,
        decimals=_u8(data, MINT_DECIMALS_OFFSET),
        transfer_fee=_find_transfer_fee_config(data),
    )


def decode_curve_pool_state(data: bytes) -> CurvePoolState:
    _require_size(data, CURVE_POOL_MIN_SIZE, kind="Curve pool")
    base_fee = CurveBaseFee(
        cliff_fee_numerator=_u64(data, 8),
        fee_scheduler_mode=_u8(data, 16),
        number_of_period=_u16(data, 22),
        period_frequency=_u64(data, 24),
        reduction_factor=_u64(data, 32),
    )
    dynamic_fee = CurveDynamicFee(
        initialized=_u8(data, 56) != 0,
        max_volatility_accumulator=_u32(data, 64),
        variable_fee_control=_u32(data, 68),
        bin_step=_u16(data, 72),
        volatility_accumulator=_u128(data, 120),
    )
    return CurvePoolState(
        token_a_mint=_pubkey(data, 168),
        token_b_mint=_pubkey(data, 200),
        liquidity=_u128(data, 360),
        sqrt_min_price=_u128(data, 424),
        sqrt_max_price=_u128(data, 440),
        sqrt_price=_u128(data, 456),
        activation_point=_u64(data, 472),
        activation_type=_u8(data, 480),
        base_fee=base_fee,
        dynamic_fee=dynamic_fee,
    )


def decode_bin_pool_state(data: bytes) -> BinPoolState:
    _require_size(data, BIN_POOL_MIN_SIZE, kind="Bin pool")
    static_parameters = BinStaticParameters(
        base_factor=_u16(data, 8),
        filter_period=_u16(data, 10),
        decay_period=_u16(data, 12),
        reduction_factor=_u16(data, 14),
        variable_fee_control=_u32(data, 16),
        max_volatility_accumulator=_u32(data, 20),
        min_bin_id=_i32(data, 24),
        max_bin_id=_i32(data, 28),
        base_fee_power_factor=_u8(data, 34),
    )
    variable_parameters = BinVariableParameters(
        volatility_accumulator=_u32(data, 40),
        volatility_reference=_u32(data, 44),
        index_reference=_i32(data, 48),
        last_update_timestamp=_i64(data, 56),
    )
    return BinPoolState(
        token_x_mint=_pubkey(data, 88),
        token_y_mint=_pubkey(data, 120),
        active_id=_i32(data, 76),
        bin_step=_u16(data, 80),
        static_parameters=static_parameters,
        variable_parameters=variable_parameters,
    )


def decode_bin_array(data: bytes) -> list[Bin]:
    _require_size(data, BIN_ARRAY_BINS_OFFSET + BIN_SIZE * BINS_PER_ARRAY, kind="Bin array")
    index = _i64(data, 8)
    bins: list[Bin] = []
    for position in range(BINS_PER_ARRAY):
        offset = BIN_ARRAY_BINS_OFFSET + position * BIN_SIZE
        bins.append(
            Bin(
                bin_id=index * BINS_PER_ARRAY + position,
                amount_x=_u64(data, offset),
                amount_y=_u64(data, offset + 8),
                price=_u128(data, offset + 16),
            )
        )
    return bins


def derive_bin_array_address(lb_pair: str, index: int) -> str:
    address, _bump = Pubkey.find_program_address(
        [BIN_ARRAY_SEED, bytes(Pubkey.from_string(lb_pair)), struct.pack("<q", index)],
        DLMM_PROGRAM_ID,
    )
    return str(address)
