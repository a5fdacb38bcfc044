from __future__ import annotations

from decimal import Decimal

import pytest

from swap_tracker.application.quoters.bin_quoter import BinQuoter
from swap_tracker.domain.entities.pool import MintInfo, NativeAsset, PoolSummary
from swap_tracker.domain.entities.pool_state import (
    Bin,
    BinPoolState,
    BinStaticParameters,
    BinVariableParameters,
)
from swap_tracker.domain.exceptions import PoolStateUnavailableError, QuoteComputationError
from swap_tracker.domain.services.bin_math import Q64


SOL = "So11111111111111111111111111111111111111112"
TOKEN = "BonkMint11111111111111111111111111111111111"
NATIVE = NativeAsset(mint=SOL, symbol="SOL")


def _state(
    *,
    token_x: str = SOL,
    token_y: str = TOKEN,
    active_id: int = 0,
    bin_step: int = 100,
    max_bin_id: int = 443_636,
) -> BinPoolState:
    return BinPoolState(
        token_x_mint=token_x,
        token_y_mint=token_y,
        active_id=active_id,
        bin_step=bin_step,
        static_parameters=BinStaticParameters(
            base_factor=0,
            filter_period=30,
            decay_period=600,
            reduction_factor=5_000,
            variable_fee_control=0,
            max_volatility_accumulator=350_000,
            min_bin_id=-443_636,
            max_bin_id=max_bin_id,
            base_fee_power_factor=0,
        ),
        variable_parameters=BinVariableParameters(
            volatility_accumulator=0,
            volatility_reference=0,
            index_reference=0,
            last_update_timestamp=0,
        ),
    )


def _pool(name: str | None = "SOL-BONK") -> PoolSummary:
    return PoolSummary(
        pool_address="bin-pool",
        mint_a=SOL,
        mint_b=TOKEN,
        reserve_a="10",
        reserve_b="10",
        tvl="999",
        fee_bps="100",
        model="dlmm",
        name=name,
        bin_step=100,
    )


class FakeChainPort:
    def get_mints(self, *, addresses: list[str]) -> dict[str, MintInfo]:
        decimals = {SOL: 9, TOKEN: 6}
        return {address: MintInfo(address=address, decimals=decimals[address]) for address in addresses}

    def get_epoch(self) -> int:
        return 1

    def get_slot(self) -> int:
        return 1


class FakeBinPoolStatePort:
    def __init__(self, state: BinPoolState | None, bins: dict[int, Bin]):
        self.state = state
        self.bins = bins
        self.bin_requests: list[dict] = []

    def get_bin_pool_state(self, *, pool_address: str) -> BinPoolState | None:
        _ = pool_address
        return self.state

    def get_bins(self, *, pool_address: str, active_id: int, swap_for_y: bool, array_count: int) -> dict[int, Bin]:
        self.bin_requests.append(
            {"pool_address": pool_address, "active_id": active_id, "swap_for_y": swap_for_y, "array_count": array_count}
        )
        return self.bins


def _quoter(port: FakeBinPoolStatePort) -> BinQuoter:
    return BinQuoter(
        chain_port=FakeChainPort(),
        pool_state_port=port,
        native=NATIVE,
        slippage_bps=100,
        bin_array_count=2,
        clock=lambda: 10,
    )


def test_quote_native_x_walks_towards_y():
    port = FakeBinPoolStatePort(_state(), {0: Bin(bin_id=0, amount_x=0, amount_y=2 * 10**9, price=Q64)})

    result = _quoter(port).quote(pool=_pool(), token_address=TOKEN)

    assert port.bin_requests == [
        {"pool_address": "bin-pool", "active_id": 0, "swap_for_y": True, "array_count": 2}
    ]
    assert result.quote.amount_in == 10**9
    assert result.quote.amount_out == 10**9
    assert result.quote.min_amount_out == 990_000_000
    assert result.output_decimals == 6
    assert result.fee_decimals == 9
    assert result.spot_price == Decimal(1000)
    assert result.token_symbol == "BONK"
    assert result.model == "dlmm"


def test_quote_native_y_inverts_spot_price():
    state = _state(token_x=TOKEN, token_y=SOL)
    port = FakeBinPoolStatePort(state, {0: Bin(bin_id=0, amount_x=5 * 10**9, amount_y=0, price=Q64)})

    result = _quoter(port).quote(pool=_pool(name="BONK-SOL"), token_address=TOKEN)

    assert port.bin_requests[0]["swap_for_y"] is False
    assert result.spot_price == Decimal(1000)
    assert result.output_decimals == 6


def test_symbol_is_unknown_without_pool_name():
    port = FakeBinPoolStatePort(_state(), {0: Bin(bin_id=0, amount_x=0, amount_y=2 * 10**9, price=Q64)})
    assert _quoter(port).quote(pool=_pool(name=None), token_address=TOKEN).token_symbol == "UNKNOWN"


def test_missing_state_raises_state_unavailable():
    with pytest.raises(PoolStateUnavailableError):
        _quoter(FakeBinPoolStatePort(None, {})).quote(pool=_pool(), token_address=TOKEN)


def test_no_liquidity_raises_quote_error():
    port = FakeBinPoolStatePort(_state(), {0: Bin(bin_id=0, amount_x=0, amount_y=0, price=Q64)})
    with pytest.raises(QuoteComputationError, match="Insufficient liquidity"):
        _quoter(port).quote(pool=_pool(), token_address=TOKEN)


def test_unavailable_spot_price_keeps_the_simulated_quote():
    active_id = 2_000_000_000
    state = _state(active_id=active_id, bin_step=40_000, max_bin_id=active_id)
    port = FakeBinPoolStatePort(state, {active_id: Bin(bin_id=active_id, amount_x=0, amount_y=2 * 10**9, price=Q64)})

    result = _quoter(port).quote(pool=_pool(), token_address=TOKEN)

    assert result.spot_price is None
    assert result.quote.amount_out == 10**9
