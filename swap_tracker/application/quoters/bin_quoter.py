from __future__ import annotations

import logging
import time
from collections.abc import Callable
from decimal import Decimal

from swap_tracker.application.ports.chain_port import BinPoolStatePort, ChainPort
from swap_tracker.domain.entities.pool import MintInfo, NativeAsset, PoolSummary
from swap_tracker.domain.entities.pool_state import BinPoolState
from swap_tracker.domain.entities.swap_price import PoolQuote, Quote
from swap_tracker.domain.exceptions import PoolStateUnavailableError, QuoteComputationError
from swap_tracker.domain.services.bin_math import bin_price, simulate_bin_swap
from swap_tracker.domain.services.decimal_amount import DecimalAmount
from swap_tracker.domain.services.pair_orientation import native_is_first, token_per_native
from swap_tracker.domain.services.pool_naming import parse_token_symbol
from swap_tracker.domain.services.transfer_fee import amount_after_transfer_fee


logger = logging.getLogger(__name__)


class BinQuoter:
    def __init__(
        self,
        *,
        chain_port: ChainPort,
        pool_state_port: BinPoolStatePort,
        native: NativeAsset,
        slippage_bps: int,
        bin_array_count: int = 3,
        clock: Callable[[], float] = time.time,
    ):
        self._chain_port = chain_port
        self._pool_state_port = pool_state_port
        self._native = native
        self._slippage_bps = slippage_bps
        self._bin_array_count = bin_array_count
        self._clock = clock

    def quote(self, *, pool: PoolSummary, token_address: str) -> PoolQuote:
        state = self._pool_state_port.get_bin_pool_state(pool_address=pool.pool_address)
        if state is None:
            raise PoolStateUnavailableError("Failed to fetch or parse valid pool state.")

        try:
            native_x = native_is_first(
                first_mint=state.token_x_mint,
                second_mint=state.token_y_mint,
                native_mint=self._native.mint,
                token_mint=token_address,
            )
        except ValueError as exc:
            raise QuoteComputationError(str(exc)) from exc

        mints = self._chain_port.get_mints(addresses=[state.token_x_mint, state.token_y_mint])
        mint_x = mints[state.token_x_mint]
        mint_y = mints[state.token_y_mint]
        input_mint, output_mint = (mint_x, mint_y) if native_x else (mint_y, mint_x)

        spot_price = self._spot_price(state, mint_x=mint_x, mint_y=mint_y, native_x=native_x)

        epoch = self._chain_port.get_epoch()
        amount_in = DecimalAmount.one(input_mint.decimals).raw
        net_amount_in = amount_after_transfer_fee(mint=input_mint, amount=amount_in, epoch=epoch)

        bins = self._pool_state_port.get_bins(
            pool_address=pool.pool_address,
            active_id=state.active_id,
            swap_for_y=native_x,
            array_count=self._bin_array_count,
        )
        try:
            raw_quote = simulate_bin_swap(
                state,
                bins,
                amount_in=net_amount_in,
                swap_for_y=native_x,
                slippage_bps=self._slippage_bps,
                current_time=int(self._clock()),
            )
        except (ValueError, ArithmeticError) as exc:
            raise QuoteComputationError(f"Swap calculation failed: {exc}") from exc

        if raw_quote.amount_in < net_amount_in:
            logger.warning(
                "bin_quoter: partial_fill pool=%s requested=%s filled=%s loaded_bins=%s",
                pool.pool_address,
                net_amount_in,
                raw_quote.amount_in,
                len(bins),
            )

        quote = Quote(
            amount_in=amount_in,
            amount_out=amount_after_transfer_fee(mint=output_mint, amount=raw_quote.amount_out, epoch=epoch),
            min_amount_out=amount_after_transfer_fee(mint=output_mint, amount=raw_quote.min_amount_out, epoch=epoch),
            total_fee=raw_quote.total_fee,
            price_impact=raw_quote.price_impact,
        )

        logger.info(
            "bin_quoter: quoted pool=%s active_id=%s bin_step=%s swap_for_y=%s amount_out=%s fee=%s",
            pool.pool_address,
            state.active_id,
            state.bin_step,
            native_x,
            quote.amount_out,
            quote.total_fee,
        )

        return PoolQuote(
            quote=quote,
            output_decimals=output_mint.decimals,
            fee_decimals=input_mint.decimals,
            spot_price=spot_price,
            token_symbol=parse_token_symbol(pool.name, native_symbol=self._native.symbol),
            model=pool.model,
        )

    def _spot_price(
        self,
        state: BinPoolState,
        *,
        mint_x: MintInfo,
        mint_y: MintInfo,
        native_x: bool,
    ) -> Decimal | None:
        try:
            price_of_y_in_x = bin_price(state.active_id, state.bin_step, mint_x.decimals, mint_y.decimals)
            return token_per_native(price_of_y_in_x, native_first=native_x)
        except (ValueError, ArithmeticError) as exc:
            logger.warning(
                "bin_quoter: spot_price_unavailable active_id=%s bin_step=%s error=%s",
                state.active_id,
                state.bin_step,
                exc,
            )
            return None
