from __future__ import annotations

import logging
import time
from collections.abc import Callable

from swap_tracker.application.ports.chain_port import ChainPort, CurvePoolStatePort
from swap_tracker.domain.entities.pool import NativeAsset, PoolSummary
from swap_tracker.domain.entities.swap_price import PoolQuote, Quote
from swap_tracker.domain.exceptions import PoolStateUnavailableError, QuoteComputationError
from swap_tracker.domain.services.curve_math import current_point, quote_exact_in, sqrt_price_to_price
from swap_tracker.domain.services.decimal_amount import DecimalAmount
from swap_tracker.domain.services.pair_orientation import native_is_first, same_mint, token_per_native
from swap_tracker.domain.services.transfer_fee import amount_after_transfer_fee


logger = logging.getLogger(__name__)


class ConstantProductQuoter:
    def __init__(
        self,
        *,
        chain_port: ChainPort,
        pool_state_port: CurvePoolStatePort,
        native: NativeAsset,
        slippage_bps: int,
        clock: Callable[[], float] = time.time,
    ):
        self._chain_port = chain_port
        self._pool_state_port = pool_state_port
        self._native = native
        self._slippage_bps = slippage_bps
        self._clock = clock

    def quote(self, *, pool: PoolSummary, token_address: str) -> PoolQuote:
        state = self._pool_state_port.get_curve_pool_state(pool_address=pool.pool_address)
        if state is None:
            raise PoolStateUnavailableError("Failed to fetch or parse valid pool state.")

        try:
            native_a = native_is_first(
                first_mint=state.token_a_mint,
                second_mint=state.token_b_mint,
                native_mint=self._native.mint,
                token_mint=token_address,
            )
        except ValueError as exc:
            raise QuoteComputationError(str(exc)) from exc

        mints = self._chain_port.get_mints(addresses=[state.token_a_mint, state.token_b_mint])
        mint_a = mints[state.token_a_mint]
        mint_b = mints[state.token_b_mint]
        input_mint, output_mint = (mint_a, mint_b) if native_a else (mint_b, mint_a)

        epoch = self._chain_port.get_epoch()
        slot = self._chain_port.get_slot()
        now = int(self._clock())

        amount_in = DecimalAmount.one(input_mint.decimals).raw
        net_amount_in = amount_after_transfer_fee(mint=input_mint, amount=amount_in, epoch=epoch)

        try:
            raw_quote = quote_exact_in(
                state,
                a_to_b=native_a,
                amount_in=net_amount_in,
                slippage_bps=self._slippage_bps,
                point=current_point(state, current_slot=slot, current_time=now),
            )
            raw_price = sqrt_price_to_price(state.sqrt_price, mint_a.decimals, mint_b.decimals)
            spot_price = token_per_native(raw_price, native_first=native_a)
        except (ValueError, ArithmeticError) as exc:
            raise QuoteComputationError(f"Swap calculation failed: {exc}") from exc

        amount_out = amount_after_transfer_fee(mint=output_mint, amount=raw_quote.amount_out, epoch=epoch)
        min_amount_out = amount_after_transfer_fee(mint=output_mint, amount=raw_quote.min_amount_out, epoch=epoch)
        quote = Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            min_amount_out=min_amount_out,
            total_fee=raw_quote.total_fee,
            price_impact=raw_quote.price_impact,
        )

        logger.info(
            "constant_product_quoter: quoted pool=%s native_side=%s amount_in=%s amount_out=%s fee=%s slot=%s epoch=%s",
            pool.pool_address,
            "a" if native_a else "b",
            amount_in,
            amount_out,
            quote.total_fee,
            slot,
            epoch,
        )

        return PoolQuote(
            quote=quote,
            output_decimals=output_mint.decimals,
            fee_decimals=input_mint.decimals,
            spot_price=spot_price,
            token_symbol=pool.symbol_a if same_mint(token_address, pool.mint_a) else pool.symbol_b,
            model=pool.model,
        )
