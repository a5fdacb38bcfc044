from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
import unittest

from swap_tracker.application.use_cases.get_swap_price import GetSwapPriceUseCase
from swap_tracker.domain.entities.pool import NativeAsset, PoolSummary
from swap_tracker.domain.entities.swap_price import PoolQuote, Quote
from swap_tracker.domain.exceptions import NoPoolFoundError, QuoteComputationError


SOL = "So11111111111111111111111111111111111111112"
TOKEN = "TokenMint111111111111111111111111111111111"
NATIVE = NativeAsset(mint=SOL, symbol="SOL")
OBSERVED_AT = datetime(2026, 3, 4, 5, 6, 7, 890_000, tzinfo=timezone.utc)


def _pool(address: str, tvl: str, *, model: str = "damm_v2") -> PoolSummary:
    return PoolSummary(
        pool_address=address,
        mint_a=TOKEN,
        mint_b=SOL,
        reserve_a="1",
        reserve_b="1",
        tvl=tvl,
        fee_bps="25",
        model=model,
        symbol_a="TOK",
        symbol_b="SOL",
    )


class FakePoolIndexPort:
    def __init__(self, pools: list[PoolSummary]):
        self.pools = pools
        self.calls: list[str] = []

    def discover(self, *, token_address: str) -> list[PoolSummary]:
        self.calls.append(token_address)
        return list(self.pools)


class FakeQuoter:
    def __init__(self, amount_out: int = 2_500_000):
        self.amount_out = amount_out
        self.quoted: list[str] = []

    def quote(self, *, pool: PoolSummary, token_address: str) -> PoolQuote:
        _ = token_address
        self.quoted.append(pool.pool_address)
        return PoolQuote(
            quote=Quote(
                amount_in=1_000_000_000,
                amount_out=self.amount_out,
                min_amount_out=self.amount_out,
                total_fee=2_500_000,
                price_impact=Decimal("0.5"),
            ),
            output_decimals=6,
            fee_decimals=9,
            spot_price=Decimal("2.51"),
            token_symbol="TOK",
            model=pool.model,
        )


class GetSwapPriceUseCaseTests(unittest.TestCase):
    def _use_case(self, *ports: FakePoolIndexPort, quoters=None) -> GetSwapPriceUseCase:
        return GetSwapPriceUseCase(
            token_address=TOKEN,
            native=NATIVE,
            pool_index_ports=ports,
            quoters=quoters if quoters is not None else {"damm_v2": FakeQuoter(), "dlmm": FakeQuoter()},
            clock=lambda: OBSERVED_AT,
        )

    def test_selects_most_liquid_pool_and_normalizes_quote(self):
        quoter = FakeQuoter()
        use_case = self._use_case(
            FakePoolIndexPort([_pool("A", "100"), _pool("B", "500")]),
            quoters={"damm_v2": quoter},
        )

        observation = use_case.execute()

        self.assertEqual(quoter.quoted, ["B"])
        self.assertEqual(observation.pool_address, "B")
        self.assertEqual(observation.amount_out_for_1_native, "2.500000")
        self.assertEqual(observation.total_tvl, "500.00")
        self.assertEqual(observation.token_symbol, "TOK")
        self.assertEqual(observation.token_address, TOKEN)
        self.assertEqual(observation.fee, "0.002500000")
        self.assertEqual(observation.observed_at, OBSERVED_AT)

    def test_no_pools_raises_no_pool_found(self):
        use_case = self._use_case(FakePoolIndexPort([]))

        with self.assertRaises(NoPoolFoundError) as ctx:
            use_case.execute()

        self.assertEqual(str(ctx.exception), "No SOL-token pool found.")

    def test_selection_spans_pool_models(self):
        bin_quoter = FakeQuoter(amount_out=7_000_000)
        use_case = self._use_case(
            FakePoolIndexPort([_pool("curve", "100")]),
            FakePoolIndexPort([_pool("bins", "900", model="dlmm")]),
            quoters={"damm_v2": FakeQuoter(), "dlmm": bin_quoter},
        )

        observation = use_case.execute()

        self.assertEqual(bin_quoter.quoted, ["bins"])
        self.assertEqual(observation.pool_model, "dlmm")
        self.assertEqual(observation.amount_out_for_1_native, "7.000000")

    def test_discover_dedupes_across_index_ports(self):
        use_case = self._use_case(
            FakePoolIndexPort([_pool("A", "1"), _pool("B", "2")]),
            FakePoolIndexPort([_pool("B", "2"), _pool("C", "3")]),
        )

        pools = use_case.discover()

        self.assertEqual([pool.pool_address for pool in pools], ["A", "B", "C"])

    def test_missing_quoter_raises_quote_error(self):
        use_case = self._use_case(
            FakePoolIndexPort([_pool("bins", "10", model="dlmm")]),
            quoters={"damm_v2": FakeQuoter()},
        )

        with self.assertRaises(QuoteComputationError):
            use_case.execute()
