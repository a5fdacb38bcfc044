from __future__ import annotations

from decimal import Decimal
import unittest

from swap_tracker.domain.entities.pool import PoolSummary
from swap_tracker.domain.services.pool_selection import (
    dedupe_pools,
    parse_liquidity,
    select_highest_liquidity_pool,
)


def _pool(address: str, tvl: object) -> PoolSummary:
    return PoolSummary(
        pool_address=address,
        mint_a="mint-a",
        mint_b="mint-b",
        reserve_a="1",
        reserve_b="1",
        tvl=tvl,
        fee_bps="25",
        model="damm_v2",
    )


class ParseLiquidityTests(unittest.TestCase):
    def test_numeric_strings_and_numbers_are_parsed(self):
        self.assertEqual(parse_liquidity("123.45"), Decimal("123.45"))
        self.assertEqual(parse_liquidity(" 10 "), Decimal("10"))
        self.assertEqual(parse_liquidity(7), Decimal("7"))

    def test_missing_or_invalid_values_are_zero(self):
        for value in (None, "", "abc", "NaN", "Infinity", "-Infinity", True, object()):
            with self.subTest(value=value):
                self.assertEqual(parse_liquidity(value), Decimal("0"))


class SelectHighestLiquidityPoolTests(unittest.TestCase):
    def test_empty_input_returns_none(self):
        self.assertIsNone(select_highest_liquidity_pool([]))

    def test_picks_strictly_greatest_tvl(self):
        pools = [_pool("a", "100"), _pool("b", "500"), _pool("c", "499.99")]
        self.assertEqual(select_highest_liquidity_pool(pools).pool_address, "b")

    def test_ties_keep_the_first_pool_seen(self):
        pools = [_pool("a", "10"), _pool("b", "300"), _pool("c", "300.0")]
        self.assertEqual(select_highest_liquidity_pool(pools).pool_address, "b")

    def test_unparseable_tvl_counts_as_zero(self):
        pools = [_pool("a", "garbage"), _pool("b", "0.01")]
        self.assertEqual(select_highest_liquidity_pool(pools).pool_address, "b")

    def test_all_zero_returns_first(self):
        pools = [_pool("a", None), _pool("b", "0")]
        self.assertEqual(select_highest_liquidity_pool(pools).pool_address, "a")


def test_dedupe_pools_keeps_first_occurrence_order():
    pools = [_pool("a", "1"), _pool("b", "2"), _pool("a", "3")]

    result = dedupe_pools(pools)

    assert [pool.pool_address for pool in result] == ["a", "b"]
    assert result[0].tvl == "1"
