from __future__ import annotations

import httpx

from swap_tracker.infrastructure.clients.damm_v2_pool_index_client import (
    DammV2PoolIndexClient,
    DammV2PoolIndexClientSettings,
)


SOL = "So11111111111111111111111111111111111111112"
TOKEN = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def _make_client(*, page_size: int = 2, max_pages: int = 10) -> DammV2PoolIndexClient:
    return DammV2PoolIndexClient(
        DammV2PoolIndexClientSettings(
            api_url="https://pools.invalid/pools",
            native_mint=SOL,
            page_size=page_size,
            max_pages=max_pages,
            timeout_seconds=5,
        )
    )


def _row(address: str, mint_a: str, mint_b: str, tvl: str = "100") -> dict:
    return {
        "pool_address": address,
        "token_a_mint": mint_a,
        "token_b_mint": mint_b,
        "token_a_amount": "1",
        "token_b_amount": "2",
        "tvl": tvl,
        "fee_bps": 25,
        "token_a_symbol": "A",
        "token_b_symbol": "B",
    }


def test_discover_paginates_both_sides_and_filters_strictly(monkeypatch):
    pages = {
        ("token_a_mint", 0): [_row("p1", TOKEN, SOL), _row("other", TOKEN, "USDT")],
        ("token_a_mint", 2): [_row("p2", TOKEN, SOL)],
        ("token_b_mint", 0): [_row("p3", SOL, TOKEN), _row("p4", "USDT", TOKEN)],
    }
    calls: list[tuple[str, int, int]] = []

    def fake_fetch_page(self, *, field, token_address, offset, limit):
        assert token_address == TOKEN
        calls.append((field, offset, limit))
        return pages.get((field, offset), [])

    monkeypatch.setattr(DammV2PoolIndexClient, "_fetch_page", fake_fetch_page)

    pools = _make_client().discover(token_address=TOKEN)

    assert [pool.pool_address for pool in pools] == ["p1", "p2", "p3"]
    assert pools[0].model == "damm_v2"
    assert pools[0].fee_bps == "25"
    assert calls == [
        ("token_a_mint", 0, 2),
        ("token_a_mint", 2, 2),
        ("token_a_mint", 4, 2),
        ("token_b_mint", 0, 2),
        ("token_b_mint", 2, 2),
    ]


def test_discover_dedupes_pools_seen_on_several_pages(monkeypatch):
    def fake_fetch_page(self, *, field, token_address, offset, limit):
        if field == "token_a_mint" and offset in (0, 2):
            return [_row("dup", TOKEN, SOL)]
        return []

    monkeypatch.setattr(DammV2PoolIndexClient, "_fetch_page", fake_fetch_page)

    pools = _make_client().discover(token_address=TOKEN)

    assert [pool.pool_address for pool in pools] == ["dup"]


def test_discover_keeps_accumulated_pools_when_a_page_fails(monkeypatch):
    def fake_fetch_page(self, *, field, token_address, offset, limit):
        if field == "token_a_mint" and offset == 0:
            return [_row("p1", TOKEN, SOL)]
        if field == "token_a_mint":
            raise httpx.ConnectError("connection refused")
        raise ValueError("malformed payload")

    monkeypatch.setattr(DammV2PoolIndexClient, "_fetch_page", fake_fetch_page)

    pools = _make_client().discover(token_address=TOKEN)

    assert [pool.pool_address for pool in pools] == ["p1"]


def test_discover_stops_at_page_cap(monkeypatch):
    calls = {"count": 0}

    def fake_fetch_page(self, *, field, token_address, offset, limit):
        calls["count"] += 1
        return [_row(f"{field}-{offset}", TOKEN, SOL) if field == "token_a_mint" else _row("x", SOL, TOKEN)]

    monkeypatch.setattr(DammV2PoolIndexClient, "_fetch_page", fake_fetch_page)

    pools = _make_client(max_pages=3).discover(token_address=TOKEN)

    assert calls["count"] == 6
    assert len(pools) == 4


def test_discover_skips_rows_missing_required_fields(monkeypatch):
    def fake_fetch_page(self, *, field, token_address, offset, limit):
        if field == "token_a_mint" and offset == 0:
            return [{"tvl": "1"}]
        return []

    monkeypatch.setattr(DammV2PoolIndexClient, "_fetch_page", fake_fetch_page)

    assert _make_client().discover(token_address=TOKEN) == []
