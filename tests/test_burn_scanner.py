"""
Tests for signature pagination and the full burn scan against a fake ledger.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
from conftest import BURNER, MINT, OTHER_MINT, RPC_URL, FakeLedger, burn_ix, make_tx

from burn_dashboard.burns.scanner import iter_signatures, scan_burns
from burn_dashboard.config.env import ScanConfig
from burn_dashboard.core.exceptions import RpcError


def _sig(name: str, err=None) -> dict:
    return {"signature": name, "slot": 1, "err": err, "blockTime": 1700000000}


def _collect(make_rpc, ledger, **kwargs):
    async def _go():
        async with make_rpc(ledger.handler) as rpc:
            return [s async for s in iter_signatures(rpc, BURNER, **kwargs)]

    return asyncio.run(_go())


def _scan(make_rpc, ledger, sleeper, **config_overrides):
    config = ScanConfig(rpc_url=RPC_URL, burner_address=BURNER, mint=MINT, sleep_ms=0, **config_overrides)
    found = []

    async def _go():
        async with make_rpc(ledger.handler) as rpc:
            return await scan_burns(rpc, config, on_burn=found.append, sleep=sleeper)

    return asyncio.run(_go()), found


def test_pagination_follows_cursor_and_skips_failed(make_rpc):
    """Cursor is the last signature of the previous page (even a failed one); failed txs never yielded."""
    ledger = FakeLedger(pages=[
        [_sig("a"), _sig("b", err={"InstructionError": [0, "Custom"]})],
        [_sig("c"), _sig("d")],
    ])
    assert _collect(make_rpc, ledger, page_size=2, max_pages=5) == ["a", "c", "d"]

    pages = ledger.calls_for("getSignaturesForAddress")
    assert [p[1].get("before") for p in pages] == [None, "b", "d"]
    assert all(p[1]["limit"] == 2 for p in pages)


def test_pagination_stops_at_max_pages(make_rpc):
    ledger = FakeLedger(pages=[[_sig("a")], [_sig("b")], [_sig("c")]])
    assert _collect(make_rpc, ledger, page_size=1, max_pages=2) == ["a", "b"]
    assert len(ledger.calls_for("getSignaturesForAddress")) == 2


def test_pagination_sleeps_between_pages(make_rpc, sleeper):
    ledger = FakeLedger(pages=[[_sig("a")], [_sig("b")]])

    async def _go():
        async with make_rpc(ledger.handler) as rpc:
            return [s async for s in iter_signatures(rpc, BURNER, 1, 5, delay_sec=0.12, sleep=sleeper)]

    assert asyncio.run(_go()) == ["a", "b"]
    assert sleeper.delays == [0.12, 0.12]


def test_first_page_failure_is_fatal(make_rpc):
    def handler(request):
        return httpx.Response(401)

    async def _go():
        async with make_rpc(handler) as rpc:
            return [s async for s in iter_signatures(rpc, BURNER, 10, 5)]

    with pytest.raises(RpcError):
        asyncio.run(_go())


def test_later_page_failure_ends_pagination(make_rpc):
    """After the first page, an RPC failure just stops paging."""
    ledger = FakeLedger(pages=[[_sig("a"), _sig("b")]])
    inner = ledger.handler

    def handler(request):
        if b'"before"' in request.content:
            return httpx.Response(400)
        return inner(request)

    async def _go():
        async with make_rpc(handler) as rpc:
            return [s async for s in iter_signatures(rpc, BURNER, 2, 5)]

    assert asyncio.run(_go()) == ["a", "b"]


def test_scan_two_burns_end_to_end(make_rpc, sleeper):
    """Two successful txs burning 500000 and 250000 at 6 decimals -> count 2, totalUi 0.75."""
    ledger = FakeLedger(
        pages=[[_sig("tx1"), _sig("tx2")]],
        transactions={
            "tx1": make_tx([burn_ix("500000", kind="burnChecked", decimals=6)]),
            "tx2": make_tx([burn_ix("250000")]),
        },
    )
    agg, found = _scan(make_rpc, ledger, sleeper)

    assert agg.to_dict() == {
        "count": 2,
        "totalUi": "0.75",
        "burns": [
            {"amountUi": "0.5", "url": "https://solscan.io/tx/tx1"},
            {"amountUi": "0.25", "url": "https://solscan.io/tx/tx2"},
        ],
    }
    assert [r.amount_ui for r in found] == ["0.5", "0.25"]
    tx_calls = ledger.calls_for("getTransaction")
    assert [p[0] for p in tx_calls] == ["tx1", "tx2"]


def test_scan_survives_malformed_amount(make_rpc, sleeper):
    """A burn with an unreadable amount is skipped; the scan still totals the rest."""
    ledger = FakeLedger(
        pages=[[_sig("bad"), _sig("ok")]],
        transactions={
            "bad": make_tx([burn_ix("²"), burn_ix("9" * 5000)]),
            "ok": make_tx([burn_ix("500000")]),
        },
    )
    agg, found = _scan(make_rpc, ledger, sleeper)

    assert agg.count == 1
    assert agg.total_ui == "0.5"
    assert [r.url for r in found] == ["https://solscan.io/tx/ok"]


def test_scan_ignores_failed_and_foreign_burns(make_rpc, sleeper):
    """Failed signatures are never fetched; other mints and failed-meta txs contribute nothing."""
    ledger = FakeLedger(
        pages=[[_sig("bad", err={"InstructionError": [0, "Custom"]}), _sig("other"), _sig("meta_err"), _sig("good")]],
        transactions={
            "bad": make_tx([burn_ix("999")]),
            "other": make_tx([burn_ix("999", mint=OTHER_MINT)]),
            "meta_err": make_tx([burn_ix("999")], err={"InstructionError": [0, "Custom"]}),
            "good": make_tx([], inner=[[burn_ix("3000000")]]),
        },
    )
    agg, _ = _scan(make_rpc, ledger, sleeper)

    assert agg.count == 1
    assert agg.total_ui == "3"
    assert "bad" not in [p[0] for p in ledger.calls_for("getTransaction")]


def test_scan_skips_missing_transactions(make_rpc, sleeper):
    """A null getTransaction result is skipped, the scan continues."""
    ledger = FakeLedger(
        pages=[[_sig("gone"), _sig("ok")]],
        transactions={"ok": make_tx([burn_ix("1000000")])},
    )
    agg, _ = _scan(make_rpc, ledger, sleeper)
    assert agg.count == 1
    assert agg.burns[0].url.endswith("/ok")


def test_scan_uses_mint_decimals_from_supply(make_rpc, sleeper):
    """Amounts are normalized to the decimals reported by getTokenSupply."""
    ledger = FakeLedger(
        pages=[[_sig("t")]],
        transactions={"t": make_tx([burn_ix("15", kind="burnChecked", decimals=1)])},
        decimals=9,
    )
    agg, _ = _scan(make_rpc, ledger, sleeper)
    assert agg.total_ui == "1.5"


def test_scan_falls_back_to_six_decimals(make_rpc, sleeper):
    """getTokenSupply failure -> 6 decimals."""
    ledger = FakeLedger(
        pages=[[_sig("t")]],
        transactions={"t": make_tx([burn_ix("1234500")])},
        decimals=None,
    )
    agg, _ = _scan(make_rpc, ledger, sleeper)
    assert agg.total_ui == "1.2345"


def test_scan_no_signatures(make_rpc, sleeper):
    agg, found = _scan(make_rpc, FakeLedger(pages=[]), sleeper)
    assert agg.to_dict() == {"count": 0, "totalUi": "0", "burns": []}
    assert found == []
