"""
Pytest fixtures for Burn Dashboard tests. Remote calls go through httpx.MockTransport;
backoff and inter-request sleeps are replaced by a recorder so tests never wait.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

BURNER = "5G62fW1BuK6k9B6sGwvTBtoKRPseshj9SSYPzudSPUYE"
MINT = "9JK2U7aEkp3tWaFNuaJowWRgNys5DVaKGxWk73VT5ray"
OTHER_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
RPC_URL = "https://rpc.test/?api-key=test"


def burn_ix(amount: Any, *, mint: str = MINT, kind: str = "burn", decimals: Any = None) -> dict[str, Any]:
    """jsonParsed burn / burnChecked instruction."""
    info: dict[str, Any] = {"account": "acct", "authority": BURNER, "mint": mint}
    if decimals is None:
        info["amount"] = amount
    else:
        info["tokenAmount"] = {"amount": amount, "decimals": decimals}
    return {
        "program": "spl-token",
        "programId": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
        "parsed": {"type": kind, "info": info},
    }


def make_tx(instructions: list[Any], inner: list[list[Any]] | None = None, err: Any = None) -> dict[str, Any]:
    """Minimal jsonParsed getTransaction result."""
    return {
        "slot": 1,
        "transaction": {"message": {"instructions": instructions}},
        "meta": {
            "err": err,
            "innerInstructions": [
                {"index": i, "instructions": group} for i, group in enumerate(inner or [])
            ],
        },
    }


class FakeLedger:
    """
    In-memory JSON-RPC endpoint: pages of signature items, transactions by signature,
    and a mint decimals value. Records every (method, params) call.
    """

    def __init__(
        self,
        pages: list[list[dict[str, Any]]] | None = None,
        transactions: dict[str, Any] | None = None,
        decimals: int | None = 6,
    ) -> None:
        self.pages = pages or []
        self.transactions = transactions or {}
        self.decimals = decimals
        self.calls: list[tuple[str, list[Any]]] = []

    def _page_after(self, before: str | None) -> list[dict[str, Any]]:
        if before is None:
            return self.pages[0] if self.pages else []
        for i, page in enumerate(self.pages):
            if page and page[-1]["signature"] == before:
                return self.pages[i + 1] if i + 1 < len(self.pages) else []
        return []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body["params"]
        self.calls.append((method, params))
        if method == "getTokenSupply":
            if self.decimals is None:
                return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32602, "message": "Invalid param"}})
            result: Any = {"context": {"slot": 1}, "value": {"amount": "1000000000000", "decimals": self.decimals, "uiAmountString": "1000000"}}
        elif method == "getSignaturesForAddress":
            result = self._page_after(params[1].get("before"))
        elif method == "getTransaction":
            result = self.transactions.get(params[0])
        else:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": "Method not found"}})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    def calls_for(self, method: str) -> list[list[Any]]:
        return [params for m, params in self.calls if m == method]


class SleepRecorder:
    """Async stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_rpc(sleeper):
    """Factory: SolanaRpcClient wired to a handler through httpx.MockTransport. Build inside the event loop."""
    from burn_dashboard.ledger.rpc import SolanaRpcClient

    def _make(handler: Callable[[httpx.Request], httpx.Response], max_retries: int = 4) -> SolanaRpcClient:
        return SolanaRpcClient(
            RPC_URL,
            max_retries=max_retries,
            transport=httpx.MockTransport(handler),
            sleep=sleeper,
        )

    return _make


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every env var the config layer reads so defaults apply."""
    for name in (
        "HELIUS_API_KEY",
        "HELIUS_APY_KEY",
        "SOLANA_RPC_URL",
        "BATCH_LIMIT",
        "MAX_PAGES",
        "SLEEP_MS",
        "BURNER_ADDRESS",
        "TOKEN_MINT",
        "TOKEN_SYMBOL",
        "PRICE_MINT",
        "DATA_DIR",
        "JUPITER_PRICE_URL",
        "DEXSCREENER_URL",
        "REQUEST_TIMEOUT_SEC",
        "RPC_MAX_RETRIES",
        "PRICE_RETRIES",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
