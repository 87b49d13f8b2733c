"""
USD price providers.

Jupiter's price API is asked first (quoted against USDC); DexScreener is the
fallback, using the pair with the most USD liquidity. Each provider raises
PriceLookupError when it has no usable price; the retry helper decides
whether to try again.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Callable

import httpx

from burn_dashboard.burn_logging import get_logger

logger = get_logger(__name__)

PRICE_RETRY_BASE_SEC = 1.0


class PriceLookupError(Exception):
    """Provider answered but without a usable price, or the request failed."""


def _to_price(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        raise PriceLookupError("price missing")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise PriceLookupError(f"price not numeric: {value!r}") from None
    if not price.is_finite() or price <= 0:
        raise PriceLookupError(f"price not positive: {value!r}")
    return price


async def _get_json(client: httpx.AsyncClient, url: str, params: dict[str, str] | None = None) -> Any:
    try:
        resp = await client.get(url, params=params, headers={"accept": "application/json"})
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as e:
        raise PriceLookupError(f"request failed: {e}") from e
    except ValueError as e:
        raise PriceLookupError(f"invalid JSON: {e}") from e


class JupiterPriceProvider:
    """GET <url>?ids=<mint>&vsToken=<quote mint> -> {"data": {<mint>: {"price": ...}}}."""

    name = "jupiter"

    def __init__(self, url: str, vs_token: str | None = None) -> None:
        self.url = url
        self.vs_token = vs_token

    async def fetch(self, client: httpx.AsyncClient, mint: str) -> Decimal:
        params = {"ids": mint}
        if self.vs_token:
            params["vsToken"] = self.vs_token
        data = await _get_json(client, self.url, params)
        items = data.get("data") if isinstance(data, dict) else None
        if not isinstance(items, dict):
            raise PriceLookupError("unexpected Jupiter response shape")
        item = items.get(mint)
        # Some deployments key the result by symbol; accept a lone entry
        if item is None and len(items) == 1:
            item = next(iter(items.values()))
        if not isinstance(item, dict):
            raise PriceLookupError(f"no Jupiter price for {mint}")
        return _to_price(item.get("price"))


def _liquidity_usd(pair: dict[str, Any]) -> Decimal:
    liquidity = pair.get("liquidity")
    raw = liquidity.get("usd") if isinstance(liquidity, dict) else None
    try:
        return Decimal(str(raw)) if raw is not None else Decimal(0)
    except InvalidOperation:
        return Decimal(0)


class DexScreenerPriceProvider:
    """GET <url>/<mint> -> {"pairs": [{"priceUsd": ..., "liquidity": {"usd": ...}}, ...]}."""

    name = "dexscreener"

    def __init__(self, url: str) -> None:
        self.url = url.rstrip("/")

    async def fetch(self, client: httpx.AsyncClient, mint: str) -> Decimal:
        data = await _get_json(client, f"{self.url}/{mint}")
        pairs = data.get("pairs") if isinstance(data, dict) else None
        candidates = [p for p in pairs or [] if isinstance(p, dict) and p.get("priceUsd") is not None]
        if not candidates:
            raise PriceLookupError(f"no DexScreener pairs for {mint}")
        best = max(candidates, key=_liquidity_usd)
        return _to_price(best.get("priceUsd"))


PriceProvider = JupiterPriceProvider | DexScreenerPriceProvider


async def fetch_with_retry(
    provider: PriceProvider,
    client: httpx.AsyncClient,
    mint: str,
    *,
    retries: int = 3,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> Decimal:
    """Try provider up to `retries` times, waiting 1s, 2s, ... between tries. Re-raises the last error."""
    attempts = max(retries, 1)
    for attempt in range(attempts):
        try:
            return await provider.fetch(client, mint)
        except PriceLookupError as e:
            if attempt + 1 >= attempts:
                raise
            logger.warning(
                "price_retry",
                provider=provider.name,
                attempt=attempt + 1,
                max_attempts=attempts,
                error=str(e),
            )
            await sleep(PRICE_RETRY_BASE_SEC * (attempt + 1))
    raise PriceLookupError("unreachable")
