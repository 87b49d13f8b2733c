"""
Price snapshot: burned total (from burn.json) x current USD price -> price.json.

The burned total is parsed exactly from the totalUi decimal string. A missing or unreadable
burn.json counts as zero burned tokens. Price comes from the first provider
that answers; if none does, the price stored in the previous price.json is
reused, and only when that is missing too does the job fail.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Awaitable, Callable, Sequence

import httpx

from burn_dashboard.burn_logging import get_logger
from burn_dashboard.burns.amounts import format_raw_amount, parse_ui_amount
from burn_dashboard.config.env import PriceConfig
from burn_dashboard.core.exceptions import PriceUnavailableError
from burn_dashboard.ledger.models import TokenSupply
from burn_dashboard.pricing.providers import (
    DexScreenerPriceProvider,
    JupiterPriceProvider,
    PriceLookupError,
    PriceProvider,
    fetch_with_retry,
)
from burn_dashboard.storage.json_store import read_json

logger = get_logger(__name__)

CACHE_SOURCE = "cache"


@dataclass(frozen=True)
class PriceSnapshot:
    """price.json contents. Optional supply fields are only written when known."""

    mint: str
    price_usd: Decimal
    burn_total_tokens: Decimal
    updated_at: str
    price_source: str
    decimals: int | None = None
    total_supply_tokens: Decimal | None = None

    @property
    def burn_total_usd(self) -> Decimal:
        return self.burn_total_tokens * self.price_usd

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "mint": self.mint,
            "priceUsd": float(self.price_usd),
            "burnTotalTokens": float(self.burn_total_tokens),
            "burnTotalUsd": float(self.burn_total_usd),
            "updatedAt": self.updated_at,
            "priceSource": self.price_source,
        }
        if self.decimals is not None:
            out["decimals"] = self.decimals
        if self.total_supply_tokens is not None:
            out["totalSupplyTokens"] = float(self.total_supply_tokens)
        return out


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with milliseconds and a Z suffix, e.g. 2024-05-01T12:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _decimal_or_none(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        d = Decimal(str(value))
    except InvalidOperation:
        return None
    return d if d.is_finite() else None


def read_burn_total(path: Path) -> Decimal:
    """totalUi from burn.json; Decimal(0) when the file is missing, empty or malformed."""
    data = read_json(path)
    if data is None:
        logger.warning("burn_total_missing", path=str(path), fallback="0")
        return Decimal(0)
    total_ui = data.get("totalUi", "0")
    numeric = isinstance(total_ui, (str, int, float)) and not isinstance(total_ui, bool)
    text = str(total_ui).strip() if numeric else ""
    places = len(text.partition(".")[2])
    try:
        raw = parse_ui_amount(text, places)
    except ValueError as e:
        logger.warning("burn_total_not_numeric", path=str(path), total_ui=total_ui, error=str(e), fallback="0")
        return Decimal(0)
    return Decimal(format_raw_amount(raw, places))


def read_cached_price(path: Path) -> Decimal | None:
    """priceUsd from a previous price.json, if any."""
    data = read_json(path)
    if data is None:
        return None
    price = _decimal_or_none(data.get("priceUsd"))
    return price if price is not None and price > 0 else None


def default_providers(config: PriceConfig) -> list[PriceProvider]:
    return [
        JupiterPriceProvider(config.jupiter_url, config.vs_token),
        DexScreenerPriceProvider(config.dexscreener_url),
    ]


async def fetch_price(
    client: httpx.AsyncClient,
    mint: str,
    providers: Sequence[PriceProvider],
    *,
    retries: int = 3,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> tuple[Decimal, str] | None:
    """(price, provider name) from the first provider that succeeds; None if all fail."""
    for provider in providers:
        try:
            price = await fetch_with_retry(provider, client, mint, retries=retries, sleep=sleep)
        except PriceLookupError as e:
            logger.warning("price_provider_failed", provider=provider.name, mint=mint, error=str(e))
            continue
        return price, provider.name
    return None


async def build_snapshot(
    client: httpx.AsyncClient,
    config: PriceConfig,
    burn_path: Path,
    price_path: Path,
    *,
    providers: Sequence[PriceProvider] | None = None,
    supply: TokenSupply | None = None,
    now: datetime | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> PriceSnapshot:
    """
    Compute the price snapshot. Raises PriceUnavailableError when no provider
    answers and price_path holds no previous price.
    """
    burn_total = read_burn_total(burn_path)
    fetched = await fetch_price(
        client,
        config.mint,
        providers if providers is not None else default_providers(config),
        retries=config.retries,
        sleep=sleep,
    )
    if fetched is None:
        cached = read_cached_price(price_path)
        if cached is None:
            raise PriceUnavailableError(f"no price for {config.mint} and no previous {price_path.name}")
        logger.warning("price_from_cache", mint=config.mint, price_usd=str(cached))
        fetched = (cached, CACHE_SOURCE)
    price, source = fetched

    decimals = total_supply = None
    if supply is not None:
        decimals = supply.decimals
        total_supply = Decimal(format_raw_amount(supply.amount, supply.decimals))

    return PriceSnapshot(
        mint=config.mint,
        price_usd=price,
        burn_total_tokens=burn_total,
        updated_at=utc_timestamp(now),
        price_source=source,
        decimals=decimals,
        total_supply_tokens=total_supply,
    )
