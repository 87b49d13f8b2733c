"""
Price reporter job: read data/burn.json, price the burned total, write data/price.json.

Usage:
    burn-price [--data-dir DIR]
    python -m burn_dashboard.jobs.price_job

Env: TOKEN_MINT / PRICE_MINT, JUPITER_PRICE_URL, DEXSCREENER_URL, PRICE_RETRIES,
DATA_DIR. HELIUS_API_KEY is optional here: when set, decimals and
totalSupplyTokens are added from getTokenSupply.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

from burn_dashboard.burn_logging import bind_run, get_logger
from burn_dashboard.config.env import PriceConfig, get_data_dir
from burn_dashboard.core.exceptions import BurnDashboardError
from burn_dashboard.ledger.models import TokenSupply
from burn_dashboard.ledger.rpc import SolanaRpcClient
from burn_dashboard.pricing.reporter import PriceSnapshot, build_snapshot
from burn_dashboard.storage.json_store import BURN_FILENAME, PRICE_FILENAME, write_json_atomic

logger = get_logger(__name__)


async def _token_supply(config: PriceConfig) -> TokenSupply | None:
    if not config.rpc_url:
        return None
    async with SolanaRpcClient(config.rpc_url, request_timeout_sec=config.request_timeout_sec) as rpc:
        return await rpc.get_token_supply(config.mint)


async def run_report(config: PriceConfig, data_dir: Path) -> PriceSnapshot:
    supply = await _token_supply(config)
    async with httpx.AsyncClient(timeout=httpx.Timeout(config.request_timeout_sec)) as client:
        return await build_snapshot(
            client,
            config,
            data_dir / BURN_FILENAME,
            data_dir / PRICE_FILENAME,
            supply=supply,
        )


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Price the burned total and write price.json")
    ap.add_argument("--data-dir", type=str, default=None, help="Data directory (default: DATA_DIR or ./data)")
    args = ap.parse_args(argv)
    bind_run("price_report")

    try:
        config = PriceConfig.from_env()
        bind_run("price_report", mint=config.mint)
        data_dir = Path(args.data_dir) if args.data_dir else get_data_dir()
        snapshot = asyncio.run(run_report(config, data_dir))
        out_path = write_json_atomic(data_dir / PRICE_FILENAME, snapshot.to_dict())
    except BurnDashboardError as e:
        print(f"[price] ERROR: {e}", file=sys.stderr)
        logger.error("price_report_failed", error=str(e))
        return 1
    except Exception as e:
        print(f"[price] ERROR: {e}", file=sys.stderr)
        logger.exception("price_report_failed", error=str(e))
        return 1

    out = snapshot.to_dict()
    print(f"{config.symbol} price (USD): {out['priceUsd']} [{snapshot.price_source}]")
    print(f"Total burned (tokens): {out['burnTotalTokens']}")
    print(f"Total burned (USD): {out['burnTotalUsd']}")
    print(f"Saved: {out_path}")
    logger.info("price_report_complete", price_usd=out["priceUsd"], source=snapshot.price_source)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
