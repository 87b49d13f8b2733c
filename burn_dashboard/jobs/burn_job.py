"""
Burn scanner job: scan the burner wallet and write data/burn.json.

Usage:
    burn-scan [--data-dir DIR] [--max-pages N] [--batch-limit N]
    python -m burn_dashboard.jobs.burn_job

Env: HELIUS_API_KEY (or HELIUS_APY_KEY), BATCH_LIMIT, MAX_PAGES, SLEEP_MS,
BURNER_ADDRESS, TOKEN_MINT, TOKEN_SYMBOL, DATA_DIR. Exits 1 on any fatal
error, including a missing API key; burn.json is left untouched then.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import sys
from pathlib import Path

from burn_dashboard.burn_logging import bind_run, get_logger
from burn_dashboard.burns.aggregate import BurnAggregate, BurnRecord
from burn_dashboard.burns.scanner import scan_burns
from burn_dashboard.config.env import ScanConfig, get_data_dir, mask_rpc_url
from burn_dashboard.core.exceptions import BurnDashboardError
from burn_dashboard.ledger.rpc import SolanaRpcClient
from burn_dashboard.storage.json_store import BURN_FILENAME, write_json_atomic

logger = get_logger(__name__)


def _print_burn(symbol: str):
    def _print(record: BurnRecord) -> None:
        print(f"{record.amount_ui} {symbol}  |  {record.url}")

    return _print


def print_summary(aggregate: BurnAggregate, symbol: str) -> None:
    print("-" * 80)
    if aggregate.count > 0:
        print(f"Total burned: {aggregate.total_ui} {symbol} in {aggregate.count} burns")
    else:
        print(f"No {symbol} burns found in the scanned transactions.")


async def run_scan(config: ScanConfig) -> BurnAggregate:
    async with SolanaRpcClient(
        config.rpc_url,
        max_retries=config.max_retries,
        request_timeout_sec=config.request_timeout_sec,
    ) as rpc:
        return await scan_burns(rpc, config, on_burn=_print_burn(config.symbol))


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Scan burner wallet transactions and write burn.json")
    ap.add_argument("--data-dir", type=str, default=None, help="Output directory (default: DATA_DIR or ./data)")
    ap.add_argument("--max-pages", type=int, default=None, help="Override MAX_PAGES")
    ap.add_argument("--batch-limit", type=int, default=None, help="Override BATCH_LIMIT")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    bind_run("burn_scan")
    try:
        config = ScanConfig.from_env()
        overrides = {}
        if args.max_pages is not None:
            overrides["max_pages"] = args.max_pages
        if args.batch_limit is not None:
            overrides["batch_limit"] = args.batch_limit
        if overrides:
            config = dataclasses.replace(config, **overrides)
        bind_run("burn_scan", mint=config.mint, burner=config.burner_address)
    except BurnDashboardError as e:
        print(f"[burn] ERROR: {e}", file=sys.stderr)
        logger.error("burn_scan_config_error", error=str(e))
        return 1

    out_path = (Path(args.data_dir) if args.data_dir else get_data_dir()) / BURN_FILENAME
    logger.info(
        "burn_scan_started",
        rpc_url=mask_rpc_url(config.rpc_url),
        batch_limit=config.batch_limit,
        max_pages=config.max_pages,
    )

    try:
        aggregate = asyncio.run(run_scan(config))
        print_summary(aggregate, config.symbol)
        write_json_atomic(out_path, aggregate.to_dict())
    except BurnDashboardError as e:
        print(f"[burn] ERROR: {e}", file=sys.stderr)
        logger.error("burn_scan_failed", error=str(e))
        return 1
    except Exception as e:
        print(f"[burn] ERROR: {e}", file=sys.stderr)
        logger.exception("burn_scan_failed", error=str(e))
        return 1

    print(f"Saved: {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
