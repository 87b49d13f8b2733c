"""
Main entrypoint: burn scan, then price report, as one scheduled run.

The scheduler can also call the jobs separately (burn-scan, burn-price). The
price job only runs after a successful scan so price.json always reflects
the burn.json written by the same run.

Env: HELIUS_API_KEY (or HELIUS_APY_KEY), BATCH_LIMIT, MAX_PAGES, SLEEP_MS, DATA_DIR, etc.
"""

import argparse

# Configure structured JSON logging before other imports that may log
from burn_dashboard.burn_logging import get_logger

logger = get_logger("main")


def main() -> int:
    from burn_dashboard.jobs import burn_job, price_job

    ap = argparse.ArgumentParser(description="Scan burns, then write the price snapshot")
    ap.add_argument("--data-dir", type=str, default=None, help="Data directory (default: DATA_DIR or ./data)")
    args = ap.parse_args()
    forwarded = ["--data-dir", args.data_dir] if args.data_dir else []

    code = burn_job.main(forwarded)
    if code != 0:
        logger.error("main_burn_scan_failed", exit_code=code)
        return code
    return price_job.main(forwarded)


if __name__ == "__main__":
    raise SystemExit(main())
