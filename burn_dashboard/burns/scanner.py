"""
Burn scan: page through the burner wallet's signatures, fetch each successful
transaction, extract burns of the configured mint and fold them into a
BurnAggregate.

Everything runs sequentially on one event loop. Page N's cursor is the last
signature of page N-1, and each transaction is fully processed before the
next signature is requested. Delays between requests keep Helius from
rate-limiting the run.
"""

from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator, Awaitable, Callable

from burn_dashboard.burn_logging import get_logger
from burn_dashboard.burns.aggregate import BurnAccumulator, BurnAggregate, BurnRecord
from burn_dashboard.burns.extractor import find_burn_events, transaction_failed
from burn_dashboard.config.env import FALLBACK_MINT_DECIMALS, ScanConfig
from burn_dashboard.core.exceptions import RpcError
from burn_dashboard.ledger.rpc import SolanaRpcClient

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


async def iter_signatures(
    rpc: SolanaRpcClient,
    address: str,
    page_size: int = 100,
    max_pages: int = 10,
    *,
    delay_sec: float = 0.0,
    sleep: Sleep = asyncio.sleep,
) -> AsyncIterator[str]:
    """
    Yield signatures of successful transactions for `address`, newest first.

    Stops at the first empty page, on an RPC failure, or after `max_pages`.
    Failed transactions (err != None) are skipped silently.

    Raises RpcError when the very first page cannot be fetched: without it
    there is nothing to report and burn.json must keep its previous contents.
    """
    before: str | None = None
    for page in range(max_pages):
        infos = await rpc.get_signatures_for_address(address, limit=page_size, before=before)
        if infos is None and page == 0:
            raise RpcError("getSignaturesForAddress", f"first page for {address} unavailable")
        if infos is None:
            logger.warning("signature_page_failed", address=address, page=page, before=before)
            return
        if not infos:
            logger.debug("signature_pages_done", address=address, pages=page)
            return

        for info in infos:
            if info.succeeded:
                yield info.signature

        before = infos[-1].signature
        await sleep(delay_sec)


async def mint_decimals_for(rpc: SolanaRpcClient, mint: str) -> int:
    """Registered decimals for `mint`; falls back to 6 when getTokenSupply fails."""
    supply = await rpc.get_token_supply(mint)
    if supply is None:
        logger.warning("mint_decimals_fallback", mint=mint, decimals=FALLBACK_MINT_DECIMALS)
        return FALLBACK_MINT_DECIMALS
    return supply.decimals


async def scan_burns(
    rpc: SolanaRpcClient,
    config: ScanConfig,
    *,
    on_burn: Callable[[BurnRecord], None] | None = None,
    sleep: Sleep = asyncio.sleep,
) -> BurnAggregate:
    """
    Scan the burner wallet and return the aggregate of every burn of config.mint.

    on_burn is called with each new BurnRecord as it is found (console output).
    Transactions that cannot be fetched are logged and skipped.
    """
    mint_decimals = await mint_decimals_for(rpc, config.mint)
    acc = BurnAccumulator(mint_decimals=mint_decimals)
    skipped = 0

    async for signature in iter_signatures(
        rpc,
        config.burner_address,
        config.batch_limit,
        config.max_pages,
        delay_sec=config.sleep_sec,
        sleep=sleep,
    ):
        tx = await rpc.get_transaction(signature)
        if tx is None:
            skipped += 1
            logger.warning("transaction_skipped", signature=signature)
            continue

        if not transaction_failed(tx):
            for event in find_burn_events(tx, config.mint, mint_decimals):
                record = acc.add(signature, event)
                if on_burn is not None:
                    on_burn(record)

        await sleep(config.sleep_sec)

    aggregate = acc.finish()
    logger.info(
        "burn_scan_complete",
        mint=config.mint,
        count=aggregate.count,
        total_ui=aggregate.total_ui,
        mint_decimals=mint_decimals,
        skipped_transactions=skipped,
    )
    return aggregate
