"""
Burn scanning package.

Pages through a wallet's signatures, extracts burn instructions for one
mint, rescales amounts with exact integer arithmetic and accumulates the
burn.json aggregate.
"""

from burn_dashboard.burns.aggregate import BurnAccumulator, BurnAggregate, BurnRecord
from burn_dashboard.burns.amounts import format_raw_amount, normalize_raw_amount, parse_ui_amount
from burn_dashboard.burns.extractor import BurnEvent, find_burn_events
from burn_dashboard.burns.scanner import iter_signatures, scan_burns

__all__ = [
    "BurnAccumulator",
    "BurnAggregate",
    "BurnEvent",
    "BurnRecord",
    "find_burn_events",
    "format_raw_amount",
    "iter_signatures",
    "normalize_raw_amount",
    "parse_ui_amount",
    "scan_burns",
]
