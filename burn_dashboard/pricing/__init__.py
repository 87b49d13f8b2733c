"""
Price reporting: USD price lookup with provider fallback and the price.json snapshot.
"""

from burn_dashboard.pricing.providers import (
    DexScreenerPriceProvider,
    JupiterPriceProvider,
    PriceLookupError,
)
from burn_dashboard.pricing.reporter import PriceSnapshot, build_snapshot, read_burn_total

__all__ = [
    "DexScreenerPriceProvider",
    "JupiterPriceProvider",
    "PriceLookupError",
    "PriceSnapshot",
    "build_snapshot",
    "read_burn_total",
]
