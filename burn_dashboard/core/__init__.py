"""
Core shared definitions (exceptions) for the burn and price jobs.
"""

from burn_dashboard.core.exceptions import (
    BurnDashboardError,
    ConfigurationError,
    PriceUnavailableError,
    RpcError,
)

__all__ = [
    "BurnDashboardError",
    "ConfigurationError",
    "PriceUnavailableError",
    "RpcError",
]
