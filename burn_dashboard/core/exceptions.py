"""
Application-level exceptions.

Only errors that stop a job are raised; per-transaction and per-instruction
problems are logged and skipped where they occur.
"""

from __future__ import annotations


class BurnDashboardError(Exception):
    """Base class for fatal job errors; entry points map it to exit code 1."""


class ConfigurationError(BurnDashboardError):
    """Required setting missing or invalid (e.g. no Helius API key)."""


class RpcError(BurnDashboardError):
    """Permanent JSON-RPC failure: non-retryable HTTP status or an error payload."""

    def __init__(self, method: str, message: str, code: int | None = None) -> None:
        super().__init__(f"RPC {method} failed: {message}" + (f" (code={code})" if code is not None else ""))
        self.method = method
        self.code = code


class PriceUnavailableError(BurnDashboardError):
    """Every price provider failed and no previous price snapshot exists."""
