"""
Environment variable loading and validation for Burn Dashboard.

- HELIUS_API_KEY / HELIUS_APY_KEY: Helius credential (first non-empty wins; required)
- SOLANA_RPC_URL: full RPC endpoint; overrides the Helius URL built from the key
- BURNER_ADDRESS, TOKEN_MINT, TOKEN_SYMBOL, PRICE_MINT: what to scan and price
- BATCH_LIMIT, MAX_PAGES, SLEEP_MS: pagination tunables set by the workflow
- DATA_DIR: output directory for burn.json / price.json (default ./data)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from burn_dashboard.core.exceptions import ConfigurationError

# Project root: config is burn_dashboard/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_BURNER_ADDRESS = "5G62fW1BuK6k9B6sGwvTBtoKRPseshj9SSYPzudSPUYE"
DEFAULT_TOKEN_MINT = "9JK2U7aEkp3tWaFNuaJowWRgNys5DVaKGxWk73VT5ray"
DEFAULT_TOKEN_SYMBOL = "NUMMUS"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
DEFAULT_JUPITER_PRICE_URL = "https://lite-api.jup.ag/price/v2"
DEFAULT_DEXSCREENER_URL = "https://api.dexscreener.com/latest/dex/tokens"
EXPLORER_TX_URL_TEMPLATE = "https://solscan.io/tx/{signature}"

DEFAULT_BATCH_LIMIT = 100
DEFAULT_MAX_PAGES = 20
DEFAULT_SLEEP_MS = 200
DEFAULT_REQUEST_TIMEOUT_SEC = 30.0
DEFAULT_RPC_MAX_RETRIES = 4
DEFAULT_PRICE_RETRIES = 3
# Used when getTokenSupply cannot be read
FALLBACK_MINT_DECIMALS = 6


def load_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def _get_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def _get_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw, 10)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


def _get_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def get_api_key() -> str | None:
    """Return the Helius key from HELIUS_API_KEY, else HELIUS_APY_KEY; None when both are empty."""
    load_env()
    for name in ("HELIUS_API_KEY", "HELIUS_APY_KEY"):
        key = (os.getenv(name) or "").strip()
        if key:
            return key
    return None


def get_rpc_url(required: bool = True) -> str | None:
    """
    Resolve the RPC URL.
    Order: SOLANA_RPC_URL > Helius mainnet URL from the API key.
    Raises ConfigurationError when required and neither is set.
    """
    load_env()
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    key = get_api_key()
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    if required:
        raise ConfigurationError("set HELIUS_API_KEY (or HELIUS_APY_KEY)")
    return None


def mask_rpc_url(url: str) -> str:
    """Hide the API key in an RPC URL for logs."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url


def get_data_dir() -> Path:
    load_env()
    return Path(_get_str("DATA_DIR", str(Path.cwd() / "data")))


@dataclass(frozen=True)
class ScanConfig:
    """Everything the burn scanner needs; passed explicitly so the core never reads env."""

    rpc_url: str
    burner_address: str = DEFAULT_BURNER_ADDRESS
    mint: str = DEFAULT_TOKEN_MINT
    symbol: str = DEFAULT_TOKEN_SYMBOL
    batch_limit: int = DEFAULT_BATCH_LIMIT
    max_pages: int = DEFAULT_MAX_PAGES
    sleep_ms: int = DEFAULT_SLEEP_MS
    request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC
    max_retries: int = DEFAULT_RPC_MAX_RETRIES

    def __post_init__(self) -> None:
        if not self.rpc_url.strip():
            raise ConfigurationError("rpc_url must be non-empty")
        if not (1 <= self.batch_limit <= 1000):
            raise ConfigurationError("BATCH_LIMIT must be between 1 and 1000")
        if self.max_pages < 1:
            raise ConfigurationError("MAX_PAGES must be positive")
        if self.sleep_ms < 0:
            raise ConfigurationError("SLEEP_MS must not be negative")

    @property
    def sleep_sec(self) -> float:
        return self.sleep_ms / 1000.0

    @classmethod
    def from_env(cls) -> "ScanConfig":
        """Build from environment. Raises ConfigurationError when the credential is missing."""
        load_env()
        return cls(
            rpc_url=get_rpc_url(required=True) or "",
            burner_address=_get_str("BURNER_ADDRESS", DEFAULT_BURNER_ADDRESS),
            mint=_get_str("TOKEN_MINT", DEFAULT_TOKEN_MINT),
            symbol=_get_str("TOKEN_SYMBOL", DEFAULT_TOKEN_SYMBOL),
            batch_limit=_get_int("BATCH_LIMIT", DEFAULT_BATCH_LIMIT),
            max_pages=_get_int("MAX_PAGES", DEFAULT_MAX_PAGES),
            sleep_ms=_get_int("SLEEP_MS", DEFAULT_SLEEP_MS),
            request_timeout_sec=_get_float("REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC),
            max_retries=_get_int("RPC_MAX_RETRIES", DEFAULT_RPC_MAX_RETRIES),
        )


@dataclass(frozen=True)
class PriceConfig:
    """Settings for the price reporter. rpc_url is optional (supply fields only)."""

    mint: str = DEFAULT_TOKEN_MINT
    symbol: str = DEFAULT_TOKEN_SYMBOL
    rpc_url: str | None = None
    jupiter_url: str = DEFAULT_JUPITER_PRICE_URL
    dexscreener_url: str = DEFAULT_DEXSCREENER_URL
    vs_token: str = USDC_MINT
    retries: int = DEFAULT_PRICE_RETRIES
    request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC

    @classmethod
    def from_env(cls) -> "PriceConfig":
        load_env()
        token_mint = _get_str("TOKEN_MINT", DEFAULT_TOKEN_MINT)
        return cls(
            mint=_get_str("PRICE_MINT", token_mint),
            symbol=_get_str("TOKEN_SYMBOL", DEFAULT_TOKEN_SYMBOL),
            rpc_url=get_rpc_url(required=False),
            jupiter_url=_get_str("JUPITER_PRICE_URL", DEFAULT_JUPITER_PRICE_URL),
            dexscreener_url=_get_str("DEXSCREENER_URL", DEFAULT_DEXSCREENER_URL),
            retries=_get_int("PRICE_RETRIES", DEFAULT_PRICE_RETRIES),
            request_timeout_sec=_get_float("REQUEST_TIMEOUT_SEC", DEFAULT_REQUEST_TIMEOUT_SEC),
        )


def explorer_url(signature: str) -> str:
    return EXPLORER_TX_URL_TEMPLATE.format(signature=signature)
