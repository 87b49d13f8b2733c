"""
Tests for environment-driven configuration (credential lookup, tunables, validation).
"""

from __future__ import annotations

import pytest

from burn_dashboard.config.env import (
    DEFAULT_BURNER_ADDRESS,
    DEFAULT_TOKEN_MINT,
    PriceConfig,
    ScanConfig,
    get_api_key,
    get_rpc_url,
    mask_rpc_url,
)
from burn_dashboard.core.exceptions import ConfigurationError


def test_api_key_first_non_empty_wins(clean_env):
    clean_env.setenv("HELIUS_API_KEY", "")
    clean_env.setenv("HELIUS_APY_KEY", "typo-key")
    assert get_api_key() == "typo-key"
    clean_env.setenv("HELIUS_API_KEY", "main-key")
    assert get_api_key() == "main-key"


def test_rpc_url_from_key(clean_env):
    clean_env.setenv("HELIUS_API_KEY", "abc")
    assert get_rpc_url() == "https://mainnet.helius-rpc.com/?api-key=abc"


def test_rpc_url_override(clean_env):
    clean_env.setenv("HELIUS_API_KEY", "abc")
    clean_env.setenv("SOLANA_RPC_URL", "https://my.rpc")
    assert get_rpc_url() == "https://my.rpc"


def test_missing_credential_is_configuration_error(clean_env):
    with pytest.raises(ConfigurationError):
        ScanConfig.from_env()
    assert get_rpc_url(required=False) is None


def test_scan_config_defaults(clean_env):
    clean_env.setenv("HELIUS_API_KEY", "abc")
    config = ScanConfig.from_env()
    assert config.batch_limit == 100
    assert config.max_pages == 20
    assert config.sleep_ms == 200
    assert config.sleep_sec == 0.2
    assert config.burner_address == DEFAULT_BURNER_ADDRESS
    assert config.mint == DEFAULT_TOKEN_MINT


def test_scan_config_tunables(clean_env):
    clean_env.setenv("HELIUS_API_KEY", "abc")
    clean_env.setenv("BATCH_LIMIT", "50")
    clean_env.setenv("MAX_PAGES", "3")
    clean_env.setenv("SLEEP_MS", "120")
    config = ScanConfig.from_env()
    assert (config.batch_limit, config.max_pages, config.sleep_ms) == (50, 3, 120)


@pytest.mark.parametrize("name,value", [("BATCH_LIMIT", "lots"), ("BATCH_LIMIT", "0"), ("MAX_PAGES", "0"), ("SLEEP_MS", "-1")])
def test_scan_config_rejects_bad_values(clean_env, name, value):
    clean_env.setenv("HELIUS_API_KEY", "abc")
    clean_env.setenv(name, value)
    with pytest.raises(ConfigurationError):
        ScanConfig.from_env()


def test_price_config_works_without_key(clean_env):
    """The price job only needs the key for supply fields."""
    clean_env.setenv("PRICE_MINT", "OtherMint111")
    config = PriceConfig.from_env()
    assert config.rpc_url is None
    assert config.mint == "OtherMint111"


def test_price_mint_defaults_to_token_mint(clean_env):
    clean_env.setenv("TOKEN_MINT", "TokenMint111")
    assert PriceConfig.from_env().mint == "TokenMint111"


def test_mask_rpc_url():
    assert mask_rpc_url("https://mainnet.helius-rpc.com/?api-key=secret") == "https://mainnet.helius-rpc.com/?api-key=***"
    assert mask_rpc_url("https://my.rpc") == "https://my.rpc"
