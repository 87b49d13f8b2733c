"""
Configuration management for Burn Dashboard.

Loads settings from environment variables and an optional .env file and
exposes them as explicit ScanConfig / PriceConfig values.
"""

from burn_dashboard.config.env import PriceConfig, ScanConfig  # noqa: F401

__all__ = ["PriceConfig", "ScanConfig"]
