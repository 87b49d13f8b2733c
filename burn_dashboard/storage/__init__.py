"""
JSON snapshot storage (data/burn.json, data/price.json).
"""

from burn_dashboard.storage.json_store import (
    BURN_FILENAME,
    PRICE_FILENAME,
    read_json,
    write_json_atomic,
)

__all__ = ["BURN_FILENAME", "PRICE_FILENAME", "read_json", "write_json_atomic"]
