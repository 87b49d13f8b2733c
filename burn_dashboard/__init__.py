"""
Burn Dashboard: scheduled collector for a token burn dashboard.

Two batch jobs run in sequence by an external scheduler: the burn scanner
walks a burner wallet's Solana transactions and writes data/burn.json; the
price reporter prices the burned total and writes data/price.json.
"""

__version__ = "0.1.0"
