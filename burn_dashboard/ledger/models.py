"""
Data models for ledger RPC output.

Only the fields the burn scan reads are modelled; transaction records stay
plain dicts (jsonParsed JSON) because their shape varies by program.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# err stand-in for items that omit the field; such items are not treated as successes
ERR_FIELD_MISSING = "err field missing"


@dataclass(frozen=True)
class SignatureInfo:
    """
    Transaction signature info from getSignaturesForAddress.

    Mirrors Solana RPC response fields; the signature is the unit of work
    handed from pagination to transaction fetching.
    """

    signature: str
    err: Any  # None only when the RPC reported err: null
    slot: int | None = None
    block_time: int | None = None  # Unix timestamp; None if not available

    @property
    def succeeded(self) -> bool:
        return self.err is None

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "SignatureInfo":
        """Build from a single getSignaturesForAddress result item."""
        slot = item.get("slot")
        return cls(
            signature=item["signature"],
            err=item.get("err", ERR_FIELD_MISSING),
            slot=int(slot) if slot is not None else None,
            block_time=item.get("blockTime"),
        )


@dataclass(frozen=True)
class TokenSupply:
    """getTokenSupply value: raw supply and the mint's registered decimals."""

    amount: int
    decimals: int

    @classmethod
    def from_rpc_value(cls, value: dict[str, Any]) -> "TokenSupply":
        return cls(amount=int(str(value.get("amount", "0"))), decimals=int(value["decimals"]))
