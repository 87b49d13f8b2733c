"""
Burn instruction extraction from jsonParsed transactions.

An instruction is a burn of our token when its parsed form has type "burn" or
"burnChecked" and info.mint equals the configured mint. Top-level
instructions are scanned first, then every inner-instruction group, each in
position order. Instructions whose amount cannot be read are skipped; upstream
shapes vary and one odd record must not sink the batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from burn_dashboard.burns.amounts import normalize_raw_amount, parse_raw_amount

BURN_INSTRUCTION_TYPES = frozenset({"burn", "burnChecked"})
# SPL mint decimals are a u8
MAX_TOKEN_DECIMALS = 255


@dataclass(frozen=True)
class BurnEvent:
    """One matching burn instruction. raw_amount is expressed at source_decimals."""

    raw_amount: int
    source_decimals: int

    def normalized(self, mint_decimals: int) -> int:
        return normalize_raw_amount(self.raw_amount, self.source_decimals, mint_decimals)


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def top_level_instructions(tx: dict[str, Any]) -> list[Any]:
    transaction = tx.get("transaction")
    message = transaction.get("message") if isinstance(transaction, dict) else None
    return _as_list(message.get("instructions")) if isinstance(message, dict) else []


def inner_instruction_groups(tx: dict[str, Any]) -> list[list[Any]]:
    meta = tx.get("meta")
    if not isinstance(meta, dict):
        return []
    return [
        _as_list(group.get("instructions"))
        for group in _as_list(meta.get("innerInstructions"))
        if isinstance(group, dict)
    ]


def match_burn(ix: Any, mint: str, mint_decimals: int) -> BurnEvent | None:
    """Return the BurnEvent for one instruction, or None when it is not a readable burn of `mint`."""
    if not isinstance(ix, dict):
        return None
    parsed = ix.get("parsed")
    if not isinstance(parsed, dict) or parsed.get("type") not in BURN_INSTRUCTION_TYPES:
        return None
    info = parsed.get("info")
    if not isinstance(info, dict) or info.get("mint") != mint:
        return None

    # burnChecked carries tokenAmount {amount, decimals}; plain burn only a flat amount
    token_amount = info.get("tokenAmount")
    if isinstance(token_amount, dict) and token_amount.get("amount") is not None:
        raw = parse_raw_amount(token_amount["amount"])
        decimals: Any = token_amount.get("decimals")
        if decimals is None:
            decimals = mint_decimals
    elif info.get("amount") is not None:
        raw = parse_raw_amount(info["amount"])
        decimals = mint_decimals
    else:
        return None
    if raw is None:
        return None
    try:
        source_decimals = int(decimals)
    except (TypeError, ValueError):
        return None
    if not 0 <= source_decimals <= MAX_TOKEN_DECIMALS:
        return None
    return BurnEvent(raw_amount=raw, source_decimals=source_decimals)


def _collect(instructions: Iterable[Any], mint: str, mint_decimals: int, out: list[BurnEvent]) -> None:
    for ix in instructions:
        event = match_burn(ix, mint, mint_decimals)
        if event is not None:
            out.append(event)


def find_burn_events(tx: dict[str, Any] | None, mint: str, mint_decimals: int) -> list[BurnEvent]:
    """All burn events for `mint` in one transaction, top-level first, then inner groups in order."""
    events: list[BurnEvent] = []
    if not isinstance(tx, dict):
        return events
    _collect(top_level_instructions(tx), mint, mint_decimals, events)
    for group in inner_instruction_groups(tx):
        _collect(group, mint, mint_decimals, events)
    return events


def transaction_failed(tx: dict[str, Any]) -> bool:
    """True when meta.err is set; such transactions carry no effective burns."""
    meta = tx.get("meta")
    return isinstance(meta, dict) and meta.get("err") is not None
