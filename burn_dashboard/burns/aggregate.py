"""
Burn aggregate: the persisted burn.json document and the accumulator that builds it.

The running total is a raw int for the whole scan and is formatted exactly
once in finish(); per-burn strings are never summed back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from burn_dashboard.burns.amounts import format_raw_amount
from burn_dashboard.burns.extractor import BurnEvent
from burn_dashboard.config.env import explorer_url


@dataclass(frozen=True)
class BurnRecord:
    """One burn after normalization: display amount plus explorer link."""

    amount_ui: str
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {"amountUi": self.amount_ui, "url": self.url}


@dataclass(frozen=True)
class BurnAggregate:
    """burn.json: {count, totalUi, burns}. count == len(burns)."""

    count: int
    total_ui: str
    burns: tuple[BurnRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable dict with the front end's camelCase keys."""
        return {
            "count": self.count,
            "totalUi": self.total_ui,
            "burns": [b.to_dict() for b in self.burns],
        }

    @classmethod
    def empty(cls) -> "BurnAggregate":
        return cls(count=0, total_ui="0")


@dataclass
class BurnAccumulator:
    """
    Folds burn events, in arrival order, into a BurnAggregate.

        acc = BurnAccumulator(mint_decimals=6)
        record = acc.add(signature, event)
        aggregate = acc.finish()
    """

    mint_decimals: int
    total_raw: int = 0
    records: list[BurnRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)

    def add(self, signature: str, event: BurnEvent) -> BurnRecord:
        """Normalize one event, add it to the raw total and append its record."""
        raw = event.normalized(self.mint_decimals)
        self.total_raw += raw
        record = BurnRecord(
            amount_ui=format_raw_amount(raw, self.mint_decimals),
            url=explorer_url(signature),
        )
        self.records.append(record)
        return record

    def finish(self) -> BurnAggregate:
        return BurnAggregate(
            count=self.count,
            total_ui=format_raw_amount(self.total_raw, self.mint_decimals),
            burns=tuple(self.records),
        )
