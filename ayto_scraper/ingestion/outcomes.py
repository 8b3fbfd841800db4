"""
Ingestion Outcomes.

One IngestionOutcome is recorded per input record per run. The summary
keeps them in input order and derives both the detailed view (records per
status) and the aggregate counts from that single list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class OutcomeStatus(str, Enum):
    """Classification of one ingestion attempt."""

    SUCCESS = "success"
    DUPLICATE = "duplicate"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class IngestionOutcome:
    """What happened to one record."""

    status: OutcomeStatus
    record: BaseModel
    message: Optional[str] = None


@dataclass
class IngestionSummary:
    """Ordered outcomes of one ingestion run."""

    table: str
    outcomes: list[IngestionOutcome] = field(default_factory=list)

    def add(
        self, status: OutcomeStatus, record: BaseModel, message: Optional[str] = None
    ) -> IngestionOutcome:
        """Record the outcome for the next record."""
        outcome = IngestionOutcome(status=status, record=record, message=message)
        self.outcomes.append(outcome)
        return outcome

    def _records(self, status: OutcomeStatus) -> list[BaseModel]:
        return [o.record for o in self.outcomes if o.status == status]

    @property
    def total_processed(self) -> int:
        return len(self.outcomes)

    @property
    def saved(self) -> list[BaseModel]:
        return self._records(OutcomeStatus.SUCCESS)

    @property
    def duplicates(self) -> list[BaseModel]:
        return self._records(OutcomeStatus.DUPLICATE)

    @property
    def skipped(self) -> list[BaseModel]:
        return self._records(OutcomeStatus.SKIPPED)

    @property
    def errors(self) -> list[IngestionOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.ERROR]

    def counts(self) -> dict[str, int]:
        """Aggregate view: number of outcomes per status."""
        return {
            "saved": len(self.saved),
            "duplicates": len(self.duplicates),
            "skipped": len(self.skipped),
            "errors": len(self.errors),
        }

    def to_dict(self) -> dict[str, Any]:
        """Detailed view, JSON-serializable."""
        return {
            "total_processed": self.total_processed,
            "saved": [r.model_dump() for r in self.saved],
            "duplicates": [r.model_dump() for r in self.duplicates],
            "skipped": [r.model_dump() for r in self.skipped],
            "errors": [
                {"record": o.record.model_dump(), "message": o.message}
                for o in self.errors
            ],
            "counts": self.counts(),
        }
