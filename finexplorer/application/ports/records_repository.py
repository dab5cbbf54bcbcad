"""Port for loading flat financial records."""

from collections.abc import Sequence
from typing import Protocol

from finexplorer.domain.models.records import FlatRecord


class FinancialRecordsRepositoryPort(Protocol):
    """Port exposing parsed financial records."""

    def fetch_records(
        self,
        dimension: str,
        entity_ids: Sequence[str] | None = None,
        years: Sequence[str] | None = None,
    ) -> list[FlatRecord]:
        """Return records of a dimension, optionally filtered.

        Args:
            dimension: Dimension of the records (e.g. functional, by type).
            entity_ids: Restrict to these entities when provided.
            years: Restrict to these years when provided.
        """


__all__ = ["FinancialRecordsRepositoryPort"]
