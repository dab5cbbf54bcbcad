"""Port for loading reference metrics used to scale entities."""

from decimal import Decimal
from typing import Protocol


class ScalingValuesRepositoryPort(Protocol):
    """Port exposing a scaling metric (population, tax base, ...) per entity."""

    def fetch_scaling_values(
        self,
        metric: str,
        year: str | None = None,
    ) -> dict[str, Decimal]:
        """Return the metric value keyed by entity id."""

    def list_metrics(self) -> list[str]:
        """Return the names of all stored metrics, sorted."""


__all__ = ["ScalingValuesRepositoryPort"]
