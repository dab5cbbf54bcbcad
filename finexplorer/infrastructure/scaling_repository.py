"""SQLAlchemy-backed repository for scaling metrics."""

from decimal import Decimal

from sqlalchemy import text

from finexplorer.application.ports.database import DatabaseEnginePort
from finexplorer.application.ports.scaling_repository import (
    ScalingValuesRepositoryPort,
)
from finexplorer.utils.decimal_utils import coerce_decimal


class SqlAlchemyScalingValuesRepository(ScalingValuesRepositoryPort):
    """Repository backed by SQLAlchemy for the scaling_values table."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the finance engine.
        """
        self._db_port = db_port

    def fetch_scaling_values(
        self,
        metric: str,
        year: str | None = None,
    ) -> dict[str, Decimal]:
        """Return metric values per entity.

        Without a year, the most recent year of each entity wins.
        """
        base_sql = """
        SELECT entity_id, year, value
        FROM scaling_values
        WHERE metric = :metric
        """
        params: dict[str, object] = {"metric": metric}
        if year:
            base_sql += " AND CAST(year AS TEXT) = :year"
            params["year"] = str(year)
        base_sql += " ORDER BY entity_id, year"

        engine = self._db_port.get_finance_engine()
        with engine.connect() as conn:
            rows = conn.execute(text(base_sql), params).all()
        return {row.entity_id: coerce_decimal(row.value) for row in rows}

    def list_metrics(self) -> list[str]:
        engine = self._db_port.get_finance_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                text("SELECT DISTINCT metric FROM scaling_values ORDER BY metric")
            ).all()
        return [row.metric for row in rows]


__all__ = ["SqlAlchemyScalingValuesRepository"]
