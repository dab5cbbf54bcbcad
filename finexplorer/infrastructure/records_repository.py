"""SQLAlchemy-backed repository for flat financial records."""

from collections.abc import Sequence

from sqlalchemy import bindparam, text

from finexplorer.application.ports.database import DatabaseEnginePort
from finexplorer.application.ports.records_repository import (
    FinancialRecordsRepositoryPort,
)
from finexplorer.domain.models.records import FlatRecord
from finexplorer.utils.decimal_utils import coerce_decimal


class SqlAlchemyFinancialRecordsRepository(FinancialRecordsRepositoryPort):
    """Repository backed by SQLAlchemy for the financial_records table."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the finance engine.
        """
        self._db_port = db_port

    def fetch_records(
        self,
        dimension: str,
        entity_ids: Sequence[str] | None = None,
        years: Sequence[str] | None = None,
    ) -> list[FlatRecord]:
        query = self._build_query(entity_ids, years)
        params: dict[str, object] = {"dimension": dimension}
        if entity_ids:
            params["entity_ids"] = list(entity_ids)
        if years:
            params["years"] = [str(year) for year in years]

        engine = self._db_port.get_finance_engine()
        with engine.connect() as conn:
            rows = conn.execute(query, params).all()
        return [
            FlatRecord(
                entity_id=row.entity_id,
                year=str(row.year),
                code=row.code,
                value=coerce_decimal(row.value),
                dimension=row.dimension,
            )
            for row in rows
        ]

    @staticmethod
    def _build_query(
        entity_ids: Sequence[str] | None,
        years: Sequence[str] | None,
    ):
        base_sql = """
        SELECT entity_id, year, code, value, dimension
        FROM financial_records
        WHERE dimension = :dimension
        """
        bind_params = []
        if entity_ids:
            base_sql += " AND entity_id IN :entity_ids"
            bind_params.append(bindparam("entity_ids", expanding=True))
        if years:
            base_sql += " AND CAST(year AS TEXT) IN :years"
            bind_params.append(bindparam("years", expanding=True))
        base_sql += " ORDER BY entity_id, year, code"
        query = text(base_sql)
        if bind_params:
            query = query.bindparams(*bind_params)
        return query


__all__ = ["SqlAlchemyFinancialRecordsRepository"]
