"""SQLAlchemy-backed repository for multilingual account-code definitions."""

from sqlalchemy import text

from finexplorer.application.ports.code_definitions_repository import (
    CodeDefinitionsRepositoryPort,
)
from finexplorer.application.ports.database import DatabaseEnginePort
from finexplorer.domain.constants import SUPPORTED_LANGUAGES
from finexplorer.domain.models.code_tree import CodeEntry


class SqlAlchemyCodeDefinitionsRepository(CodeDefinitionsRepositoryPort):
    """Repository backed by SQLAlchemy for the code_definitions table."""

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the finance engine.
        """
        self._db_port = db_port

    def fetch_code_definitions(
        self,
        dimension: str,
        model: str,
    ) -> list[CodeEntry]:
        """Return code definitions of a dimension and model, ordered by code."""
        query = text(
            """
            SELECT code, label_de, label_fr, label_it, label_en
            FROM code_definitions
            WHERE dimension = :dimension AND model = :model
            ORDER BY code
            """
        )
        engine = self._db_port.get_finance_engine()
        with engine.connect() as conn:
            rows = conn.execute(
                query,
                {"dimension": dimension, "model": model},
            ).all()
        return [
            CodeEntry(
                code=row.code,
                labels={
                    language: getattr(row, f"label_{language}") or ""
                    for language in SUPPORTED_LANGUAGES
                },
            )
            for row in rows
        ]


__all__ = ["SqlAlchemyCodeDefinitionsRepository"]
