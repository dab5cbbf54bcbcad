"""Shared fixtures for repository tests backed by in-memory SQLite."""

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from finexplorer.infrastructure.db import SqlAlchemyDatabaseEngineAdapter

_SCHEMA = (
    """
    CREATE TABLE code_definitions (
        dimension TEXT, model TEXT, code TEXT,
        label_de TEXT, label_fr TEXT, label_it TEXT, label_en TEXT
    )
    """,
    """
    CREATE TABLE financial_records (
        entity_id TEXT, year INTEGER, code TEXT, value NUMERIC,
        dimension TEXT
    )
    """,
    """
    CREATE TABLE scaling_values (
        entity_id TEXT, metric TEXT, year INTEGER, value NUMERIC
    )
    """,
)


@pytest.fixture
def finance_db():
    """Return a database adapter over a seeded in-memory database."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        for statement in _SCHEMA:
            conn.execute(text(statement))
        conn.execute(
            text(
                "INSERT INTO code_definitions VALUES "
                "(:dimension, :model, :code, :de, :fr, :it, :en)"
            ),
            [
                {
                    "dimension": "fs",
                    "model": "fs",
                    "code": "1",
                    "de": "Ertrag",
                    "fr": "Revenus",
                    "it": None,
                    "en": "Revenue",
                },
                {
                    "dimension": "fs",
                    "model": "fs",
                    "code": "10",
                    "de": "Steuern",
                    "fr": "Impôts",
                    "it": "Imposte",
                    "en": "Tax",
                },
                {
                    "dimension": "functions",
                    "model": "fs",
                    "code": "9",
                    "de": "Andere",
                    "fr": "Autre",
                    "it": "Altro",
                    "en": "Other",
                },
            ],
        )
        conn.execute(
            text(
                "INSERT INTO financial_records VALUES "
                "(:entity_id, :year, :code, :value, :dimension)"
            ),
            [
                {
                    "entity_id": "261",
                    "year": 2022,
                    "code": "10",
                    "value": "100.5",
                    "dimension": "fs",
                },
                {
                    "entity_id": "261",
                    "year": 2021,
                    "code": "10",
                    "value": "90",
                    "dimension": "fs",
                },
                {
                    "entity_id": "351",
                    "year": 2022,
                    "code": "10",
                    "value": "70",
                    "dimension": "fs",
                },
                {
                    "entity_id": "351",
                    "year": 2022,
                    "code": "9",
                    "value": "5",
                    "dimension": "functions",
                },
            ],
        )
        conn.execute(
            text(
                "INSERT INTO scaling_values VALUES "
                "(:entity_id, :metric, :year, :value)"
            ),
            [
                {
                    "entity_id": "261",
                    "metric": "population",
                    "year": 2021,
                    "value": 140000,
                },
                {
                    "entity_id": "261",
                    "metric": "population",
                    "year": 2022,
                    "value": 145000,
                },
                {
                    "entity_id": "351",
                    "metric": "population",
                    "year": 2022,
                    "value": 55000,
                },
                {
                    "entity_id": "351",
                    "metric": "tax_base",
                    "year": 2022,
                    "value": 9,
                },
            ],
        )
    yield SqlAlchemyDatabaseEngineAdapter(engine=engine)
    engine.dispose()
