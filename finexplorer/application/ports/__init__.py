"""Application ports package."""

from .code_definitions_repository import CodeDefinitionsRepositoryPort
from .database import DatabaseEnginePort
from .records_repository import FinancialRecordsRepositoryPort
from .scaling_repository import ScalingValuesRepositoryPort

__all__ = [
    "CodeDefinitionsRepositoryPort",
    "DatabaseEnginePort",
    "FinancialRecordsRepositoryPort",
    "ScalingValuesRepositoryPort",
]
