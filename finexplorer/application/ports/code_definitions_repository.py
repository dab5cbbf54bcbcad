"""Port for loading multilingual account-code definitions."""

from typing import Protocol

from finexplorer.domain.models.code_tree import CodeEntry


class CodeDefinitionsRepositoryPort(Protocol):
    """Port exposing the code definitions of a dimension and model."""

    def fetch_code_definitions(
        self,
        dimension: str,
        model: str,
    ) -> list[CodeEntry]:
        """Return the flat code definitions used to build a tree."""


__all__ = ["CodeDefinitionsRepositoryPort"]
