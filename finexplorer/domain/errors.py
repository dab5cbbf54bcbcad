"""Domain exceptions."""


class FinExplorerError(Exception):
    """Base class for errors raised by the explorer engine."""


class ValidationError(FinExplorerError, ValueError):
    """Raised when user input cannot be parsed or matches no data."""


class DataMismatchError(FinExplorerError, LookupError):
    """Raised in strict aggregation when a record code is not in the tree."""

    def __init__(self, code: str, entity_id: str, year: str) -> None:
        super().__init__(
            f"Record code {code!r} for entity={entity_id}, year={year} "
            "does not match any node of the code tree"
        )
        self.code = code
        self.entity_id = entity_id
        self.year = year


__all__ = ["FinExplorerError", "ValidationError", "DataMismatchError"]
