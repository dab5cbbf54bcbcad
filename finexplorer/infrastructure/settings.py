"""Settings helpers for the explorer adapters."""

from dataclasses import dataclass
import os

from finexplorer.domain.constants import (
    CACHE_EXPIRY_SECONDS,
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
)
from finexplorer.domain.models.optimization import OptimizationConfig
from finexplorer.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class ExplorerSettings:
    """Settings for loading and presenting financial data.

    Attributes:
        language: Label language (de, fr, it or en).
        dimension: Dimension of records and code definitions.
        model: Accounting model of the code definitions.
        cache_ttl_seconds: Expiry of memoized loader results.
    """

    language: str = DEFAULT_LANGUAGE
    dimension: str = "fs"
    model: str = "fs"
    cache_ttl_seconds: float = CACHE_EXPIRY_SECONDS

    @classmethod
    def from_env(cls) -> "ExplorerSettings":
        """Build settings from environment variables.

        Returns:
            ExplorerSettings: Settings sourced from environment variables.
        """
        logger = get_app_logger()
        language = (
            os.getenv("FINEXPLORER_LANGUAGE", DEFAULT_LANGUAGE).strip().lower()
        )
        if language not in SUPPORTED_LANGUAGES:
            logger.warning(
                f"Unsupported language '{language}', "
                f"falling back to '{DEFAULT_LANGUAGE}'"
            )
            language = DEFAULT_LANGUAGE
        return cls(
            language=language,
            dimension=os.getenv("FINEXPLORER_DIMENSION", "fs").strip(),
            model=os.getenv("FINEXPLORER_MODEL", "fs").strip(),
            cache_ttl_seconds=_read_number(
                "FINEXPLORER_CACHE_TTL",
                CACHE_EXPIRY_SECONDS,
                float,
                logger,
            ),
        )

    @staticmethod
    def optimization_config() -> OptimizationConfig:
        """Build the optimizer configuration, applying env overrides.

        Returns:
            OptimizationConfig: Defaults unless FINEXPLORER_R2_THRESHOLD,
            FINEXPLORER_CV_THRESHOLD, FINEXPLORER_MAX_ITERATIONS or
            FINEXPLORER_MIN_ENTITIES are set to valid numbers.
        """
        logger = get_app_logger()
        defaults = OptimizationConfig()
        return OptimizationConfig(
            r_squared_threshold=_read_number(
                "FINEXPLORER_R2_THRESHOLD",
                defaults.r_squared_threshold,
                float,
                logger,
            ),
            single_entity_r_squared_threshold=(
                defaults.single_entity_r_squared_threshold
            ),
            cv_threshold=_read_number(
                "FINEXPLORER_CV_THRESHOLD",
                defaults.cv_threshold,
                float,
                logger,
            ),
            max_iterations=_read_number(
                "FINEXPLORER_MAX_ITERATIONS",
                defaults.max_iterations,
                int,
                logger,
            ),
            min_entity_count=_read_number(
                "FINEXPLORER_MIN_ENTITIES",
                defaults.min_entity_count,
                int,
                logger,
            ),
        )


def _read_number(name: str, default, cast, logger):
    """Read a numeric environment variable, warning on invalid values.

    Args:
        name: Environment variable name.
        default: Value used when unset or invalid.
        cast: Conversion callable (int or float).
        logger: Logger used for warnings.

    Returns:
        The converted value or the default.
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning(f"Invalid value for {name}: '{raw}'. Using {default}.")
        return default
    if value < 0:
        logger.warning(f"Negative value for {name}: '{raw}'. Using {default}.")
        return default
    return value


__all__ = ["ExplorerSettings"]
