"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os

import dotenv

from src.domain.services.growth import ALL_TIME
from src.infrastructure.logging.logger import get_app_logger


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class NetWorthSettings:
    """Settings for snapshot materialization and reporting.

    Attributes:
        include_breakdown: Whether snapshots carry per-account values.
        growth_period: Default period preset for growth reporting.
    """

    include_breakdown: bool = True
    growth_period: str = ALL_TIME

    @classmethod
    def from_env(cls) -> "NetWorthSettings":
        """Build settings from environment variables.

        Returns:
            NetWorthSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        include_breakdown = cls._parse_bool(
            os.getenv("NETWORTH_INCLUDE_BREAKDOWN"),
            default=True,
            name="NETWORTH_INCLUDE_BREAKDOWN",
            logger=logger,
        )
        growth_period = (
            os.getenv("NETWORTH_GROWTH_PERIOD", ALL_TIME).strip() or ALL_TIME
        )
        return cls(
            include_breakdown=include_breakdown,
            growth_period=growth_period,
        )

    @staticmethod
    def _parse_bool(
        raw: str | None,
        default: bool,
        name: str,
        logger,
    ) -> bool:
        """Parse a boolean flag, keeping the default for unknown values.

        Args:
            raw: Raw environment value.
            default: Value used when unset or invalid.
            name: Variable name used in warnings.
            logger: Logger used for warnings.

        Returns:
            bool: Parsed flag.
        """
        if raw is None or not raw.strip():
            return default
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        logger.warning(f"Invalid boolean for {name}: {raw!r}; using {default}")
        return default


__all__ = ["NetWorthSettings"]
