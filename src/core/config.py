"""Runtime configuration model for the converter.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_LOG_LEVEL, DEFAULT_OUTPUT_ROOT, SUPPORTED_LOG_LEVELS
from core.errors import FlyExpressionConfigError


@dataclass(frozen=True)
class ConverterConfig:
    """Validated runtime configuration.

    Attributes:
        output_root: Local root directory for conversion outputs.
        id_resolver_path: Optional default gene identifier file.
        log_level: Minimum structured log level.
    """

    output_root: Path
    id_resolver_path: Path | None
    log_level: str

    @classmethod
    def from_env(cls) -> "ConverterConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            FlyExpressionConfigError: If environment values are invalid.
        """
        output_root_value = os.getenv("FLYEXPR_OUTPUT_ROOT", str(DEFAULT_OUTPUT_ROOT))
        id_resolver_value = os.getenv("FLYEXPR_ID_RESOLVER_FILE")
        log_level = _parse_log_level(os.getenv("FLYEXPR_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        id_resolver_path = None
        if id_resolver_value:
            id_resolver_path = Path(id_resolver_value).expanduser().resolve()
        return cls(
            output_root=Path(output_root_value).expanduser().resolve(),
            id_resolver_path=id_resolver_path,
            log_level=log_level,
        )


def _parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Upper-cased supported level name.

    Raises:
        FlyExpressionConfigError: If value is not a supported level.
    """
    level_name = raw_value.strip().upper()
    if level_name not in SUPPORTED_LOG_LEVELS:
        raise FlyExpressionConfigError(
            "Invalid FLYEXPR_LOG_LEVEL value: "
            f"expected one of {SUPPORTED_LOG_LEVELS}, got '{raw_value}'. "
            "Set FLYEXPR_LOG_LEVEL to a standard level name."
        )
    return level_name
