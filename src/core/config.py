"""Runtime configuration model for the importer.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_BATCH_SIZE
from core.errors import SkyConfigError


@dataclass(frozen=True)
class SkyConfig:
    """Validated runtime configuration.

    Attributes:
        transforms_dir: Optional directory searched first for named transforms.
        table_name: Optional destination table passed to the event sink.
        batch_size: Maximum events buffered by the sink before a flush.
    """

    transforms_dir: Path | None
    table_name: str | None
    batch_size: int

    @classmethod
    def from_env(cls) -> "SkyConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SkyConfigError: If environment values are invalid.
        """
        transforms_dir_value = os.getenv("SKY_TRANSFORMS_DIR")
        table_name = os.getenv("SKY_TABLE") or None
        batch_size_value = os.getenv("SKY_BATCH_SIZE", str(DEFAULT_BATCH_SIZE))
        batch_size = _parse_batch_size(batch_size_value)
        transforms_dir = None
        if transforms_dir_value:
            transforms_dir = Path(transforms_dir_value).expanduser().resolve()
        return cls(
            transforms_dir=transforms_dir,
            table_name=table_name,
            batch_size=batch_size,
        )


def _parse_batch_size(raw_value: str) -> int:
    """Parse the sink batch size environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive batch size.

    Raises:
        SkyConfigError: If value is not a positive integer.
    """
    try:
        batch_size = int(raw_value)
    except ValueError as error:
        raise SkyConfigError(
            "Invalid SKY_BATCH_SIZE value: "
            f"expected integer, got '{raw_value}'. "
            "Set SKY_BATCH_SIZE to a positive number."
        ) from error
    if batch_size <= 0:
        raise SkyConfigError(
            f"Invalid SKY_BATCH_SIZE value: expected a positive integer, got {batch_size}. "
            "Set SKY_BATCH_SIZE to a positive number."
        )
    return batch_size
