"""Configuration for the payoff planner command-line tool."""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from errors import ConfigurationError

DEFAULT_DATA_FILE = Path(__file__).with_name("financial_data.json")

LOG_FORMATS = ("standard", "json")


@dataclass
class PlannerConfig:
    """Settings for ``fin.py``; the payoff engine itself takes none."""

    data_file: Path = field(default_factory=lambda: DEFAULT_DATA_FILE)
    log_level: str = "WARNING"
    log_format: str = "standard"
    default_extra_payment: Decimal = Decimal("0")

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        """Create config from ``PAYOFF_*`` environment variables."""

        extra_str = os.getenv("PAYOFF_DEFAULT_EXTRA", "0")
        try:
            extra = Decimal(extra_str)
        except InvalidOperation:
            raise ConfigurationError(
                f"PAYOFF_DEFAULT_EXTRA is not a number: {extra_str!r}"
            )
        if not extra.is_finite() or extra < 0:
            raise ConfigurationError("PAYOFF_DEFAULT_EXTRA must be zero or more")

        log_format = os.getenv("PAYOFF_LOG_FORMAT", "standard").lower()
        if log_format not in LOG_FORMATS:
            raise ConfigurationError(f"Unknown PAYOFF_LOG_FORMAT: {log_format!r}")

        data_file = os.getenv("PAYOFF_DATA_FILE")
        return cls(
            data_file=Path(data_file) if data_file else DEFAULT_DATA_FILE,
            log_level=os.getenv("PAYOFF_LOG_LEVEL", "WARNING"),
            log_format=log_format,
            default_extra_payment=extra,
        )
