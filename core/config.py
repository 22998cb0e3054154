"""
Engine Configuration

Immutable configuration shared by the paper trader and the manual trade
console. Values are read once at construction (optionally from the
environment / a .env file) and validated up front so that a bad setting
fails before the first tick rather than in the middle of a session.
"""

import os
import logging
from dataclasses import dataclass, fields
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = 'FP_'


class ConfigurationError(ValueError):
    """Raised when engine settings are invalid"""


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for the flow pressure engine"""
    # Capital
    capital: float = 100000.0
    trade_per_signal: float = 0.1  # fraction of capital allocated per entry

    # Flow pressure thresholds (0-100 scale)
    entry_threshold: float = 70.0
    exit_threshold: float = 40.0

    # Exit rules
    take_profit_pct: float = 0.03   # +3%
    stop_loss_pct: float = -0.02    # -2%, must be negative
    hold_time_sec: float = 300.0

    # Costs
    fee_rate: float = 0.001

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.capital <= 0:
            raise ConfigurationError(f"capital must be positive, got {self.capital}")
        if not 0 < self.trade_per_signal <= 1:
            raise ConfigurationError(f"trade_per_signal must be in (0, 1], got {self.trade_per_signal}")
        if not 0 <= self.fee_rate < 1:
            raise ConfigurationError(f"fee_rate must be in [0, 1), got {self.fee_rate}")
        if self.stop_loss_pct >= 0:
            raise ConfigurationError(f"stop_loss_pct must be negative, got {self.stop_loss_pct}")
        if self.take_profit_pct <= 0:
            raise ConfigurationError(f"take_profit_pct must be positive, got {self.take_profit_pct}")
        if self.hold_time_sec < 0:
            raise ConfigurationError(f"hold_time_sec must be >= 0, got {self.hold_time_sec}")
        for name in ('entry_threshold', 'exit_threshold'):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{name} must be within [0, 100], got {value}")

    @property
    def position_size(self) -> float:
        """Capital allocated to a single signal"""
        return self.capital * self.trade_per_signal

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "EngineConfig":
        """
        Build a config from FP_* environment variables.

        A .env file is loaded first (without overriding variables that are
        already set). Unset variables fall back to the dataclass defaults.
        """
        load_dotenv(env_file)
        overrides = {}
        for f in fields(cls):
            raw = os.getenv(ENV_PREFIX + f.name.upper())
            if raw is None or raw.strip() == '':
                continue
            try:
                overrides[f.name] = float(raw)
            except ValueError:
                raise ConfigurationError(f"{ENV_PREFIX}{f.name.upper()} is not a number: {raw!r}")
        config = cls(**overrides)
        if overrides:
            logger.info(f"Loaded engine config overrides from environment: {sorted(overrides)}")
        return config
