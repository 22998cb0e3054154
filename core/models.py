"""
Core data model for the flow pressure engine.

Records produced by the engine (sentiment scores, closed trades, manual
ledger entries, daily summaries) are frozen dataclasses: they are appended
to logs and never mutated afterwards. Position is the only mutable-lifetime
object and lives exclusively inside the PaperTrader position map.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

DEFAULT_PRESSURE = 50.0  # neutral baseline for missing flow pressure / SPI


class Action(str, Enum):
    """Trade decision"""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"

    @classmethod
    def parse(cls, value) -> "Action":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown trade action: {value!r}") from None


class TradeMode(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


class QuoteStatus(str, Enum):
    FRESH = "FRESH"
    STALE = "STALE"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


def _serialize(record) -> Dict:
    data = asdict(record)
    for key, value in data.items():
        if isinstance(value, Enum):
            data[key] = value.value
        elif isinstance(value, datetime):
            data[key] = value.isoformat()
    return data


@dataclass(frozen=True)
class NewsItem:
    """A news snippet supplied to the scorer"""
    symbol: str
    title: str
    body: str = ""
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class SentimentRecord:
    """Result of one scoring run for a symbol"""
    symbol: str
    spi: float
    label: SentimentLabel
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def sentiment(self) -> str:
        return self.label.value

    def to_dict(self) -> Dict:
        return _serialize(self)


@dataclass(frozen=True)
class PressureSample:
    """Flow pressure and SPI reading for a symbol; either may be unknown"""
    symbol: str
    flow_pressure: Optional[float] = None
    spi: Optional[float] = None

    def resolved(self, default: float = DEFAULT_PRESSURE) -> Tuple[float, float]:
        flow = default if self.flow_pressure is None else float(self.flow_pressure)
        spi = default if self.spi is None else float(self.spi)
        return flow, spi


@dataclass
class Position:
    """An open simulated long position"""
    symbol: str
    entry_price: float
    opened_at: datetime
    size: float

    def __post_init__(self):
        if self.entry_price <= 0:
            raise ValueError(f"entry_price must be positive, got {self.entry_price}")
        if self.size < 0:
            raise ValueError(f"size must be non-negative, got {self.size}")

    def pnl_pct(self, price: float) -> float:
        return (price - self.entry_price) / self.entry_price

    def held_seconds(self, now: datetime) -> float:
        return max((now - self.opened_at).total_seconds(), 0.0)


@dataclass(frozen=True)
class ClosedTrade:
    """A position converted into a realized trade on exit"""
    symbol: str
    entry_price: float
    exit_price: float
    realized_pnl: float
    held_seconds: float
    closed_at: datetime
    mode: TradeMode = TradeMode.AUTO
    exit_reason: str = ""

    # Ledger view used by the report aggregator: closing a long is a sell.
    @property
    def action(self) -> Action:
        return Action.SELL

    @property
    def price(self) -> float:
        return self.exit_price

    def to_dict(self) -> Dict:
        data = _serialize(self)
        data['action'] = self.action.value
        return data


@dataclass(frozen=True)
class ManualTradeRecord:
    """Operator-initiated ledger entry"""
    symbol: str
    action: Action
    price: float
    capital_used: float
    fee: float
    timestamp: datetime
    mode: TradeMode = TradeMode.MANUAL

    def to_dict(self) -> Dict:
        return _serialize(self)


@dataclass(frozen=True)
class QuoteAuditEntry:
    symbol: str
    status: QuoteStatus
    timestamp: Optional[datetime] = None


@dataclass(frozen=True)
class DailySummary:
    """Aggregated report for one calendar date"""
    date: str
    total_trades: int
    auto_trades: int
    manual_trades: int
    total_profit: float
    quote_fresh_ratio: float
    profit_by_symbol: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return _serialize(self)
