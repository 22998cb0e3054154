"""
Paper Trader Module

Simulated position lifecycle driven by flow pressure ticks. No real orders
are placed.

Each symbol is either flat or holds exactly one open long position:

    flat --(flow_pressure > entry_threshold)--> open
    open --(any exit rule)--> flat, emitting a ClosedTrade

Exit rules (any one closes the position):
- flow pressure drops below exit_threshold
- return exceeds take_profit_pct
- return falls below stop_loss_pct
- position held for hold_time_sec or longer

Exit rules are only evaluated against the position that existed when the
tick started, so a position is never opened and closed by the same tick.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional, Any

from core.clock import SystemClock
from core.config import EngineConfig
from core.models import Position, ClosedTrade, TradeMode

logger = logging.getLogger(__name__)

RECENT_TRADES = 10


class PositionStateError(RuntimeError):
    """Raised when an operation would break the one-position-per-symbol rule"""


class PaperTrader:
    def __init__(self, config: EngineConfig = None, clock=None):
        self.config = config or EngineConfig()
        self.clock = clock or SystemClock()
        self.capital = self.config.capital
        self._positions: Dict[str, Position] = {}
        self._trades: List[ClosedTrade] = []
        self._total_pnl = 0.0
        self.lock = threading.RLock()
        logger.info(
            f"PaperTrader initialized (capital: {self.capital:.2f}, "
            f"entry > {self.config.entry_threshold}, exit < {self.config.exit_threshold})"
        )

    def tick(self, symbol: str, flow_pressure: float, price: float,
             now: Optional[datetime] = None) -> Optional[ClosedTrade]:
        """
        Evaluate one pressure/price update for a symbol.

        Args:
            symbol: Traded symbol
            flow_pressure: Flow pressure reading (0-100)
            price: Current price, must be positive
            now: Tick time; defaults to the engine clock

        Returns:
            The ClosedTrade if this tick closed a position, else None
        """
        if price <= 0:
            raise ValueError(f"price must be positive for {symbol}, got {price}")
        now = now or self.clock.now()

        with self.lock:
            existing = self._positions.get(symbol)

            if existing is None and flow_pressure > self.config.entry_threshold:
                self.open_position(symbol, price, now)

            if existing is not None:
                reason = self._exit_reason(existing, flow_pressure, price, now)
                if reason:
                    return self._close_position(existing, price, now, reason)
        return None

    def open_position(self, symbol: str, price: float, now: Optional[datetime] = None) -> Position:
        now = now or self.clock.now()
        with self.lock:
            if symbol in self._positions:
                logger.error(f"Refusing to open second position for {symbol}")
                raise PositionStateError(f"{symbol} already has an open position")
            position = Position(
                symbol=symbol,
                entry_price=price,
                opened_at=now,
                size=self.config.position_size,
            )
            self._positions[symbol] = position
        logger.info(f"Opened {symbol} @ {price:.2f} size {position.size:.2f}")
        return position

    def _exit_reason(self, position: Position, flow_pressure: float,
                     price: float, now: datetime) -> Optional[str]:
        pnl_pct = position.pnl_pct(price)
        if flow_pressure < self.config.exit_threshold:
            return 'pressure_exit'
        if pnl_pct > self.config.take_profit_pct:
            return 'take_profit'
        if pnl_pct < self.config.stop_loss_pct:
            return 'stop_loss'
        if position.held_seconds(now) >= self.config.hold_time_sec:
            return 'hold_time'
        return None

    def _close_position(self, position: Position, price: float,
                        now: datetime, reason: str) -> ClosedTrade:
        realized = position.pnl_pct(price) * position.size * (1 - self.config.fee_rate)
        trade = ClosedTrade(
            symbol=position.symbol,
            entry_price=position.entry_price,
            exit_price=price,
            realized_pnl=realized,
            held_seconds=position.held_seconds(now),
            closed_at=now,
            mode=TradeMode.AUTO,
            exit_reason=reason,
        )
        self._total_pnl += realized
        self._trades.append(trade)
        del self._positions[position.symbol]
        logger.info(
            f"Closed {position.symbol} @ {price:.2f} ({reason}), "
            f"PnL: {realized:.2f}, held {trade.held_seconds:.0f}s"
        )
        return trade

    def get_position(self, symbol: str) -> Optional[Position]:
        """Snapshot of the open position; changing it does not affect the engine"""
        with self.lock:
            position = self._positions.get(symbol)
            return replace(position) if position is not None else None

    @property
    def positions(self) -> Dict[str, Position]:
        with self.lock:
            return {symbol: replace(p) for symbol, p in self._positions.items()}

    @property
    def trades(self) -> List[ClosedTrade]:
        with self.lock:
            return list(self._trades)

    @property
    def total_pnl(self) -> float:
        return self._total_pnl

    def summary(self) -> Dict[str, Any]:
        with self.lock:
            return {
                'capital': self.capital,
                'cumulative_pnl': round(self._total_pnl, 2),
                'open_position_count': len(self._positions),
                'recent_trades': [t.to_dict() for t in self._trades[-RECENT_TRADES:]],
            }
