"""
Manual Trade Console

Operator-facing trade ledger. Suggestions come from the same decision
function the engine uses, but nothing here is enforced: every recorded
action is a standalone ledger entry with no position tracking or exits.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from core.clock import SystemClock
from core.config import EngineConfig
from core.models import Action, ManualTradeRecord, PressureSample
from core.signal_engine import decide_sample

logger = logging.getLogger(__name__)


class ManualTradeConsole:
    def __init__(self, config: EngineConfig = None, clock=None, symbols: Iterable[str] = ()):
        self.config = config or EngineConfig()
        self.clock = clock or SystemClock()
        self.symbols = list(symbols)
        self._log: List[ManualTradeRecord] = []
        self._lock = threading.Lock()

    def suggest(self, symbol: str, flow_pressure: Optional[float] = None,
                spi: Optional[float] = None) -> Action:
        return decide_sample(PressureSample(symbol, flow_pressure, spi))

    def suggest_all(self, pressure_index: Dict[str, Dict],
                    symbols: Optional[Iterable[str]] = None) -> List[Tuple[str, float, float, Action]]:
        """
        Suggest an action for each symbol from a pressure index.

        Args:
            pressure_index: {symbol: {'pressure': float, 'spi': float}}; either
                key (or the whole entry) may be missing
            symbols: Symbols to show; defaults to the console's symbols

        Returns:
            List of (symbol, pressure, spi, suggestion) rows
        """
        rows = []
        for symbol in (self.symbols if symbols is None else symbols):
            entry = pressure_index.get(symbol) or {}
            sample = PressureSample(symbol, entry.get('pressure'), entry.get('spi'))
            pressure, spi = sample.resolved()
            suggestion = decide_sample(sample)
            logger.info(f"{symbol} -> Pressure: {pressure}, SPI: {spi}, Suggest: {suggestion.value}")
            rows.append((symbol, pressure, spi, suggestion))
        return rows

    def record(self, symbol: str, action, price: float) -> ManualTradeRecord:
        action = Action.parse(action)
        if price <= 0:
            raise ValueError(f"price must be positive for {symbol}, got {price}")
        entry = ManualTradeRecord(
            symbol=symbol,
            action=action,
            price=price,
            capital_used=self.config.position_size,
            fee=self.config.fee_rate,
            timestamp=self.clock.now(),
        )
        with self._lock:
            self._log.append(entry)
        logger.info(f"[ManualTrade] {symbol} {action.value} @ {price}")
        return entry

    @property
    def log(self) -> List[ManualTradeRecord]:
        with self._lock:
            return list(self._log)
