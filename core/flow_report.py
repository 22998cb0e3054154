"""
Flow Report Generator

Aggregates the auto and manual trade logs plus the quote-freshness audit
into a DailySummary. The aggregator owns no state; every call recomputes
from the logs it is handed.

Profit here is a notional cash-flow proxy, not inventory-matched PnL: per
symbol, every SELL adds its price and every other action subtracts it.
Records without a symbol are totalled under UNKNOWN_SYMBOL so that
total_profit always covers every counted trade.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from core.clock import SystemClock
from core.models import Action, DailySummary, QuoteStatus

logger = logging.getLogger(__name__)

UNKNOWN_SYMBOL = 'UNKNOWN'


def _field(record: Any, name: str, default=None):
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _as_value(value) -> str:
    return str(getattr(value, 'value', value)).upper()


class FlowReportGenerator:
    def __init__(self, clock=None):
        self.clock = clock or SystemClock()

    def calculate_profit(self, records: Iterable[Any]) -> Dict[str, float]:
        """Signed price totals per symbol"""
        rows = [
            {
                'symbol': _field(r, 'symbol'),
                'action': _as_value(_field(r, 'action', '')),
                'price': float(_field(r, 'price', 0.0)),
            }
            for r in records
        ]
        if not rows:
            return {}
        df = pd.DataFrame(rows)
        df['symbol'] = df['symbol'].fillna(UNKNOWN_SYMBOL)
        df['flow'] = np.where(df['action'] == Action.SELL.value, df['price'], -df['price'])
        totals = df.groupby('symbol', sort=False, dropna=False)['flow'].sum()
        return {symbol: float(total) for symbol, total in totals.items()}

    @staticmethod
    def quote_fresh_ratio(quote_audit: Iterable[Any]) -> float:
        statuses = [_as_value(_field(q, 'status', '')) for q in quote_audit]
        fresh = sum(1 for s in statuses if s == QuoteStatus.FRESH.value)
        return fresh / max(len(statuses), 1)

    def summarize(self, auto_log: Iterable[Any], manual_log: Iterable[Any],
                  quote_audit: Iterable[Any]) -> DailySummary:
        auto_log = list(auto_log)
        manual_log = list(manual_log)
        profit = self.calculate_profit(auto_log + manual_log)
        summary = DailySummary(
            date=self.clock.now().date().isoformat(),
            total_trades=len(auto_log) + len(manual_log),
            auto_trades=len(auto_log),
            manual_trades=len(manual_log),
            total_profit=float(sum(profit.values())),
            quote_fresh_ratio=self.quote_fresh_ratio(quote_audit),
            profit_by_symbol=profit,
        )
        logger.info(
            f"Summary for {summary.date}: {summary.total_trades} trades "
            f"(auto {summary.auto_trades}, manual {summary.manual_trades}), "
            f"profit {summary.total_profit:.2f}, fresh quotes {summary.quote_fresh_ratio:.0%}"
        )
        return summary

    def export(self, summary: DailySummary, store) -> Optional[str]:
        """Hand the summary to a report store; returns whatever the store returns"""
        return store.save(summary)

    def generate_and_export(self, auto_log, manual_log, quote_audit, store) -> DailySummary:
        summary = self.summarize(auto_log, manual_log, quote_audit)
        self.export(summary, store)
        return summary
