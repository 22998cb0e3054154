"""
Trade Log and Report Storage

This module provides the durable side of the engine, which itself keeps
everything in memory:
- Persistent logging of closed and manual trades to CSV
- Methods to load and analyze trade history (win rate, average PnL, total trades)
- JSON storage of daily flow reports, one file per date (re-saving a date overwrites it)
"""

import json
import logging
import os
from typing import Any, Dict, Optional

import pandas as pd

logger = logging.getLogger(__name__)


class TradeLogger:
    def __init__(self, log_file='trade_log.csv'):
        self.log_file = log_file
        self.columns = [
            'timestamp', 'symbol', 'mode', 'action', 'entry_price', 'exit_price',
            'price', 'realized_pnl', 'held_seconds', 'capital_used', 'fee', 'exit_reason'
        ]
        directory = os.path.dirname(self.log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.log_file):
            pd.DataFrame(columns=self.columns).to_csv(self.log_file, index=False)

    def log_trade(self, trade):
        """Append a ClosedTrade or ManualTradeRecord"""
        data = trade.to_dict()
        row = {col: data.get(col) for col in self.columns}
        row['timestamp'] = data.get('closed_at') or data.get('timestamp')
        if row['price'] is None:
            row['price'] = data.get('exit_price')
        df = pd.DataFrame([row], columns=self.columns)
        df.to_csv(self.log_file, mode='a', header=False, index=False)

    def load_trades(self, mode: Optional[str] = None) -> pd.DataFrame:
        df = pd.read_csv(self.log_file)
        if mode is not None:
            df = df[df['mode'] == mode]
        return df

    def analyze_performance(self) -> Dict[str, Any]:
        df = self.load_trades(mode='auto')
        if df.empty:
            return {}
        return {
            'win_rate': float((df['realized_pnl'] > 0).mean()),
            'avg_pnl': float(df['realized_pnl'].mean()),
            'total_trades': int(len(df)),
        }


class ReportStore:
    def __init__(self, reports_dir='reports'):
        self.reports_dir = reports_dir

    def path_for(self, date: str) -> str:
        return os.path.join(self.reports_dir, f'flow_report_{date}.json')

    def save(self, summary) -> str:
        os.makedirs(self.reports_dir, exist_ok=True)
        path = self.path_for(summary.date)
        with open(path, 'w') as f:
            json.dump(summary.to_dict(), f, indent=2)
        logger.info(f"[Report Generated] -> {path}")
        return path

    def load(self, date: str) -> Dict[str, Any]:
        with open(self.path_for(date)) as f:
            return json.load(f)
