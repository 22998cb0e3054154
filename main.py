"""
Main entry point for the flow pressure signal engine.

This script replays one session through the engine:
- Loads engine configuration from environment variables / .env
- Optionally scores news for each symbol into an SPI value
- Replays flow pressure ticks (CSV) through the paper trader in time order
- Logs closed trades to CSV and prints manual console suggestions
- Builds the daily flow report from the trade logs and the quote audit and saves it

Tick CSV columns: timestamp, symbol, flow_pressure, price (optional: spi).
Audit CSV columns: symbol, status (FRESH / STALE), optional timestamp.
"""

import os
import sys
import argparse
import logging
from typing import Dict, List

import pandas as pd

from analyzers.news_provider import NewsProvider
from analyzers.semantic_pressure import SemanticPressureScorer
from core.clock import ManualClock
from core.config import EngineConfig, ConfigurationError
from core.flow_report import FlowReportGenerator
from core.manual_console import ManualTradeConsole
from core.paper_trader import PaperTrader
from data.storage import TradeLogger, ReportStore

# Setup logging
os.makedirs('logs', exist_ok=True)
logging.basicConfig(
    filename='logs/engine.log',
    level=logging.INFO,
    format='%(asctime)s %(levelname)s %(name)s %(message)s'
)
logger = logging.getLogger(__name__)


def load_ticks(path: str) -> pd.DataFrame:
    df = pd.read_csv(path, parse_dates=['timestamp'])
    missing = {'timestamp', 'symbol', 'flow_pressure', 'price'} - set(df.columns)
    if missing:
        raise ValueError(f"Tick file {path} is missing columns: {sorted(missing)}")
    return df.sort_values('timestamp', kind='stable').reset_index(drop=True)


def load_audit(path: str) -> List[Dict]:
    if not path:
        return []
    return pd.read_csv(path).to_dict('records')


def build_pressure_index(ticks: pd.DataFrame, spi_by_symbol: Dict[str, float]) -> Dict[str, Dict]:
    """Latest flow pressure per symbol, joined with scored SPI (or a tick-supplied spi column)"""
    latest = ticks.groupby('symbol').last()
    index = {}
    for symbol, row in latest.iterrows():
        entry = {'pressure': float(row['flow_pressure'])}
        if symbol in spi_by_symbol:
            entry['spi'] = spi_by_symbol[symbol]
        elif 'spi' in row and pd.notna(row['spi']):
            entry['spi'] = float(row['spi'])
        index[symbol] = entry
    return index


def run(args) -> int:
    try:
        config = EngineConfig.from_env(args.env_file)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    ticks = load_ticks(args.ticks)
    symbols = args.symbols or list(dict.fromkeys(ticks['symbol']))
    ticks = ticks[ticks['symbol'].isin(symbols)]
    if ticks.empty:
        logger.warning(f"No ticks to replay from {args.ticks}")
        print("No ticks to replay")
        return 0

    clock = ManualClock(ticks['timestamp'].iloc[0].to_pydatetime())
    trader = PaperTrader(config, clock=clock)
    console = ManualTradeConsole(config, clock=clock, symbols=symbols)
    trade_logger = TradeLogger(args.trade_log)

    spi_by_symbol = {}
    if args.fetch_news:
        scorer = SemanticPressureScorer(NewsProvider(), clock=clock)
        spi_by_symbol = {r['symbol']: r['spi'] for r in scorer.run(symbols)}

    for row in ticks.itertuples(index=False):
        clock.set(row.timestamp.to_pydatetime())
        closed = trader.tick(row.symbol, float(row.flow_pressure), float(row.price))
        if closed is not None:
            trade_logger.log_trade(closed)

    print("=== Manual Trade Console ===")
    for symbol, pressure, spi, suggestion in console.suggest_all(build_pressure_index(ticks, spi_by_symbol)):
        print(f"{symbol} -> Pressure: {pressure:.1f}, SPI: {spi:.1f}, Suggest: {suggestion.value}")

    summary = FlowReportGenerator(clock=clock).generate_and_export(
        trader.trades, console.log, load_audit(args.audit), ReportStore(args.reports_dir)
    )
    engine_summary = trader.summary()
    logger.info(f"Engine summary: {engine_summary}")
    print(f"Cumulative PnL: {engine_summary['cumulative_pnl']:.2f} "
          f"({len(trader.trades)} closed, {engine_summary['open_position_count']} open)")
    print(f"Report {summary.date}: total profit {summary.total_profit:.2f}, "
          f"fresh quote ratio {summary.quote_fresh_ratio:.2f}")
    return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Replay flow pressure ticks through the paper trader")
    parser.add_argument('--ticks', required=True, help='CSV of timestamp,symbol,flow_pressure,price')
    parser.add_argument('--symbols', nargs='*', help='Restrict replay to these symbols')
    parser.add_argument('--audit', default=None, help='CSV of quote audit entries (symbol,status)')
    parser.add_argument('--reports-dir', default='reports')
    parser.add_argument('--trade-log', default='data/trade_log.csv')
    parser.add_argument('--env-file', default=None)
    parser.add_argument('--fetch-news', action='store_true', help='Score NewsAPI headlines into SPI')
    return parser.parse_args(argv)


if __name__ == "__main__":
    sys.exit(run(parse_args()))
