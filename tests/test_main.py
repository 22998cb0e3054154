"""
End-to-end tests for the replay runner.
"""

import json

import pandas as pd
import pytest

import main


@pytest.fixture
def ticks_csv(tmp_path):
    """Write a small two-symbol tick file."""
    rows = [
        ('2024-01-02 09:30:00', 'ABC', 80, 100.0),
        ('2024-01-02 09:30:00', 'XYZ', 50, 20.0),
        ('2024-01-02 09:31:00', 'ABC', 75, 110.0),
        ('2024-01-02 09:32:00', 'XYZ', 30, 20.5),
    ]
    path = tmp_path / 'ticks.csv'
    pd.DataFrame(rows, columns=['timestamp', 'symbol', 'flow_pressure', 'price']).to_csv(path, index=False)
    return path


def test_build_pressure_index_uses_latest_tick():
    ticks = pd.DataFrame({
        'timestamp': pd.to_datetime(['2024-01-02 09:30', '2024-01-02 09:31']),
        'symbol': ['ABC', 'ABC'],
        'flow_pressure': [80, 20],
        'price': [10.0, 11.0],
    })
    assert main.build_pressure_index(ticks, {}) == {'ABC': {'pressure': 20.0}}
    assert main.build_pressure_index(ticks, {'ABC': 60.0}) == {'ABC': {'pressure': 20.0, 'spi': 60.0}}


def test_replay_writes_report(ticks_csv, tmp_path, monkeypatch):
    for var in ('FP_CAPITAL', 'FP_TRADE_PER_SIGNAL', 'FP_FEE_RATE', 'FP_TAKE_PROFIT_PCT',
                'FP_STOP_LOSS_PCT', 'FP_ENTRY_THRESHOLD', 'FP_EXIT_THRESHOLD', 'FP_HOLD_TIME_SEC'):
        monkeypatch.delenv(var, raising=False)
    audit = tmp_path / 'audit.csv'
    pd.DataFrame({'symbol': ['ABC', 'XYZ'], 'status': ['FRESH', 'STALE']}).to_csv(audit, index=False)
    reports = tmp_path / 'reports'
    args = main.parse_args([
        '--ticks', str(ticks_csv), '--audit', str(audit),
        '--reports-dir', str(reports), '--trade-log', str(tmp_path / 'trades.csv'),
        '--env-file', str(tmp_path / 'missing.env'),
    ])
    assert main.run(args) == 0
    with open(reports / 'flow_report_2024-01-02.json') as f:
        report = json.load(f)
    # ABC opens at 100 and takes profit at 110, XYZ never enters
    assert report['auto_trades'] == 1
    assert report['total_profit'] == pytest.approx(110.0)
    assert report['quote_fresh_ratio'] == 0.5
    assert len(pd.read_csv(tmp_path / 'trades.csv')) == 1
