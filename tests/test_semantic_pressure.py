"""
Tests for SemanticPressureScorer.

Covers lexicon matching, the 20-article cap with full-count dilution and
degradation of news fetch failures to neutral.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from analyzers.news_provider import NewsFetchError
from analyzers.semantic_pressure import SemanticPressureScorer, label_for, MAX_ARTICLES
from core.clock import ManualClock
from core.models import NewsItem, SentimentLabel


def article(title, description=''):
    return {'title': title, 'description': description}


@pytest.fixture
def scorer():
    """Create scorer instance for testing."""
    return SemanticPressureScorer(clock=ManualClock(datetime(2024, 3, 1, 10, 0)))


class TestAnalyzeText:
    """Test phrase counting on raw text."""

    def test_counts_each_phrase(self, scorer):
        assert scorer.analyze_text('Funding round and new partnership') == 2
        assert scorer.analyze_text('Layoff fears after downgrade') == -2
        assert scorer.analyze_text('Acquisition stalls on delay') == 0
        assert scorer.analyze_text('Quiet session') == 0

    def test_case_insensitive(self, scorer):
        assert scorer.analyze_text('AI BREAKTHROUGH announced') == 1
        assert scorer.analyze_text('ai breakthrough announced') == 1


class TestScore:
    """Test SPI scoring of article batches."""

    def test_empty_articles_are_neutral(self, scorer):
        assert scorer.score('ABC', []) == {'symbol': 'ABC', 'spi': 50, 'sentiment': 'neutral'}
        assert scorer.score('ABC', None)['spi'] == 50
        assert scorer.results == []

    def test_positive_batch(self, scorer):
        result = scorer.score('ABC', [article('Patent granted', 'partnership signed')])
        assert result['spi'] == pytest.approx(70.0)
        assert result['sentiment'] == 'positive'

    def test_negative_batch(self, scorer):
        result = scorer.score('ABC', [article('Bankruptcy filing'), article('Quiet day')])
        assert result['spi'] == pytest.approx(45.0)  # avg -0.5
        assert result['sentiment'] == 'neutral'
        result = scorer.score('ABC', [article('Bankruptcy filing')])
        assert result['spi'] == pytest.approx(40.0)
        assert result['sentiment'] == 'negative'

    def test_spi_is_clamped(self, scorer):
        text = 'funding capital raise loan approved acquisition partnership order expected'
        assert scorer.score('ABC', [article(text)])['spi'] == 100.0
        text = 'layoff cash shortage default bankruptcy order canceled delay downgrade'
        assert scorer.score('ABC', [article(text)])['spi'] == 0.0

    def test_missing_fields_treated_as_empty(self, scorer):
        result = scorer.score('ABC', [{'title': None, 'description': 'funding'}, {}])
        assert result['spi'] == pytest.approx(55.0)
        assert result['sentiment'] == 'neutral'

    def test_news_items_use_body(self, scorer):
        items = [NewsItem(symbol='ABC', title='Update', body='Loan approved by lenders')]
        assert scorer.score('ABC', items)['spi'] == pytest.approx(60.0)

    def test_only_first_twenty_scored_but_full_count_divides(self, scorer):
        positives = [article('New partnership') for _ in range(MAX_ARTICLES)]
        twenty = scorer.score('ABC', positives)['spi']
        diluted = scorer.score('ABC', positives + [article('New partnership') for _ in range(5)])['spi']
        assert twenty == pytest.approx(60.0)
        assert diluted == pytest.approx(58.0)  # 20 / 25
        assert diluted < twenty

    def test_articles_past_twenty_never_score(self, scorer):
        neutral = [article('Nothing new') for _ in range(MAX_ARTICLES)]
        result = scorer.score('ABC', neutral + [article('bankruptcy default layoff')])
        assert result['spi'] == pytest.approx(50.0)

    def test_results_are_recorded(self, scorer):
        scorer.score('ABC', [article('funding')])
        scorer.score('XYZ', [article('delay')])
        assert [r.symbol for r in scorer.results] == ['ABC', 'XYZ']
        assert scorer.results[0].label == SentimentLabel.POSITIVE
        assert scorer.results[0].timestamp == datetime(2024, 3, 1, 10, 0)


def test_label_thresholds():
    assert label_for(55) == SentimentLabel.NEUTRAL
    assert label_for(55.1) == SentimentLabel.POSITIVE
    assert label_for(45) == SentimentLabel.NEUTRAL
    assert label_for(44.9) == SentimentLabel.NEGATIVE


class TestComputeSpi:
    """Test fetching and scoring through a news provider."""

    def test_fetch_failure_degrades_to_neutral(self):
        provider = MagicMock()
        provider.fetch.side_effect = NewsFetchError('timeout')
        scorer = SemanticPressureScorer(news_provider=provider)
        assert scorer.compute_spi('ABC') == {'symbol': 'ABC', 'spi': 50, 'sentiment': 'neutral'}

    def test_any_upstream_error_degrades(self):
        provider = MagicMock()
        provider.fetch.side_effect = requests.ConnectionError('down')
        scorer = SemanticPressureScorer(news_provider=provider)
        assert scorer.compute_spi('ABC')['sentiment'] == 'neutral'

    def test_run_scores_each_symbol(self):
        provider = MagicMock()
        provider.fetch.side_effect = lambda s: [article('funding')] if s == 'ABC' else []
        scorer = SemanticPressureScorer(news_provider=provider)
        outputs = scorer.run(['ABC', 'XYZ'])
        assert [o['symbol'] for o in outputs] == ['ABC', 'XYZ']
        assert outputs[0]['spi'] == pytest.approx(60.0)
        assert outputs[1]['spi'] == 50

    def test_no_provider_means_no_news(self):
        assert SemanticPressureScorer().compute_spi('ABC')['spi'] == 50
