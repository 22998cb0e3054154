"""
Semantic Pressure Module

Scores news headlines for a symbol against fixed positive / negative phrase
lexicons and maps the result onto the Semantic Pressure Index (SPI, 0-100,
50 = neutral).

Known quirk: only the first MAX_ARTICLES articles are scored, but the
average divides by the full article count. Large batches therefore pull
the SPI towards 50. This is kept as-is pending product clarification.
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from core.clock import SystemClock
from core.models import SentimentLabel, SentimentRecord

logger = logging.getLogger(__name__)

POSITIVE_PHRASES = (
    "funding", "capital raise", "loan approved", "acquisition",
    "partnership", "order expected", "ai breakthrough", "patent granted",
)
NEGATIVE_PHRASES = (
    "layoff", "cash shortage", "default", "bankruptcy",
    "order canceled", "delay", "downgrade",
)

MAX_ARTICLES = 20
NEUTRAL_SPI = 50.0


def _article_text(article: Any) -> str:
    if isinstance(article, Mapping):
        title, description = article.get('title'), article.get('description')
    else:
        title = getattr(article, 'title', None)
        description = getattr(article, 'description', getattr(article, 'body', None))
    return f"{title or ''} {description or ''}"


def label_for(spi: float) -> SentimentLabel:
    if spi > 55:
        return SentimentLabel.POSITIVE
    if spi < 45:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


class SemanticPressureScorer:
    def __init__(self, news_provider=None, clock=None,
                 positive: Sequence[str] = POSITIVE_PHRASES,
                 negative: Sequence[str] = NEGATIVE_PHRASES):
        self.news_provider = news_provider
        self.clock = clock or SystemClock()
        self.positive = tuple(p.lower() for p in positive)
        self.negative = tuple(p.lower() for p in negative)
        self.results: List[SentimentRecord] = []
        self._lock = threading.Lock()

    def analyze_text(self, text: str) -> int:
        lower = text.lower()
        score = sum(1 for phrase in self.positive if phrase in lower)
        score -= sum(1 for phrase in self.negative if phrase in lower)
        return score

    def score(self, symbol: str, articles: Optional[Sequence[Any]]) -> Dict[str, Any]:
        """
        Compute the SPI for a batch of articles.

        Args:
            symbol: Symbol the articles refer to
            articles: Mappings with title/description, or NewsItem objects

        Returns:
            {'symbol', 'spi', 'sentiment'}
        """
        articles = list(articles or [])
        if not articles:
            return {'symbol': symbol, 'spi': NEUTRAL_SPI, 'sentiment': SentimentLabel.NEUTRAL.value}

        total = sum(self.analyze_text(_article_text(a)) for a in articles[:MAX_ARTICLES])
        avg = total / max(len(articles), 1)
        spi = min(100.0, max(0.0, NEUTRAL_SPI + avg * 10))
        record = SentimentRecord(symbol=symbol, spi=spi, label=label_for(spi), timestamp=self.clock.now())
        with self._lock:
            self.results.append(record)
        return {'symbol': symbol, 'spi': spi, 'sentiment': record.sentiment}

    def compute_spi(self, symbol: str) -> Dict[str, Any]:
        """Fetch news for a symbol and score it; fetch failures score as no news"""
        try:
            articles = self.news_provider.fetch(symbol) if self.news_provider else []
        except Exception as e:  # every upstream failure degrades to no news
            logger.warning(f"News fetch error for {symbol}: {e}")
            articles = []
        return self.score(symbol, articles)

    def run(self, symbols: Iterable[str]) -> List[Dict[str, Any]]:
        outputs = []
        for symbol in symbols:
            result = self.compute_spi(symbol)
            outputs.append(result)
            logger.info(f"{symbol} -> SPI: {result['spi']:.1f}, Sentiment: {result['sentiment']}")
        return outputs
