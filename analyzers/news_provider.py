"""
News Provider Module

Fetches recent news articles for a symbol from NewsAPI. Any failure
(timeout, HTTP error, bad payload) is raised as NewsFetchError; callers
decide how to degrade.
"""

import logging
import os
from typing import Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

NEWSAPI_URL = 'https://newsapi.org/v2/everything'


class NewsFetchError(RuntimeError):
    """Upstream news source could not be read"""


class NewsProvider:
    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key or os.getenv('NEWS_API_KEY')
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, symbol: str) -> List[Dict]:
        """Return the raw article dicts (title, description, ...) for a symbol"""
        params = {'q': symbol, 'apiKey': self.api_key}
        try:
            resp = self.session.get(NEWSAPI_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise NewsFetchError(f"News fetch failed for {symbol}: {e}") from e

        articles = payload.get('articles') if isinstance(payload, dict) else None
        if articles is None:
            raise NewsFetchError(f"Malformed news payload for {symbol}")
        logger.debug(f"Fetched {len(articles)} articles for {symbol}")
        return articles
