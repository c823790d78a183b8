# Search backend: SerpAPI (Google engine) over plain HTTP.
# Exposes search(query) -> List[SearchHit].

import logging
from typing import List

import requests

from finalsay.errors import UpstreamError
from .types import SearchHit

logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search.json"


class SerpApiClient:
    def __init__(self, api_key: str, engine: str = "google", num: int = 10, timeout: float = 20):
        self.api_key = api_key
        self.engine = engine
        self.num = num
        self.timeout = timeout

    def search(self, query: str) -> List[SearchHit]:
        params = {"engine": self.engine, "q": query, "num": self.num, "api_key": self.api_key}
        resp = requests.get(SERPAPI_URL, params=params, timeout=self.timeout)
        if not resp.ok:
            raise UpstreamError("Search error", detail=resp.text)
        data = resp.json()
        if not isinstance(data, dict):
            raise UpstreamError("Search error", detail=f"Unexpected payload: {type(data).__name__}")
        results = data.get("organic_results") or []
        if not isinstance(results, list):
            raise UpstreamError("Search error", detail="organic_results is not a list")
        hits = []
        for item in results:
            if not isinstance(item, dict):
                continue
            title = item.get("title")
            link = item.get("link")
            if not isinstance(title, str) or not isinstance(link, str):
                continue
            title, link = title.strip(), link.strip()
            if title and link:
                hits.append(SearchHit(title=title, link=link))
        logger.debug("search %r -> %d organic results", query, len(hits))
        return hits
