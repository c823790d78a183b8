# SourceResolver: reference links for advice replies.
#
# With a search client: the generation backend extracts 3-6 queries, each is
# searched in order, hits outside the domain allowlist are dropped, and the
# rest are de-duplicated by (domain, title) until the cap is reached.
# Without one: the generation backend suggests "Title — URL — Query" lines
# which are parsed directly.
#
# Everything here is best-effort. A failing query is skipped; a failing
# extraction or suggestion call yields no sources.

from __future__ import annotations
import logging
import re
from typing import Iterable, List, Sequence
from urllib.parse import urlparse

import requests

from finalsay.errors import FinalSayError
from finalsay.generate.generator import ReplyGenerator
from .prompts import query_extraction_prompt, source_suggestion_prompt
from .types import SearchHit, SourceRef

logger = logging.getLogger(__name__)

MAX_SOURCES = 8
MAX_QUERIES = 6

TRUSTED_DOMAINS = (
    # health
    "nih.gov",
    "cdc.gov",
    "who.int",
    "nhs.uk",
    "medlineplus.gov",
    "mayoclinic.org",
    "clevelandclinic.org",
    "hopkinsmedicine.org",
    "health.harvard.edu",
    # science
    "nature.com",
    "science.org",
    "sciencedirect.com",
    "nasa.gov",
    "noaa.gov",
    "apa.org",
    # government
    "usa.gov",
    "ftc.gov",
    "consumerfinance.gov",
    "dol.gov",
    "eeoc.gov",
    "justice.gov",
    "irs.gov",
    "gov.uk",
    "europa.eu",
    # academic / institutional
    "harvard.edu",
    "stanford.edu",
    "mit.edu",
    "berkeley.edu",
    "ox.ac.uk",
    "cam.ac.uk",
    "britannica.com",
    "un.org",
    "oecd.org",
    "worldbank.org",
)

_LEADING_MARKER = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")
_EM_DASH = "—"


def domain_of(url: str) -> str:
    """Lowercased host of a URL, without credentials or port."""
    if "//" not in url:
        url = "https://" + url
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return host.lower()


def is_trusted(domain: str, allowlist: Iterable[str] = TRUSTED_DOMAINS) -> bool:
    domain = domain.lower().rstrip(".")
    for entry in allowlist:
        entry = entry.lower().lstrip(".")
        if domain == entry or domain.endswith("." + entry):
            return True
    return False


def parse_queries(raw: str, limit: int = MAX_QUERIES) -> List[str]:
    queries = []
    for part in (raw or "").replace("\n", "|").split("|"):
        q = part.strip().strip("\"'").strip()
        if q and q not in queries:
            queries.append(q)
    return queries[:limit]


def parse_suggestions(raw: str, limit: int = MAX_SOURCES) -> List[SourceRef]:
    refs = []
    for line in (raw or "").splitlines():
        line = _LEADING_MARKER.sub("", line).strip()
        if not line:
            continue
        parts = [p.strip() for p in line.split(_EM_DASH)]
        title = parts[0] if parts else ""
        url = parts[1] if len(parts) > 1 else ""
        query = parts[2] if len(parts) > 2 else None
        if not title or not url:
            continue
        refs.append(SourceRef(title=title, url=url, domain=domain_of(url), query=query or None))
        if len(refs) >= limit:
            break
    return refs


def collect_trusted(
    batches: Iterable[tuple],
    allowlist: Sequence[str] = TRUSTED_DOMAINS,
    limit: int = MAX_SOURCES,
) -> List[SourceRef]:
    """
    Filter and de-duplicate (query, hits) batches in order.

    First-seen wins on (domain, title); iteration stops as soon as `limit`
    sources are accepted, so later batches are never pulled.
    """
    seen = set()
    out: List[SourceRef] = []
    for query, hits in batches:
        for hit in hits:
            domain = domain_of(hit.link)
            if not domain or not is_trusted(domain, allowlist):
                continue
            ref = SourceRef(title=hit.title, url=hit.link, domain=domain, query=query)
            if ref.key in seen:
                continue
            seen.add(ref.key)
            out.append(ref)
            if len(out) >= limit:
                return out
    return out


class SourceResolver:
    def __init__(
        self,
        generator: ReplyGenerator,
        search_client=None,
        extra_domains: Sequence[str] = (),
        max_sources: int = MAX_SOURCES,
    ):
        self.generator = generator
        self.search_client = search_client
        self.allowlist = tuple(TRUSTED_DOMAINS) + tuple(d for d in extra_domains if d)
        self.max_sources = max_sources

    def resolve(self, context: str) -> List[SourceRef]:
        if self.search_client is None:
            return self.suggest(context)
        return self.search(context)

    def search(self, context: str) -> List[SourceRef]:
        try:
            raw = self.generator.complete(query_extraction_prompt(context))
        except FinalSayError as e:
            logger.warning("Query extraction failed, returning no sources: %s", e.message)
            return []
        queries = parse_queries(raw)
        sources = collect_trusted(self._search_each(queries), self.allowlist, self.max_sources)
        logger.info("Resolved %d sources from %d queries", len(sources), len(queries))
        return sources

    def suggest(self, context: str) -> List[SourceRef]:
        try:
            raw = self.generator.complete(source_suggestion_prompt(context))
        except FinalSayError as e:
            logger.warning("Source suggestion failed, returning no sources: %s", e.message)
            return []
        return parse_suggestions(raw, self.max_sources)

    def _search_each(self, queries: Sequence[str]):
        for query in queries:
            try:
                hits: List[SearchHit] = self.search_client.search(query)
            except (FinalSayError, requests.RequestException, ValueError) as e:
                logger.warning("Skipping search query %r: %s", query, e)
                continue
            yield query, hits
