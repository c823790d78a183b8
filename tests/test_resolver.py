import requests

from finalsay.errors import UpstreamError
from finalsay.search.resolver import (
    SourceResolver,
    collect_trusted,
    domain_of,
    is_trusted,
    parse_queries,
    parse_suggestions,
)
from finalsay.search import serpapi_client
from finalsay.search.serpapi_client import SerpApiClient
from finalsay.search.types import SearchHit

from conftest import FakeSearchClient


def test_allowlist_filtering():
    assert not is_trusted("example.com")
    assert is_trusted("www.nih.gov")
    assert is_trusted("nih.gov")
    assert not is_trusted("fakenih.gov")


def test_domain_of_handles_ports_and_missing_scheme():
    assert domain_of("https://WWW.CDC.gov:443/flu") == "www.cdc.gov"
    assert domain_of("mayoclinic.org/diseases") == "mayoclinic.org"
    assert domain_of("") == ""


def test_collect_trusted_filters_and_dedups_first_seen():
    batches = [
        ("q1", [SearchHit("Spam", "https://example.com/a"), SearchHit("Sleep", "https://www.nih.gov/sleep")]),
        ("q2", [SearchHit("Sleep", "https://www.nih.gov/sleep-again"), SearchHit("Sleep", "https://www.cdc.gov/sleep")]),
    ]
    refs = collect_trusted(batches)
    assert [(r.domain, r.title, r.query) for r in refs] == [
        ("www.nih.gov", "Sleep", "q1"),
        ("www.cdc.gov", "Sleep", "q2"),
    ]
    assert refs[0].url == "https://www.nih.gov/sleep"


def test_collect_trusted_stops_pulling_once_cap_reached():
    pulled = []

    def batches():
        for i in range(3):
            pulled.append(i)
            yield f"q{i}", [SearchHit(f"T{i}-{j}", f"https://nih.gov/{i}/{j}") for j in range(5)]

    refs = collect_trusted(batches(), limit=8)
    assert len(refs) == 8
    assert pulled == [0, 1]


def test_parse_queries():
    assert parse_queries(' "sleep hygiene" | insomnia tips || sleep hygiene\nmelatonin') == [
        "sleep hygiene",
        "insomnia tips",
        "melatonin",
    ]
    assert len(parse_queries("|".join(str(i) for i in range(10)))) == 6


def test_parse_suggestions_splits_on_em_dash():
    raw = "\n".join([
        "1. Sleep basics — https://www.nih.gov/sleep — sleep hygiene",
        "- No url here —  — nothing",
        "Just a title",
        "CDC Sleep — https://www.cdc.gov/sleep",
    ])
    refs = parse_suggestions(raw)
    assert [(r.title, r.url, r.domain, r.query) for r in refs] == [
        ("Sleep basics", "https://www.nih.gov/sleep", "www.nih.gov", "sleep hygiene"),
        ("CDC Sleep", "https://www.cdc.gov/sleep", "www.cdc.gov", None),
    ]


def test_parse_suggestions_capped_at_eight():
    raw = "\n".join(f"T{i} — https://nih.gov/{i} — q" for i in range(12))
    assert len(parse_suggestions(raw)) == 8


def test_search_strategy_skips_failing_queries(scripted):
    client, generator = scripted("flu shot | broken | cold remedies")
    search = FakeSearchClient({
        "flu shot": [("Flu Vaccine", "https://www.cdc.gov/flu"), ("Blog", "https://example.com/flu")],
        "broken": requests.ConnectionError("boom"),
        "cold remedies": [("Common Cold", "https://medlineplus.gov/cold")],
    })
    resolver = SourceResolver(generator, search_client=search)

    refs = resolver.resolve("Message: I keep getting sick")

    assert search.queries == ["flu shot", "broken", "cold remedies"]
    assert [r.title for r in refs] == ["Flu Vaccine", "Common Cold"]
    messages, params = client.calls[0]
    assert params.temperature == 0.2
    assert "pipe" in messages[0].content


def test_search_strategy_upstream_error_per_query_is_skipped(scripted):
    _, generator = scripted("a | b")
    search = FakeSearchClient({"a": UpstreamError("Search error", "quota"), "b": [("Doc", "https://who.int/doc")]})
    refs = SourceResolver(generator, search_client=search).resolve("ctx")
    assert [r.domain for r in refs] == ["who.int"]


def test_extra_domains_extend_allowlist(scripted):
    _, generator = scripted("q")
    search = FakeSearchClient({"q": [("Kids", "https://kidshealth.org/x")]})
    assert SourceResolver(generator, search_client=search).resolve("ctx") == []

    _, generator = scripted("q")
    refs = SourceResolver(generator, search_client=search, extra_domains=["kidshealth.org"]).resolve("ctx")
    assert [r.domain for r in refs] == ["kidshealth.org"]


def test_suggestion_fallback_without_search_client(scripted):
    client, generator = scripted("Sleep — https://www.nih.gov/sleep — sleep")
    refs = SourceResolver(generator).resolve("ctx")
    assert [r.to_payload() for r in refs] == [
        {"title": "Sleep", "url": "https://www.nih.gov/sleep", "domain": "www.nih.gov", "query": "sleep"}
    ]
    assert "Title — URL — Query" in client.calls[0][0][0].content


def test_generation_failure_yields_no_sources(scripted):
    _, generator = scripted(UpstreamError("OpenAI error", "down"))
    assert SourceResolver(generator).resolve("ctx") == []


class _Response:
    ok = True
    status_code = 200
    text = ""

    def __init__(self, payload):
        self.payload = payload

    def json(self):
        return self.payload


def test_malformed_search_payload_skips_only_that_query(scripted, monkeypatch):
    payloads = {
        "bad shape": ["unexpected"],
        "bad entries": {"organic_results": ["nope", {"title": 3, "link": "https://nih.gov/x"}]},
        "good": {"organic_results": [{"title": "Flu", "link": "https://www.cdc.gov/flu"}]},
    }
    monkeypatch.setattr(serpapi_client.requests, "get", lambda url, params, timeout: _Response(payloads[params["q"]]))
    _, generator = scripted("bad shape | bad entries | good")

    refs = SourceResolver(generator, search_client=SerpApiClient(api_key="k")).resolve("ctx")

    assert [(r.title, r.domain, r.query) for r in refs] == [("Flu", "www.cdc.gov", "good")]
