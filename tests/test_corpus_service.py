from urllib.parse import parse_qs

import pytest

from conftest import FakeResponse
from exam_vocabulary.errors import SourceUnavailable
from exam_vocabulary.services.corpus_service import AlgoliaCorpusSource, InMemoryCorpusSource, iter_corpus_pages


class _AlgoliaSession:
    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        params = parse_qs(json["params"])
        self.calls.append({"url": url, "params": params, "headers": headers})
        page = int(params["page"][0])
        return FakeResponse(200, {"hits": self.pages[page], "nbPages": len(self.pages)})


def test_algolia_source_pages_until_nb_pages():
    session = _AlgoliaSession([
        [{"objectID": "Q1", "question": "First"}, {"objectID": "Q2", "question": "Second"}],
        [{"objectID": "Q3", "question": "Third"}, {"question": "no id"}],
    ])
    source = AlgoliaCorpusSource("APPID", "search-key", "questions", page_size=2, session=session)

    pages = list(iter_corpus_pages(source))

    assert [page.number for page in pages] == [0, 1]
    assert [question.id for page in pages for question in page.questions] == ["Q1", "Q2", "Q3"]
    assert pages[1].skipped == 1
    assert session.calls[0]["url"] == "https://APPID-dsn.algolia.net/1/indexes/questions/query"
    assert session.calls[0]["headers"]["X-Algolia-API-Key"] == "search-key"
    assert session.calls[1]["params"]["hitsPerPage"] == ["2"]


def test_algolia_source_requires_credentials():
    with pytest.raises(ValueError):
        AlgoliaCorpusSource("", "", "questions")


def test_in_memory_source_stops_on_short_page():
    source = InMemoryCorpusSource([{"id": f"Q{index}"} for index in range(5)], page_size=2)

    pages = list(iter_corpus_pages(source))

    assert [len(page.questions) for page in pages] == [2, 2, 1]


def test_page_fetch_retries_then_gives_up():
    class _FlakySource:
        def __init__(self, failures):
            self.failures = failures
            self.attempts = 0

        def fetch_page(self, page):
            self.attempts += 1
            if self.attempts <= self.failures:
                raise ConnectionError("index offline")
            return [{"id": "Q1"}], False

    sleeps = []
    recovered = _FlakySource(failures=2)
    assert len(list(iter_corpus_pages(recovered, max_retries=3, backoff_seconds=1.0, sleep_func=sleeps.append))) == 1
    assert sleeps == [1.0, 2.0]

    with pytest.raises(SourceUnavailable) as exc_info:
        list(iter_corpus_pages(_FlakySource(failures=10), max_retries=2, sleep_func=lambda _: None))
    assert exc_info.value.page == 0
