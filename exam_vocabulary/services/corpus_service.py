"""Paged access to the exam question corpus."""

import logging
import time
from dataclasses import dataclass, field
from typing import List
from urllib.parse import quote, urlencode

import requests

from exam_vocabulary.errors import SourceUnavailable
from exam_vocabulary.models import SourceQuestion

logger = logging.getLogger(__name__)

DEFAULT_ATTRIBUTES = (
    'objectID', 'question', 'questionText', 'actualQuestion', 'passage', 'english_text',
    'answer', 'explanation', 'subject', 'subjectArea', 'theoryArea', 'year', 'questionNumber',
)
MAX_PAGES = 1000


@dataclass
class CorpusPage:
    number: int
    questions: List[SourceQuestion] = field(default_factory=list)
    skipped: int = 0


class AlgoliaCorpusSource:
    """Browses a search index page by page through the REST query endpoint."""

    def __init__(self, app_id, api_key, index_name, *, page_size=1000, attributes=DEFAULT_ATTRIBUTES, session=None, timeout=15.0):
        if not app_id or not api_key:
            raise ValueError('Algolia app id and search key are required.')
        self.app_id = app_id
        self.api_key = api_key
        self.index_name = index_name
        self.page_size = int(page_size)
        self.attributes = tuple(attributes)
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def query_url(self):
        return f"https://{self.app_id}-dsn.algolia.net/1/indexes/{quote(self.index_name)}/query"

    def fetch_page(self, page):
        """Return ``(hits, has_more)`` for zero-based ``page``."""
        params = urlencode({
            'query': '',
            'hitsPerPage': self.page_size,
            'page': page,
            'attributesToRetrieve': ','.join(self.attributes),
        })
        response = self.session.post(
            self.query_url,
            json={'params': params},
            headers={
                'X-Algolia-Application-Id': self.app_id,
                'X-Algolia-API-Key': self.api_key,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json() or {}
        hits = payload.get('hits') or []
        has_more = len(hits) >= self.page_size
        nb_pages = payload.get('nbPages')
        if isinstance(nb_pages, int):
            has_more = has_more and page + 1 < nb_pages
        return hits, has_more


class InMemoryCorpusSource:
    """Pages an in-memory list of question records (JSON exports, admin uploads, tests)."""

    def __init__(self, records, *, page_size=1000):
        self.records = list(records or [])
        self.page_size = max(1, int(page_size))

    def fetch_page(self, page):
        start = page * self.page_size
        hits = self.records[start:start + self.page_size]
        return hits, start + self.page_size < len(self.records)


def iter_corpus_pages(source, *, max_retries=3, backoff_seconds=1.0, sleep_func=time.sleep):
    """Yield :class:`CorpusPage` objects until the source runs dry.

    Each page fetch is retried ``max_retries`` times; after that the run is
    aborted with :class:`SourceUnavailable`.
    """
    page = 0
    while page < MAX_PAGES:
        attempt = 0
        while True:
            try:
                hits, has_more = source.fetch_page(page)
                break
            except Exception as exc:
                attempt += 1
                if attempt > max_retries:
                    raise SourceUnavailable(f"Could not fetch corpus page {page}: {exc}", page=page) from exc
                logger.warning(f"⚠️ Corpus page {page} fetch failed (attempt {attempt}), retrying: {exc}")
                sleep_func(backoff_seconds * attempt)

        corpus_page = CorpusPage(number=page)
        for hit in hits:
            question = SourceQuestion.from_record(hit)
            if question is None:
                corpus_page.skipped += 1
                continue
            corpus_page.questions.append(question)
        logger.info(f"📄 Fetched page {page + 1}: {len(corpus_page.questions)} questions")
        yield corpus_page

        if not has_more or not hits:
            break
        page += 1
