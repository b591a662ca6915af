"""Dictionary enrichment with deterministic fallbacks.

Lookups go to a Free Dictionary API compatible endpoint. A failed lookup never
fails the run: :func:`enrich_words` swaps in :func:`fallback_enrichment` and
keeps going with the remaining words.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import quote

import requests

from exam_vocabulary.errors import EnrichmentFailure
from exam_vocabulary.models import Enrichment

logger = logging.getLogger(__name__)

DICTIONARY_SOURCE = 'Free Dictionary API'
FALLBACK_SOURCE = 'Generated'
MAX_SYNONYMS = 6
FALLBACK_SYNONYMS = ('related', 'similar', 'equivalent')


def fallback_enrichment(word):
    return Enrichment(
        definition=(
            f"{word}: An important vocabulary word from exam reading passages. "
            "This word appears in academic English texts and is essential for test preparation."
        ),
        synonyms=list(FALLBACK_SYNONYMS),
        pronunciation=None,
        part_of_speech=None,
        source=FALLBACK_SOURCE,
    )


def _dedupe_synonyms(candidates, word):
    synonyms = []
    seen = {word.lower()}
    for item in candidates:
        if not isinstance(item, str):
            continue
        value = item.strip()
        if not value or value.lower() in seen:
            continue
        seen.add(value.lower())
        synonyms.append(value)
        if len(synonyms) >= MAX_SYNONYMS:
            break
    return synonyms


def parse_dictionary_payload(word, payload):
    """Map a Free Dictionary API response body onto :class:`Enrichment`."""
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
        raise EnrichmentFailure(word, 'malformed payload')
    entry = payload[0]
    meanings = [meaning for meaning in (entry.get('meanings') or []) if isinstance(meaning, dict)]
    if not meanings:
        raise EnrichmentFailure(word, 'no meanings found')

    first_meaning = meanings[0]
    definitions = [item for item in (first_meaning.get('definitions') or []) if isinstance(item, dict)]
    definition = str(definitions[0].get('definition') or '').strip() if definitions else ''
    if not definition:
        raise EnrichmentFailure(word, 'no definition found')

    candidates = []
    for meaning in meanings:
        candidates.extend(meaning.get('synonyms') or [])
        for item in meaning.get('definitions') or []:
            if isinstance(item, dict):
                candidates.extend(item.get('synonyms') or [])

    pronunciation = entry.get('phonetic') or None
    if not pronunciation:
        for phonetic in entry.get('phonetics') or []:
            if isinstance(phonetic, dict) and phonetic.get('text'):
                pronunciation = phonetic['text']
                break

    return Enrichment(
        definition=definition,
        synonyms=_dedupe_synonyms(candidates, word),
        pronunciation=pronunciation,
        part_of_speech=first_meaning.get('partOfSpeech') or None,
        source=DICTIONARY_SOURCE,
    )


class DictionaryClient:
    def __init__(self, base_url, *, timeout=10.0, session=None):
        self.base_url = str(base_url).rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def lookup(self, word) -> Enrichment:
        url = f"{self.base_url}/{quote(word)}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise EnrichmentFailure(word, f"request error: {exc}") from exc
        if response.status_code != 200:
            raise EnrichmentFailure(word, f"dictionary API returned {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise EnrichmentFailure(word, 'response is not JSON') from exc
        return parse_dictionary_payload(word, payload)


def enrich_word(word, *, client):
    """Return ``(enrichment, used_fallback)``; never raises for lookup failures."""
    try:
        return client.lookup(word), False
    except EnrichmentFailure as exc:
        logger.info(f"📝 No dictionary data for '{word}': {exc.reason}")
    except Exception as exc:
        logger.warning(f"⚠️ Dictionary lookup crashed for '{word}': {exc}")
    return fallback_enrichment(word), True


def enrich_words(words, *, client, concurrency=4, batch_delay_seconds=0.1, sleep_func=time.sleep):
    """Look up ``words`` in batches of ``concurrency`` parallel requests.

    Returns ``(enrichments_by_word, fallback_words)``. Batches run one after the
    other with ``batch_delay_seconds`` in between to stay under rate limits.
    """
    words = list(dict.fromkeys(words))
    concurrency = max(1, int(concurrency))
    enrichments = {}
    fallbacks = []
    if not words:
        return enrichments, fallbacks

    with ThreadPoolExecutor(max_workers=concurrency) as executor:
        for start in range(0, len(words), concurrency):
            if start and batch_delay_seconds > 0:
                sleep_func(batch_delay_seconds)
            batch = words[start:start + concurrency]
            results = executor.map(lambda item: enrich_word(item, client=client), batch)
            for word, (enrichment, used_fallback) in zip(batch, results):
                enrichments[word] = enrichment
                if used_fallback:
                    fallbacks.append(word)
    return enrichments, fallbacks
