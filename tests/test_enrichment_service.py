import pytest

from conftest import FakeDictionarySession, FakeResponse, dictionary_payload
from exam_vocabulary.errors import EnrichmentFailure
from exam_vocabulary.services.enrichment_service import (
    DICTIONARY_SOURCE,
    FALLBACK_SOURCE,
    DictionaryClient,
    enrich_word,
    enrich_words,
    fallback_enrichment,
    parse_dictionary_payload,
)


def _client(session):
    return DictionaryClient("https://dictionary.test/api/v2/entries/en", timeout=1.0, session=session)


def test_parse_payload_collects_definition_synonyms_and_pronunciation():
    payload = [{
        "word": "elaborate",
        "phonetics": [{"audio": ""}, {"text": "/ɪˈlæb.ər.ət/"}],
        "meanings": [
            {
                "partOfSpeech": "adjective",
                "definitions": [{"definition": "Having a lot of carefully arranged detail.", "synonyms": ["intricate"]}],
                "synonyms": ["detailed", "Elaborate", "complex"],
            },
            {"partOfSpeech": "verb", "definitions": [{"definition": "To develop in detail."}], "synonyms": ["detailed", "expand"]},
        ],
    }]

    enrichment = parse_dictionary_payload("elaborate", payload)

    assert enrichment.definition == "Having a lot of carefully arranged detail."
    assert enrichment.synonyms == ["detailed", "complex", "intricate", "expand"]
    assert enrichment.pronunciation == "/ɪˈlæb.ər.ət/"
    assert enrichment.part_of_speech == "adjective"
    assert enrichment.source == DICTIONARY_SOURCE


@pytest.mark.parametrize("payload", [{}, [], [{"meanings": []}], [{"meanings": [{"definitions": [{}]}]}]])
def test_parse_payload_rejects_unusable_bodies(payload):
    with pytest.raises(EnrichmentFailure):
        parse_dictionary_payload("word", payload)


def test_lookup_raises_on_not_found_and_bad_json():
    session = FakeDictionarySession(missing={"zzxqq"})
    client = _client(session)

    with pytest.raises(EnrichmentFailure) as exc_info:
        client.lookup("zzxqq")
    assert "404" in exc_info.value.reason

    class _BrokenSession:
        def get(self, url, timeout=None):
            return FakeResponse(200, raise_on_json=True)

    with pytest.raises(EnrichmentFailure):
        _client(_BrokenSession()).lookup("paradigm")


def test_nonsense_word_gets_deterministic_fallback_without_raising():
    client = _client(FakeDictionarySession(missing={"zzxqq"}))

    enrichment, used_fallback = enrich_word("zzxqq", client=client)

    assert used_fallback is True
    assert enrichment == fallback_enrichment("zzxqq")
    assert enrichment.source == FALLBACK_SOURCE
    assert enrichment.definition.startswith("zzxqq: An important vocabulary word")


def test_network_errors_also_fall_back():
    client = _client(FakeDictionarySession(errors={"paradigm"}))

    enrichment, used_fallback = enrich_word("paradigm", client=client)

    assert used_fallback is True
    assert enrichment.source == FALLBACK_SOURCE


def test_enrich_words_batches_with_delay_between_batches():
    session = FakeDictionarySession(
        known={"paradigm": dictionary_payload("paradigm", synonyms=("model",))},
        missing={"zzxqq"},
    )
    sleeps = []

    enrichments, fallbacks = enrich_words(
        ["paradigm", "zzxqq", "nuance", "paradigm", "anomaly", "zenith"],
        client=_client(session),
        concurrency=2,
        batch_delay_seconds=0.5,
        sleep_func=sleeps.append,
    )

    assert set(enrichments) == {"paradigm", "zzxqq", "nuance", "anomaly", "zenith"}
    assert fallbacks == ["zzxqq"]
    assert enrichments["paradigm"].synonyms == ["model"]
    assert sleeps == [0.5, 0.5]
    assert sorted(session.requested) == ["anomaly", "nuance", "paradigm", "zenith", "zzxqq"]


def test_enrich_words_with_no_words_makes_no_requests():
    session = FakeDictionarySession()

    assert enrich_words([], client=_client(session)) == ({}, [])
    assert session.requested == []
