from exam_vocabulary.config import PipelineConfig
from exam_vocabulary.models import SourceQuestion
from exam_vocabulary.services.frequency_aggregator import VocabularyAggregator, merge_contexts


def _aggregate(word, count, prefix, subject=None):
    aggregator = VocabularyAggregator()
    for index in range(count):
        aggregator.add(word, f"The {word} shifted in study {prefix}{index}", f"{prefix}{index}", subject)
    return aggregator


def test_add_counts_every_sighting_and_caps_contexts():
    aggregator = VocabularyAggregator(max_contexts=2)

    aggregator.add("paradigm", "A new paradigm emerged", "Q1")
    aggregator.add("paradigm", "a  NEW paradigm emerged", "Q2")
    aggregator.add("paradigm", "The paradigm shifted again", "Q3")
    aggregator.add("paradigm", "Each paradigm has limits", "Q3")

    record = aggregator.get("paradigm")
    assert record.frequency == 4
    assert record.contexts == ["A new paradigm emerged", "The paradigm shifted again"]
    assert record.source_questions == {"Q1", "Q2", "Q3"}


def test_merge_sums_frequencies_and_unions_sources():
    first = _aggregate("paradigm", 3, "a", subject="science")
    second = _aggregate("paradigm", 5, "b", subject="philosophy")

    merged = first.merge(second)

    record = merged.get("paradigm")
    assert record.frequency == 8
    assert record.source_questions == first.get("paradigm").source_questions | second.get("paradigm").source_questions
    assert record.subject_areas == {"science", "philosophy"}
    assert first.get("paradigm").frequency == 3
    assert second.get("paradigm").frequency == 5


def test_merge_counts_are_order_independent():
    first = _aggregate("paradigm", 2, "a")
    second = _aggregate("paradigm", 7, "b")

    left = first.merge(second).get("paradigm")
    right = second.merge(first).get("paradigm")

    assert left.frequency == right.frequency == 9
    assert left.source_questions == right.source_questions
    assert len(left.contexts) == len(right.contexts) == 5


def test_merge_contexts_dedupes_and_caps():
    merged = merge_contexts(["One sentence", "Two sentence"], ["one  SENTENCE", "Three sentence"], 3)

    assert merged == ["One sentence", "Two sentence", "Three sentence"]


def test_add_question_runs_normalizer_and_filter():
    aggregator = VocabularyAggregator()
    question = SourceQuestion.from_record({
        "id": "Q1",
        "questionText": "The elaborate synthesis of ideas fascinated the students.",
        "subject": "Science",
    })

    added = aggregator.add_question(question, PipelineConfig())

    assert added == 3
    assert "elaborate" in aggregator
    assert "ideas" not in aggregator
    assert aggregator.get("synthesis").contexts == ["The elaborate synthesis of ideas fascinated the students"]
    assert aggregator.get("synthesis").subject_areas == {"science"}
    assert aggregator.questions_processed == 1
    assert aggregator.sentences_processed == 1


def test_most_frequent_orders_by_frequency_then_word():
    aggregator = VocabularyAggregator()
    for word, count in (("zenith", 2), ("anomaly", 2), ("paradigm", 5), ("nuance", 1)):
        for index in range(count):
            aggregator.add(word, f"Sentence about {word} number {index}", f"Q{index}")

    ranked = aggregator.most_frequent(limit=3)
    assert [record.word for record in ranked] == ["paradigm", "anomaly", "zenith"]
    assert [record.word for record in aggregator.most_frequent(min_frequency=2)] == ["paradigm", "anomaly", "zenith"]
