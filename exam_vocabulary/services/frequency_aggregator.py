"""Per-run word -> aggregate record accumulation.

One :class:`VocabularyAggregator` is built per extraction run and handed from
stage to stage; nothing here is module-global. ``frequency``,
``source_questions`` and ``subject_areas`` combine associatively and
commutatively under :meth:`VocabularyAggregator.merge`. ``contexts`` do not:
they keep the first ``max_contexts`` distinct sentences in the order the
aggregates were built and merged, so two runs over the same pages in a
different order can keep different example sentences.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from exam_vocabulary.services.text_normalizer import split_sentences
from exam_vocabulary.services.word_filter import extract_candidates

DEFAULT_MAX_CONTEXTS = 5

_WHITESPACE_RE = re.compile(r'\s+')


def context_key(sentence):
    """Key under which two sentences count as the same example."""
    return _WHITESPACE_RE.sub(' ', str(sentence or '')).strip().casefold()


def merge_contexts(first, second, cap):
    merged = []
    seen = set()
    for sentence in list(first) + list(second):
        if len(merged) >= cap:
            break
        key = context_key(sentence)
        if not key or key in seen:
            continue
        seen.add(key)
        merged.append(sentence)
    return merged


@dataclass
class AggregateRecord:
    word: str
    frequency: int = 0
    contexts: List[str] = field(default_factory=list)
    source_questions: Set[str] = field(default_factory=set)
    subject_areas: Set[str] = field(default_factory=set)


class VocabularyAggregator:
    def __init__(self, max_contexts=DEFAULT_MAX_CONTEXTS):
        if max_contexts < 1:
            raise ValueError('max_contexts must be at least 1')
        self.max_contexts = int(max_contexts)
        self._records: Dict[str, AggregateRecord] = {}
        self.questions_processed = 0
        self.sentences_processed = 0
        self.sightings = 0

    def __len__(self):
        return len(self._records)

    def __contains__(self, word):
        return word in self._records

    def get(self, word) -> Optional[AggregateRecord]:
        return self._records.get(word)

    def add(self, word, sentence, source_id, subject=None) -> AggregateRecord:
        record = self._records.get(word)
        if record is None:
            record = AggregateRecord(word=word)
            self._records[word] = record
        record.frequency += 1
        self.sightings += 1
        if len(record.contexts) < self.max_contexts:
            key = context_key(sentence)
            if key and all(context_key(existing) != key for existing in record.contexts):
                record.contexts.append(sentence)
        if source_id:
            record.source_questions.add(str(source_id))
        if subject:
            record.subject_areas.add(subject)
        return record

    def add_question(self, question, config):
        """Normalize, filter and count every text field of one :class:`SourceQuestion`."""
        min_length = config.min_sentence_length
        added = 0
        for text in question.text_fields:
            for sentence in split_sentences(text, min_length=min_length):
                self.sentences_processed += 1
                for word, origin in extract_candidates(sentence, config):
                    self.add(word, origin, question.id, question.subject)
                    added += 1
        self.questions_processed += 1
        return added

    def add_questions(self, questions: Iterable, config):
        return sum(self.add_question(question, config) for question in questions)

    def absorb(self, other: 'VocabularyAggregator') -> 'VocabularyAggregator':
        """In-place merge of ``other`` into this aggregator."""
        for word, incoming in other._records.items():
            record = self._records.get(word)
            if record is None:
                record = AggregateRecord(word=word)
                self._records[word] = record
            record.frequency += incoming.frequency
            record.contexts = merge_contexts(record.contexts, incoming.contexts, self.max_contexts)
            record.source_questions |= incoming.source_questions
            record.subject_areas |= incoming.subject_areas
        self.questions_processed += other.questions_processed
        self.sentences_processed += other.sentences_processed
        self.sightings += other.sightings
        return self

    def merge(self, other: 'VocabularyAggregator') -> 'VocabularyAggregator':
        """Return a new aggregator holding ``self`` then ``other``; inputs are untouched."""
        merged = VocabularyAggregator(max_contexts=min(self.max_contexts, other.max_contexts))
        merged.absorb(self)
        merged.absorb(other)
        return merged

    def most_frequent(self, limit=None, min_frequency=1) -> List[AggregateRecord]:
        ranked = sorted(
            (record for record in self._records.values() if record.frequency >= min_frequency),
            key=lambda record: (-record.frequency, record.word),
        )
        if limit is not None:
            ranked = ranked[:max(0, int(limit))]
        return ranked
