"""Value objects shared by the extraction pipeline, the writer and the read API."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple


class RunStatus:
    PENDING = 'pending'
    FETCHING = 'fetching'
    EXTRACTING = 'extracting'
    ENRICHING = 'enriching'
    VALIDATING = 'validating'
    PERSISTING = 'persisting'
    COMPLETED = 'completed'
    FAILED = 'failed'

    ORDER = (PENDING, FETCHING, EXTRACTING, ENRICHING, VALIDATING, PERSISTING, COMPLETED)
    TERMINAL = frozenset({COMPLETED, FAILED})


# Field aliases seen across question index exports, in reading order.
QUESTION_TEXT_FIELDS = (
    'question', 'question_text', 'questionText', 'actualQuestion', 'passage',
    'english_text', 'english', 'text', 'answer', 'answer_text',
    'explanation', 'explanation_text', 'translation',
)
QUESTION_SUBJECT_FIELDS = ('subject', 'subjectArea', 'theoryArea')


@dataclass(frozen=True)
class SourceQuestion:
    id: str
    text_fields: Tuple[str, ...] = ()
    subject: Optional[str] = None

    @classmethod
    def from_record(cls, record) -> Optional['SourceQuestion']:
        if not isinstance(record, dict):
            return None
        question_id = str(record.get('objectID') or record.get('id') or '').strip()
        if not question_id:
            return None
        texts = []
        seen = set()
        for key in QUESTION_TEXT_FIELDS:
            value = record.get(key)
            if not isinstance(value, str) or not value.strip():
                continue
            if value in seen:
                continue
            seen.add(value)
            texts.append(value)
        subject = None
        for key in QUESTION_SUBJECT_FIELDS:
            value = record.get(key)
            if isinstance(value, str) and value.strip():
                subject = value.strip().lower()
                break
        return cls(id=question_id, text_fields=tuple(texts), subject=subject)


@dataclass
class Enrichment:
    definition: Optional[str] = None
    synonyms: List[str] = field(default_factory=list)
    pronunciation: Optional[str] = None
    part_of_speech: Optional[str] = None
    source: str = 'Generated'


def document_subject_areas(data) -> Set[str]:
    """Subject areas of a stored document; older documents carry a single ``subjectArea``."""
    areas = {str(item) for item in (data.get('subjectAreas') or []) if item}
    legacy = data.get('subjectArea')
    if isinstance(legacy, str) and legacy.strip():
        areas.add(legacy.strip())
    return areas


@dataclass
class VocabularyEntry:
    word: str
    frequency: int = 1
    difficulty: int = 5
    contexts: List[str] = field(default_factory=list)
    source_questions: Set[str] = field(default_factory=set)
    subject_areas: Set[str] = field(default_factory=set)
    definition: Optional[str] = None
    synonyms: List[str] = field(default_factory=list)
    pronunciation: Optional[str] = None
    part_of_speech: Optional[str] = None
    rank: Optional[int] = None
    source: Optional[str] = None
    last_updated: Optional[float] = None

    def apply_enrichment(self, enrichment: Enrichment) -> None:
        self.definition = enrichment.definition
        self.synonyms = list(enrichment.synonyms)
        self.pronunciation = enrichment.pronunciation
        self.part_of_speech = enrichment.part_of_speech
        self.source = enrichment.source

    def to_document(self, run_id=None) -> Dict[str, Any]:
        doc = {
            'word': self.word,
            'frequency': int(self.frequency),
            'difficulty': int(self.difficulty),
            'contexts': list(self.contexts),
            'sourceQuestions': sorted(self.source_questions),
            'subjectAreas': sorted(self.subject_areas),
            'definition': self.definition,
            'synonyms': list(self.synonyms),
            'pronunciation': self.pronunciation,
            'partOfSpeech': self.part_of_speech,
            'rank': self.rank,
            'source': self.source,
            'lastUpdated': self.last_updated,
        }
        if run_id:
            doc['lastExtractionId'] = run_id
        return doc

    @classmethod
    def from_document(cls, data) -> 'VocabularyEntry':
        data = data or {}
        return cls(
            word=str(data.get('word', '') or '').lower(),
            frequency=int(data.get('frequency', 0) or 0),
            difficulty=int(data.get('difficulty', 5) or 5),
            contexts=[str(item) for item in (data.get('contexts') or []) if isinstance(item, str)],
            source_questions=set(data.get('sourceQuestions') or []),
            subject_areas=document_subject_areas(data),
            definition=data.get('definition'),
            synonyms=list(data.get('synonyms') or []),
            pronunciation=data.get('pronunciation'),
            part_of_speech=data.get('partOfSpeech'),
            rank=data.get('rank'),
            source=data.get('source'),
            last_updated=data.get('lastUpdated'),
        )


@dataclass
class ExtractionRun:
    id: str
    started_at: float
    status: str = RunStatus.PENDING
    finished_at: Optional[float] = None
    statistics: Dict[str, Any] = field(default_factory=dict)
    parameters: Dict[str, Any] = field(default_factory=dict)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    status_history: List[Dict[str, Any]] = field(default_factory=list)

    MAX_ERRORS = 100

    @classmethod
    def start(cls, now, parameters=None) -> 'ExtractionRun':
        run_id = f"extraction_{int(now * 1000)}_{uuid.uuid4().hex[:8]}"
        run = cls(id=run_id, started_at=now, parameters=dict(parameters or {}))
        run.status_history.append({'status': RunStatus.PENDING, 'at': now})
        return run

    @property
    def finished(self):
        return self.status in RunStatus.TERMINAL

    def transition(self, status, now):
        if self.finished:
            raise ValueError(f"Run {self.id} already finished with status {self.status}")
        self.status = status
        self.status_history.append({'status': status, 'at': now})
        if status in RunStatus.TERMINAL:
            self.finished_at = now
            self.statistics['processing_time_ms'] = int(round((now - self.started_at) * 1000))

    def record_error(self, stage, message, now, **fields):
        if len(self.errors) >= self.MAX_ERRORS:
            return
        entry = {'stage': stage, 'error': str(message)[:500], 'at': now}
        entry.update(fields)
        self.errors.append(entry)

    def to_document(self) -> Dict[str, Any]:
        return {
            'extractionId': self.id,
            'startTime': self.started_at,
            'endTime': self.finished_at,
            'status': self.status,
            'statistics': dict(self.statistics),
            'parameters': dict(self.parameters),
            'errors': list(self.errors),
            'statusHistory': list(self.status_history),
        }
