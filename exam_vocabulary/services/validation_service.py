"""Last correctness gate before entries reach Firestore."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from exam_vocabulary.errors import ValidationRejection
from exam_vocabulary.services.word_filter import sentence_contains_word

DEFAULT_MIN_DEFINITION_LENGTH = 20
MAX_REJECTION_SAMPLES = 20


@dataclass
class ValidationReport:
    valid: int = 0
    rejected: int = 0
    contexts_dropped: int = 0
    warnings: int = 0
    rejections: List[Dict[str, Any]] = field(default_factory=list)

    def record_rejection(self, rejection: ValidationRejection):
        self.rejected += 1
        if len(self.rejections) < MAX_REJECTION_SAMPLES:
            self.rejections.append({'word': rejection.word, 'reasons': list(rejection.reasons)})

    def to_dict(self):
        return {
            'valid': self.valid,
            'rejected': self.rejected,
            'contexts_dropped': self.contexts_dropped,
            'warnings': self.warnings,
            'rejections': list(self.rejections),
        }


def check_entry(entry, *, min_definition_length=DEFAULT_MIN_DEFINITION_LENGTH, require_synonyms=False):
    """Drop bad contexts from ``entry`` in place; raise :class:`ValidationRejection` if unusable.

    Returns ``(dropped_contexts, warnings)``.
    """
    reasons = []
    kept = []
    dropped = 0
    for index, sentence in enumerate(entry.contexts):
        if sentence_contains_word(sentence, entry.word):
            kept.append(sentence)
        else:
            dropped += 1
            reasons.append(f'Example {index + 1} does not contain the word "{entry.word}"')
    entry.contexts = kept

    fatal = []
    if not entry.word:
        fatal.append('Word is empty')
    if not kept:
        fatal.append('No valid example sentences')
    definition = (entry.definition or '').strip()
    if len(definition) < min_definition_length:
        fatal.append('Definition is missing or too short')

    warnings = []
    if not entry.synonyms:
        if require_synonyms:
            fatal.append('No synonyms provided')
        else:
            warnings.append('No synonyms provided')

    if fatal:
        raise ValidationRejection(entry.word, fatal + reasons)
    return dropped, warnings


def validate_entries(entries, *, min_definition_length=DEFAULT_MIN_DEFINITION_LENGTH, require_synonyms=False, logger=None):
    """Return ``(valid_entries, report)``. Rejected entries are counted, never raised."""
    report = ValidationReport()
    valid_entries = []
    for entry in entries:
        before = len(entry.contexts)
        try:
            dropped, warnings = check_entry(
                entry,
                min_definition_length=min_definition_length,
                require_synonyms=require_synonyms,
            )
        except ValidationRejection as rejection:
            report.contexts_dropped += before - len(entry.contexts)
            report.record_rejection(rejection)
            continue
        report.contexts_dropped += dropped
        report.warnings += len(warnings)
        report.valid += 1
        valid_entries.append(entry)

    if logger is not None:
        logger.info(f"✅ Validation complete: valid={report.valid} rejected={report.rejected} contexts_dropped={report.contexts_dropped}")
        for sample in report.rejections[:5]:
            logger.info(f"⚠️ Rejected '{sample['word']}': {', '.join(sample['reasons'])}")
    return valid_entries, report
