"""Batched Firestore writes for vocabulary entries and run audit records.

Writes are merge-by-word: an existing document has its counts summed and its
sets unioned instead of being overwritten. Each batch reads and writes inside
one Firestore transaction, so overlapping runs cannot lose increments. A crash
between batches leaves the earlier batches in place, and a re-run merges on
top of them.
"""

import logging
import time
from dataclasses import dataclass

from firebase_admin import firestore

from exam_vocabulary.errors import PersistenceBatchFailure
from exam_vocabulary.logging_config import log_event
from exam_vocabulary.models import VocabularyEntry
from exam_vocabulary.repositories import extraction_runs_repo, vocabulary_repo
from exam_vocabulary.repositories.query_utils import chunked
from exam_vocabulary.services.difficulty_service import score_difficulty
from exam_vocabulary.services.enrichment_service import FALLBACK_SOURCE
from exam_vocabulary.services.frequency_aggregator import merge_contexts
from exam_vocabulary.services.word_filter import sentence_contains_word

logger = logging.getLogger(__name__)


@dataclass
class PersistResult:
    total_batches: int = 0
    committed_batches: int = 0
    inserted: int = 0
    merged: int = 0

    @property
    def written(self):
        return self.inserted + self.merged


def _pick_enrichment(stored, entry):
    """Fresh dictionary data wins; a generated fallback never replaces real dictionary data."""
    fresh_is_fallback = entry.source == FALLBACK_SOURCE
    stored_is_real = bool(stored.definition) and stored.source not in (None, FALLBACK_SOURCE)
    if entry.definition and not (fresh_is_fallback and stored_is_real):
        return entry
    return stored


def merge_stored_document(existing, entry, *, max_contexts, now, weights=None, run_id=None):
    """Combine a stored vocabulary document with a freshly extracted entry."""
    stored = VocabularyEntry.from_document(existing)
    word = entry.word
    frequency = max(0, stored.frequency) + entry.frequency
    subject_areas = set(stored.subject_areas) | set(entry.subject_areas)
    stored_contexts = [sentence for sentence in stored.contexts if sentence_contains_word(sentence, word)]
    enrichment = _pick_enrichment(stored, entry)

    merged = VocabularyEntry(
        word=word,
        frequency=frequency,
        difficulty=score_difficulty(word, frequency, subject_areas, weights),
        contexts=merge_contexts(stored_contexts, entry.contexts, max_contexts),
        source_questions=set(stored.source_questions) | set(entry.source_questions),
        subject_areas=subject_areas,
        definition=enrichment.definition,
        synonyms=list(enrichment.synonyms),
        pronunciation=enrichment.pronunciation,
        part_of_speech=enrichment.part_of_speech,
        rank=entry.rank if entry.rank is not None else stored.rank,
        source=enrichment.source,
        last_updated=now,
    )
    document = dict(existing or {})
    document.update(merged.to_document(run_id=run_id))
    return document


def build_fresh_document(entry, *, now, run_id=None):
    entry.last_updated = now
    return entry.to_document(run_id=run_id)


def _commit_batch(db, entries, *, config, now, run_id, firestore_module):
    collection_name = config.vocabulary_collection
    refs = {entry.word: vocabulary_repo.doc_ref(db, collection_name, entry.word) for entry in entries}
    transaction = db.transaction()

    @firestore_module.transactional
    def _txn(txn):
        existing = vocabulary_repo.get_docs(db, collection_name, list(refs), transaction=txn)
        inserted = 0
        merged = 0
        for entry in entries:
            snapshot = existing.get(entry.word)
            if snapshot is not None and snapshot.exists:
                document = merge_stored_document(
                    snapshot.to_dict() or {},
                    entry,
                    max_contexts=config.max_contexts,
                    now=now,
                    weights=config.subject_weights,
                    run_id=run_id,
                )
                merged += 1
            else:
                document = build_fresh_document(entry, now=now, run_id=run_id)
                inserted += 1
            txn.set(refs[entry.word], document)
        return inserted, merged

    return _txn(transaction)


def persist_entries(db, entries, *, config, run_id=None, time_module=time, sleep_func=time.sleep,
                    firestore_module=firestore):
    """Upsert ``entries`` in batches, retrying each failed commit a bounded number of times.

    Raises :class:`PersistenceBatchFailure` with the number of batches already
    committed once a batch exhausts ``config.write_max_retries``.
    """
    batches = list(chunked(entries, config.write_batch_size))
    result = PersistResult(total_batches=len(batches))
    for index, batch_entries in enumerate(batches):
        attempt = 0
        while True:
            try:
                inserted, merged = _commit_batch(
                    db,
                    batch_entries,
                    config=config,
                    now=time_module.time(),
                    run_id=run_id,
                    firestore_module=firestore_module,
                )
                break
            except Exception as exc:
                attempt += 1
                if attempt > config.write_max_retries:
                    logger.error(f"❌ Batch {index + 1}/{len(batches)} failed after {attempt} attempts: {exc}")
                    raise PersistenceBatchFailure(
                        f"Batch {index + 1} of {len(batches)} could not be committed: {exc}",
                        committed_batches=result.committed_batches,
                        batch_index=index,
                    ) from exc
                logger.warning(f"⚠️ Batch {index + 1}/{len(batches)} commit failed (attempt {attempt}), retrying: {exc}")
                sleep_func(config.retry_backoff_seconds * attempt)
        result.committed_batches += 1
        result.inserted += inserted
        result.merged += merged
        log_event(
            logger,
            logging.INFO,
            'vocabulary_batch_committed',
            run_id=run_id,
            batch=index + 1,
            batches=len(batches),
            inserted=inserted,
            merged=merged,
        )
    return result


def clear_collection(db, collection_name, *, batch_size=500):
    """Delete every document in ``collection_name`` in batches. Destructive; callers opt in."""
    deleted = 0
    while True:
        refs = vocabulary_repo.list_doc_refs(db, collection_name, batch_size)
        if not refs:
            break
        batch = db.batch()
        for ref in refs:
            batch.delete(ref)
        batch.commit()
        deleted += len(refs)
        logger.info(f"🗑️ Deleted {len(refs)} documents from {collection_name} ({deleted} so far)")
    return deleted


def write_extraction_run(db, collection_name, run):
    return extraction_runs_repo.set_doc(db, collection_name, run.id, run.to_document())
