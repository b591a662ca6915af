"""End-to-end vocabulary extraction run.

Stages run in order ``fetching -> extracting -> enriching -> validating ->
persisting -> completed``. Any unrecoverable error moves the run to ``failed``;
batches already committed to Firestore stay committed.
"""

import logging
import time

import sentry_sdk
from firebase_admin import firestore

from exam_vocabulary.errors import PersistenceBatchFailure, SourceUnavailable
from exam_vocabulary.logging_config import log_event
from exam_vocabulary.models import ExtractionRun, RunStatus, VocabularyEntry
from exam_vocabulary.services import persistence_service
from exam_vocabulary.services.corpus_service import iter_corpus_pages
from exam_vocabulary.services.difficulty_service import score_difficulty
from exam_vocabulary.services.enrichment_service import enrich_words
from exam_vocabulary.services.frequency_aggregator import VocabularyAggregator
from exam_vocabulary.services.validation_service import validate_entries

logger = logging.getLogger(__name__)


def build_entries(records, config):
    """Turn ranked aggregate records into scored :class:`VocabularyEntry` objects."""
    entries = []
    for rank, record in enumerate(records, start=1):
        entries.append(VocabularyEntry(
            word=record.word,
            frequency=record.frequency,
            difficulty=score_difficulty(record.word, record.frequency, record.subject_areas, config.subject_weights),
            contexts=list(record.contexts),
            source_questions=set(record.source_questions),
            subject_areas=set(record.subject_areas),
            rank=rank,
        ))
    return entries


class ExtractionPipeline:
    def __init__(self, config, *, source, dictionary_client, db=None, time_module=time, sleep_func=time.sleep,
                 on_status=None, firestore_module=firestore):
        self.config = config
        self.source = source
        self.dictionary_client = dictionary_client
        self.db = db
        self.time_module = time_module
        self.sleep_func = sleep_func
        self.on_status = on_status
        self.firestore_module = firestore_module
        self.aggregator = None
        self.entries = []
        self.validation_report = None

    def _transition(self, run, status):
        run.transition(status, self.time_module.time())
        log_event(logger, logging.INFO, 'extraction_stage', run_id=run.id, status=status)
        if self.on_status is not None:
            self.on_status(run)

    def fetch_and_aggregate(self, run):
        aggregator = VocabularyAggregator(max_contexts=self.config.max_contexts)
        pages = 0
        skipped = 0
        for page in iter_corpus_pages(
            self.source,
            max_retries=self.config.source_max_retries,
            backoff_seconds=self.config.retry_backoff_seconds,
            sleep_func=self.sleep_func,
        ):
            page_aggregator = VocabularyAggregator(max_contexts=self.config.max_contexts)
            page_aggregator.add_questions(page.questions, self.config)
            aggregator.absorb(page_aggregator)
            pages += 1
            skipped += page.skipped
            run.statistics.update({
                'pages_fetched': pages,
                'questions_processed': aggregator.questions_processed,
                'unique_words': len(aggregator),
            })
        run.statistics.update({
            'records_skipped': skipped,
            'sentences_processed': aggregator.sentences_processed,
            'total_sightings': aggregator.sightings,
        })
        return aggregator

    def new_run(self, *, clear_collection=False, dry_run=False) -> ExtractionRun:
        parameters = self.config.as_parameters()
        parameters.update({'clear_collection': bool(clear_collection), 'dry_run': bool(dry_run)})
        return ExtractionRun.start(self.time_module.time(), parameters=parameters)

    def run(self, *, clear_collection=False, dry_run=False, run=None) -> ExtractionRun:
        """Execute every stage and return the finished run; pass ``run`` to reuse a registered one."""
        if clear_collection and dry_run:
            raise ValueError('clear_collection cannot be combined with dry_run.')
        if not dry_run and self.db is None:
            raise ValueError('A Firestore client is required unless dry_run is set.')

        if run is None:
            run = self.new_run(clear_collection=clear_collection, dry_run=dry_run)
        run.statistics.update({'committed_batches': 0, 'stored_words': 0})
        logger.info(f"🚀 Starting vocabulary extraction {run.id} (dry_run={dry_run}, clear_collection={clear_collection})")

        stage = RunStatus.FETCHING
        try:
            self._transition(run, RunStatus.FETCHING)
            self.aggregator = self.fetch_and_aggregate(run)

            stage = RunStatus.EXTRACTING
            self._transition(run, stage)
            candidates = self.aggregator.most_frequent(
                limit=self.config.enrich_top_n,
                min_frequency=self.config.min_frequency,
            )
            entries = build_entries(candidates, self.config)
            run.statistics['candidate_words'] = len(entries)
            run.statistics['top_frequency'] = entries[0].frequency if entries else 0

            stage = RunStatus.ENRICHING
            self._transition(run, stage)
            enrichments, fallbacks = enrich_words(
                [entry.word for entry in entries],
                client=self.dictionary_client,
                concurrency=self.config.enrich_concurrency,
                batch_delay_seconds=self.config.enrich_batch_delay_seconds,
                sleep_func=self.sleep_func,
            )
            for entry in entries:
                enrichment = enrichments.get(entry.word)
                if enrichment is not None:
                    entry.apply_enrichment(enrichment)
            run.statistics['enriched_words'] = len(enrichments)
            run.statistics['enrichment_fallbacks'] = len(fallbacks)

            stage = RunStatus.VALIDATING
            self._transition(run, stage)
            self.entries, self.validation_report = validate_entries(
                entries,
                min_definition_length=self.config.min_definition_length,
                require_synonyms=self.config.require_synonyms,
                logger=logger,
            )
            run.statistics['validation'] = self.validation_report.to_dict()
            run.statistics['valid_words'] = self.validation_report.valid
            run.statistics['rejected_words'] = self.validation_report.rejected

            stage = RunStatus.PERSISTING
            self._transition(run, stage)
            if dry_run:
                logger.info(f"📝 Dry run: {len(self.entries)} validated words were not written.")
            else:
                if clear_collection:
                    run.statistics['deleted_words'] = persistence_service.clear_collection(
                        self.db,
                        self.config.vocabulary_collection,
                        batch_size=self.config.write_batch_size,
                    )
                result = persistence_service.persist_entries(
                    self.db,
                    self.entries,
                    config=self.config,
                    run_id=run.id,
                    time_module=self.time_module,
                    sleep_func=self.sleep_func,
                    firestore_module=self.firestore_module,
                )
                run.statistics.update({
                    'committed_batches': result.committed_batches,
                    'stored_words': result.written,
                    'inserted_words': result.inserted,
                    'merged_words': result.merged,
                })

            self._transition(run, RunStatus.COMPLETED)
        except SourceUnavailable as exc:
            logger.error(f"❌ Corpus unavailable during {run.id}: {exc}")
            self._fail(run, stage, exc, page=exc.page)
        except PersistenceBatchFailure as exc:
            logger.error(f"❌ Persistence failed during {run.id}: {exc}")
            run.statistics['committed_batches'] = exc.committed_batches
            self._fail(run, stage, exc, batch=exc.batch_index)
        except Exception as exc:
            logger.exception(f"💥 Unexpected failure during {run.id} at stage {stage}")
            sentry_sdk.capture_exception(exc)
            self._fail(run, stage, exc)

        if not dry_run:
            self._write_audit_record(run)
        log_event(logger, logging.INFO, 'extraction_finished', run_id=run.id, status=run.status, statistics=run.statistics)
        return run

    def _fail(self, run, stage, exc, **fields):
        run.record_error(stage, exc, self.time_module.time(), fatal=True, **fields)
        if not run.finished:
            self._transition(run, RunStatus.FAILED)

    def _write_audit_record(self, run):
        try:
            persistence_service.write_extraction_run(self.db, self.config.runs_collection, run)
        except Exception as exc:
            logger.error(f"❌ Could not store audit record for {run.id}: {exc}")
            sentry_sdk.capture_exception(exc)
