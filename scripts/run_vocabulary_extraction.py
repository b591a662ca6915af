#!/usr/bin/env python3
"""Run one vocabulary extraction from the command line.

Usage:
  ./venv/bin/python scripts/run_vocabulary_extraction.py                 # dry run over the search index
  ./venv/bin/python scripts/run_vocabulary_extraction.py --apply
  ./venv/bin/python scripts/run_vocabulary_extraction.py --input questions.json --apply
"""

import argparse
import json
import os

from exam_vocabulary.config import load_pipeline_config
from exam_vocabulary.extensions import init_firestore
from exam_vocabulary.logging_config import configure_logging
from exam_vocabulary.models import RunStatus
from exam_vocabulary.services.corpus_service import AlgoliaCorpusSource, InMemoryCorpusSource
from exam_vocabulary.services.enrichment_service import DictionaryClient
from exam_vocabulary.services.pipeline_service import ExtractionPipeline


def load_questions(path):
    with open(path, 'r', encoding='utf-8') as handle:
        data = json.load(handle)
    if isinstance(data, dict):
        data = data.get('questions') or data.get('hits') or []
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of question records.")
    return data


def build_source(args, config):
    if args.input:
        return InMemoryCorpusSource(load_questions(args.input), page_size=args.page_size or config.page_size)
    return AlgoliaCorpusSource(
        config.algolia_app_id,
        config.algolia_api_key,
        config.algolia_index,
        page_size=args.page_size or config.page_size,
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Extract, enrich and store exam vocabulary.")
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Write to Firestore. Without this flag, the script runs in dry-run mode.",
    )
    parser.add_argument(
        "--clear-collection",
        action="store_true",
        help="Delete every stored vocabulary document before writing. Requires --apply.",
    )
    parser.add_argument("--input", default="", help="JSON file of question records to use instead of the search index")
    parser.add_argument("--page-size", type=int, default=0, help="Records per corpus page")
    args = parser.parse_args(argv)

    if args.clear_collection and not args.apply:
        parser.error("--clear-collection requires --apply")

    configure_logging(os.getenv('LOG_LEVEL', 'INFO'))
    config = load_pipeline_config()
    db = None
    if args.apply:
        db, init_error = init_firestore()
        if db is None:
            print(f"Firestore is not available: {init_error}")
            return 1

    try:
        source = build_source(args, config)
    except (OSError, ValueError) as exc:
        print(f"Could not open corpus: {exc}")
        return 1

    pipeline = ExtractionPipeline(
        config,
        source=source,
        dictionary_client=DictionaryClient(config.dictionary_api_url, timeout=config.dictionary_timeout_seconds),
        db=db,
    )
    run = pipeline.run(clear_collection=args.clear_collection, dry_run=not args.apply)

    mode = "APPLY" if args.apply else "DRY-RUN"
    stats = run.statistics
    print(
        f"[{mode}] {run.id} status={run.status} questions={stats.get('questions_processed', 0)} "
        f"unique_words={stats.get('unique_words', 0)} valid={stats.get('valid_words', 0)} "
        f"stored={stats.get('stored_words', 0)}"
    )
    for entry in pipeline.entries[:20]:
        print(f"  {entry.rank:>4}. {entry.word:<20} freq={entry.frequency:<4} difficulty={entry.difficulty}")
    if not args.apply:
        print("No changes were written. Re-run with --apply to persist.")
    if run.status != RunStatus.COMPLETED:
        for error in run.errors:
            print(f"  error [{error.get('stage')}]: {error.get('error')}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
