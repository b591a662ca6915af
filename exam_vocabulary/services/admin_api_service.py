"""Business logic handlers for admin vocabulary APIs."""

import sentry_sdk

from exam_vocabulary.models import RunStatus
from exam_vocabulary.repositories import extraction_runs_repo
from exam_vocabulary.services import run_state_service
from exam_vocabulary.services.corpus_service import InMemoryCorpusSource

MAX_POSTED_QUESTIONS = 5000
MAX_RESPONSE_WORDS = 100


def _require_admin(app_ctx, request):
    decoded_token = app_ctx.verify_firebase_token(request)
    if not decoded_token:
        return None, (app_ctx.jsonify({'error': 'Unauthorized'}), 401)
    if not app_ctx.is_admin_user(decoded_token):
        return None, (app_ctx.jsonify({'error': 'Forbidden'}), 403)
    return decoded_token, None


def _as_bool(value):
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in {'1', 'true', 'yes', 'on'}


def summarize_entry(entry):
    return {
        'word': entry.word,
        'frequency': entry.frequency,
        'difficulty': entry.difficulty,
        'rank': entry.rank,
        'definition': entry.definition,
        'synonyms': list(entry.synonyms),
        'examples': list(entry.contexts),
        'subjectAreas': sorted(entry.subject_areas),
        'source': entry.source,
    }


def _publisher(app_ctx):
    def publish(run):
        run_state_service.set_run(run.id, run.to_document(), runs_store=app_ctx.runs_store, lock=app_ctx.runs_lock)
    return publish


def _claim_slot(app_ctx, run):
    """Register ``run`` as the active run; returns a 409 response when another run holds the slot."""
    active_run_id = run_state_service.claim_run_slot(
        run.id,
        run.to_document(),
        runs_store=app_ctx.runs_store,
        lock=app_ctx.runs_lock,
    )
    if active_run_id is None:
        return None
    return app_ctx.jsonify({'error': 'An extraction run is already in progress', 'runId': active_run_id}), 409


def extract_from_questions(app_ctx, request):
    decoded_token, error_response = _require_admin(app_ctx, request)
    if error_response:
        return error_response

    payload = request.get_json(silent=True) or {}
    questions = payload.get('questions')
    if not isinstance(questions, list) or not questions:
        return app_ctx.jsonify({'error': 'questions must be a non-empty list'}), 400
    if len(questions) > MAX_POSTED_QUESTIONS:
        return app_ctx.jsonify({'error': f"At most {MAX_POSTED_QUESTIONS} questions per request"}), 400
    dry_run = _as_bool(payload.get('dryRun', False))
    if not dry_run and app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Vocabulary store is not configured'}), 503

    source = InMemoryCorpusSource(questions, page_size=app_ctx.pipeline_config.page_size)
    pipeline = app_ctx.build_pipeline(source, on_status=_publisher(app_ctx))
    run = pipeline.new_run(dry_run=dry_run)
    run.parameters['requestedBy'] = decoded_token.get('uid', '')
    busy_response = _claim_slot(app_ctx, run)
    if busy_response:
        return busy_response

    process_extraction_run(app_ctx, pipeline, run, False, dry_run)
    words = [summarize_entry(entry) for entry in pipeline.entries[:MAX_RESPONSE_WORDS]]
    status_code = 200 if run.status == RunStatus.COMPLETED else 500
    return app_ctx.jsonify({
        'success': run.status == RunStatus.COMPLETED,
        'dryRun': dry_run,
        'extraction': run.to_document(),
        'words': words,
    }), status_code


def process_extraction_run(app_ctx, pipeline, run, clear_collection, dry_run):
    try:
        pipeline.run(clear_collection=clear_collection, dry_run=dry_run, run=run)
    except Exception as exc:
        app_ctx.logger.exception(f"💥 Extraction {run.id} crashed")
        sentry_sdk.capture_exception(exc)
        if not run.finished:
            run.record_error(run.status, exc, app_ctx.time.time(), fatal=True)
            run.transition(RunStatus.FAILED, app_ctx.time.time())
    finally:
        run_state_service.set_run(run.id, run.to_document(), runs_store=app_ctx.runs_store, lock=app_ctx.runs_lock)
        run_state_service.prune_finished_runs(runs_store=app_ctx.runs_store, lock=app_ctx.runs_lock)


def start_extraction_run(app_ctx, request):
    decoded_token, error_response = _require_admin(app_ctx, request)
    if error_response:
        return error_response

    payload = request.get_json(silent=True) or {}
    clear_collection = _as_bool(payload.get('clearCollection', False))
    dry_run = _as_bool(payload.get('dryRun', False))
    if clear_collection and dry_run:
        return app_ctx.jsonify({'error': 'clearCollection cannot be combined with dryRun'}), 400
    if not dry_run and app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Vocabulary store is not configured'}), 503

    try:
        source = app_ctx.build_corpus_source()
    except ValueError as exc:
        app_ctx.logger.warning(f"⚠️ Corpus source unavailable: {exc}")
        return app_ctx.jsonify({'error': 'Question index is not configured'}), 503

    pipeline = app_ctx.build_pipeline(source, on_status=_publisher(app_ctx))
    run = pipeline.new_run(clear_collection=clear_collection, dry_run=dry_run)
    run.parameters['requestedBy'] = decoded_token.get('uid', '')
    busy_response = _claim_slot(app_ctx, run)
    if busy_response:
        return busy_response

    app_ctx.logger.info(f"✅ Extraction run {run.id} queued (clear_collection={clear_collection}, dry_run={dry_run})")
    try:
        thread = app_ctx.threading.Thread(
            target=process_extraction_run,
            args=(app_ctx, pipeline, run, clear_collection, dry_run),
            daemon=True,
        )
        thread.start()
    except Exception as exc:
        app_ctx.logger.error(f"❌ Could not start extraction run {run.id}: {exc}")
        sentry_sdk.capture_exception(exc)
        now = app_ctx.time.time()
        run.record_error(run.status, exc, now, fatal=True)
        run.transition(RunStatus.FAILED, now)
        run_state_service.set_run(run.id, run.to_document(), runs_store=app_ctx.runs_store, lock=app_ctx.runs_lock)
        return app_ctx.jsonify({'error': 'Could not start extraction run', 'runId': run.id}), 500
    return app_ctx.jsonify({'success': True, 'runId': run.id, 'status': run.status}), 202


def get_extraction_run(app_ctx, request, run_id):
    _, error_response = _require_admin(app_ctx, request)
    if error_response:
        return error_response

    snapshot = run_state_service.get_run_snapshot(run_id, runs_store=app_ctx.runs_store, lock=app_ctx.runs_lock)
    if snapshot is not None:
        return app_ctx.jsonify({'run': snapshot, 'live': True})
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Extraction run not found'}), 404
    try:
        doc = extraction_runs_repo.get_doc(app_ctx.db, app_ctx.pipeline_config.runs_collection, run_id)
    except Exception as exc:
        app_ctx.logger.error(f"❌ Could not load extraction run {run_id}: {exc}")
        return app_ctx.jsonify({'error': 'Could not load extraction run'}), 500
    if not doc.exists:
        return app_ctx.jsonify({'error': 'Extraction run not found'}), 404
    return app_ctx.jsonify({'run': doc.to_dict() or {}, 'live': False})
