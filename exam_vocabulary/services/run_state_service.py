"""Thread-safe in-memory extraction run state helpers."""

from exam_vocabulary.models import RunStatus

MAX_FINISHED_RUNS = 20


def get_run_snapshot(run_id, *, runs_store, lock):
    with lock:
        run = runs_store.get(run_id)
        if not isinstance(run, dict):
            return None
        return dict(run)


def set_run(run_id, value, *, runs_store, lock):
    with lock:
        runs_store[run_id] = value
        return dict(value) if isinstance(value, dict) else value


def _active_run_id(runs_store):
    for run_id, run in runs_store.items():
        if isinstance(run, dict) and run.get('status') not in RunStatus.TERMINAL:
            return run_id
    return None


def claim_run_slot(run_id, value, *, runs_store, lock):
    """Register ``run_id`` unless another run is still active; returns the blocking id or None."""
    with lock:
        active = _active_run_id(runs_store)
        if active is not None:
            return active
        runs_store[run_id] = value
        return None


def prune_finished_runs(*, runs_store, lock, keep=MAX_FINISHED_RUNS):
    with lock:
        finished = [
            (run.get('startTime') or 0, run_id)
            for run_id, run in runs_store.items()
            if isinstance(run, dict) and run.get('status') in RunStatus.TERMINAL
        ]
        finished.sort()
        removed = 0
        for _, run_id in finished[:max(0, len(finished) - keep)]:
            runs_store.pop(run_id, None)
            removed += 1
        return removed
