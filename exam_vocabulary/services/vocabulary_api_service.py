"""Business logic handlers for the public vocabulary read API."""

from datetime import datetime, timezone

from exam_vocabulary.models import document_subject_areas
from exam_vocabulary.repositories import vocabulary_repo

DEFAULT_LIMIT = 20
MAX_LIMIT = 100
MAX_SCAN_DOCS = 1000
SORT_OPTIONS = ('frequency', 'alphabetical', 'difficulty', 'rank', 'recent')


def _parse_int(value, default):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _timestamp(value):
    """Seconds since the epoch for numeric, datetime-like or ISO-8601 ``lastUpdated`` values."""
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return 0.0
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
    if hasattr(value, 'timestamp'):
        try:
            return float(value.timestamp())
        except Exception:
            return 0.0
    return 0.0


def sort_vocabulary(items, sort_by):
    if sort_by == 'alphabetical':
        return sorted(items, key=lambda item: item['word'])
    if sort_by == 'difficulty':
        return sorted(items, key=lambda item: (-(item.get('difficulty') or 0), item['word']))
    if sort_by == 'rank':
        # Unranked words go last.
        return sorted(items, key=lambda item: (item.get('rank') is None, item.get('rank') or 0, item['word']))
    if sort_by == 'recent':
        return sorted(items, key=lambda item: (-_timestamp(item.get('lastUpdated')), item['word']))
    return sorted(items, key=lambda item: (-(item.get('frequency') or 0), item['word']))


def serialize_vocabulary_doc(doc):
    data = doc.to_dict() or {}
    return {
        'word': str(data.get('word') or doc.id),
        'definition': data.get('definition'),
        'frequency': int(data.get('frequency', 0) or 0),
        'difficulty': data.get('difficulty'),
        'synonyms': list(data.get('synonyms') or []),
        'examples': list(data.get('contexts') or []),
        'subjectAreas': sorted(document_subject_areas(data)),
        'partOfSpeech': data.get('partOfSpeech'),
        'pronunciation': data.get('pronunciation'),
        'rank': data.get('rank'),
        'lastUpdated': data.get('lastUpdated'),
    }


def fetch_vocabulary(app_ctx, request):
    if app_ctx.db is None:
        return app_ctx.jsonify({'error': 'Vocabulary store is not configured'}), 503

    limit = min(max(_parse_int(request.args.get('limit'), DEFAULT_LIMIT), 1), MAX_LIMIT)
    offset = max(_parse_int(request.args.get('offset'), 0), 0)
    sort_by = str(request.args.get('sortBy', 'frequency') or 'frequency').strip().lower()
    if sort_by not in SORT_OPTIONS:
        return app_ctx.jsonify({'error': f"Invalid sortBy. Use one of: {', '.join(SORT_OPTIONS)}"}), 400
    subject_area = str(request.args.get('subjectArea', '') or '').strip().lower()
    if subject_area == 'all':
        subject_area = ''
    min_frequency = max(_parse_int(request.args.get('minFrequency'), 1), 1)
    search = str(request.args.get('search', '') or '').strip().lower()

    try:
        docs = vocabulary_repo.query_entries(
            app_ctx.db,
            app_ctx.pipeline_config.vocabulary_collection,
            subject_area=subject_area or None,
            min_frequency=min_frequency,
            limit=MAX_SCAN_DOCS,
        )
    except Exception as exc:
        app_ctx.logger.error(f"❌ Error fetching vocabulary: {exc}")
        return app_ctx.jsonify({'error': 'Server error fetching vocabulary'}), 500

    items = [serialize_vocabulary_doc(doc) for doc in docs]
    if search:
        items = [item for item in items if search in item['word'].lower()]
    items = sort_vocabulary(items, sort_by)

    total = len(items)
    page = items[offset:offset + limit]
    return app_ctx.jsonify({
        'success': True,
        'data': page,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'hasMore': offset + limit < total,
        },
        'filters': {
            'sortBy': sort_by,
            'subjectArea': subject_area or 'all',
            'minFrequency': min_frequency,
            'search': search or None,
        },
    })
