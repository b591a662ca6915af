"""Shared Firestore query helpers.

Uses keyword-based filters to avoid positional-argument warnings in newer
Firestore SDK versions. Falls back to positional style for simple test doubles
that do not support keyword filters.
"""

from google.cloud.firestore_v1.base_query import FieldFilter


def apply_where(query, field_path, op_string, value):
    try:
        return query.where(filter=FieldFilter(field_path, op_string, value))
    except TypeError:
        return query.where(field_path, op_string, value)


def apply_limit(query, limit):
    if isinstance(limit, int) and limit > 0:
        return query.limit(limit)
    return query


def chunked(items, size):
    """Yield consecutive slices of ``items`` holding at most ``size`` elements."""
    items = list(items)
    size = max(1, int(size))
    for start in range(0, len(items), size):
        yield items[start:start + size]
