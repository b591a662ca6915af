from exam_vocabulary.repositories.query_utils import apply_limit, apply_where, chunked


class _FilterCapableQuery:
    def __init__(self):
        self.kwargs = None

    def where(self, *args, **kwargs):
        self.kwargs = kwargs
        return self


class _PositionalOnlyQuery:
    def __init__(self):
        self.args = None
        self.limit_value = None

    def where(self, *args, **kwargs):
        if "filter" in kwargs:
            raise TypeError("filter keyword unsupported")
        self.args = args
        return self

    def limit(self, value):
        self.limit_value = value
        return self


def test_apply_where_prefers_field_filter_keyword():
    query = _FilterCapableQuery()

    result = apply_where(query, "subjectAreas", "array_contains", "science")

    assert result is query
    assert query.kwargs is not None
    assert "filter" in query.kwargs


def test_apply_where_falls_back_to_positional_for_simple_test_doubles():
    query = _PositionalOnlyQuery()

    result = apply_where(query, "frequency", ">=", 3)

    assert result is query
    assert query.args == ("frequency", ">=", 3)


def test_apply_limit_ignores_missing_or_non_positive_limits():
    query = _PositionalOnlyQuery()

    assert apply_limit(query, None) is query
    assert query.limit_value is None
    apply_limit(query, 0)
    assert query.limit_value is None
    apply_limit(query, 25)
    assert query.limit_value == 25


def test_chunked_respects_batch_size():
    assert list(chunked(range(5), 2)) == [[0, 1], [2, 3], [4]]
    assert list(chunked([], 500)) == []
