from exam_vocabulary.services.difficulty_service import MAX_DIFFICULTY, MIN_DIFFICULTY, score_difficulty


def test_score_is_pure_and_bounded():
    first = score_difficulty("synthesis", 1, [])
    second = score_difficulty("synthesis", 1, [])

    assert first == second == 9
    assert MIN_DIFFICULTY <= first <= MAX_DIFFICULTY


def test_frequent_short_words_score_low():
    # base 5, short -1, very frequent -2
    assert score_difficulty("calm", 25) == 2


def test_score_clamps_to_upper_bound():
    assert score_difficulty("psychophysiological", 1, ["science"]) == MAX_DIFFICULTY


def test_subject_area_uses_largest_weight():
    base = score_difficulty("orbit", 7)

    assert score_difficulty("orbit", 7, ["science"]) == base + 1
    assert score_difficulty("orbit", 7, ["daily_life"]) == base - 1
    assert score_difficulty("orbit", 7, ["daily_life", "science"]) == base + 1
    assert score_difficulty("orbit", 7, ["unknown"]) == base


def test_custom_weights_override_defaults():
    assert score_difficulty("orbit", 7, ["law"], weights={"law": 2}) == score_difficulty("orbit", 7) + 2
