"""Deterministic 1-10 difficulty estimate for a vocabulary word."""

from exam_vocabulary.services import word_lists

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10
BASE_DIFFICULTY = 5


def _length_adjustment(length):
    if length > 12:
        return 3
    if length >= 11:
        return 2
    if length >= 8:
        return 1
    if length < 5:
        return -1
    return 0


def _frequency_adjustment(frequency):
    if frequency <= 1:
        return 3
    if frequency <= 2:
        return 2
    if frequency <= 5:
        return 1
    if frequency >= 20:
        return -2
    if frequency >= 10:
        return -1
    return 0


def _morphology_adjustment(word):
    if any(root in word for root in word_lists.ACADEMIC_ROOTS):
        return 2
    if any(affix in word for affix in word_lists.ADVANCED_AFFIXES):
        return 1
    return 0


def _rare_pattern_adjustment(word):
    return sum(1 for pattern in word_lists.RARE_PATTERNS if pattern in word)


def _subject_adjustment(subject_areas, weights):
    matched = [int(weights[area]) for area in (subject_areas or ()) if area in weights]
    if not matched:
        return 0
    return max(matched)


def score_difficulty(word, frequency, subject_areas=(), weights=None):
    """Score ``word`` from its length, corpus frequency, morphology and subject areas.

    Pure: the same ``(word, frequency, subject_areas, weights)`` always yields
    the same integer in ``[1, 10]``.
    """
    word = str(word or '').lower()
    if weights is None:
        weights = word_lists.SUBJECT_AREA_WEIGHTS
    difficulty = BASE_DIFFICULTY
    difficulty += _length_adjustment(len(word))
    difficulty += _frequency_adjustment(int(frequency or 0))
    difficulty += _morphology_adjustment(word)
    difficulty += _rare_pattern_adjustment(word)
    difficulty += _subject_adjustment(subject_areas, weights)
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, difficulty))
