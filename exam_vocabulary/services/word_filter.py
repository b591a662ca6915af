"""Candidate word selection for a single normalized sentence."""

import re

from exam_vocabulary.services import word_lists

_ALPHA_RE = re.compile(r'^[a-z]+$')
_EDGE_NON_LETTERS_RE = re.compile(r'^[^A-Za-z]+|[^A-Za-z]+$')
_DIGIT_RE = re.compile(r'\d')
_NON_LETTERS_RE = re.compile(r'[^A-Za-z]+')
_CLITIC_RE = re.compile(r"(?:n['’]t|['’](?:s|d|m|ll|re|ve))$", re.IGNORECASE)


def _is_common(word, common_words):
    if word in common_words:
        return True
    # Trivial plural forms of everyday words ("ideas", "students").
    if word.endswith('es') and word[:-2] in common_words:
        return True
    if word.endswith('s') and word[:-1] in common_words:
        return True
    return False


def is_candidate_token(token, *, stop_words, min_length=3, max_length=20):
    """Base filter: lowercase alphabetic token inside the length band, not a stop word or URL piece."""
    if not token:
        return False
    if any(fragment in token for fragment in word_lists.URL_FRAGMENTS):
        return False
    if not _ALPHA_RE.match(token):
        return False
    if len(token) < min_length or len(token) > max_length:
        return False
    return token not in stop_words


def is_advanced_word(word, *, common_words, min_length=5):
    """Intermediate/advanced bar applied on top of the base filter."""
    if _is_common(word, common_words):
        return False
    for indicator in word_lists.ACADEMIC_INDICATORS:
        if indicator in word:
            return True
    return len(word) >= min_length


def split_token(raw):
    """Alphabetic pieces of one whitespace-delimited token.

    Clitics such as possessive ``'s`` are dropped, then internal hyphens and
    apostrophes split the rest: "paradigm-shifting" gives ``paradigm`` and
    ``shifting``.
    """
    token = _EDGE_NON_LETTERS_RE.sub('', raw)
    token = _CLITIC_RE.sub('', token)
    return [piece for piece in _NON_LETTERS_RE.split(token) if piece]


def extract_candidates(sentence, config):
    """Return ``(word, sentence)`` pairs, deduplicated per sentence in first-seen order.

    ``config`` is a :class:`~exam_vocabulary.config.PipelineConfig`; only its
    filter thresholds are read.
    """
    if not sentence:
        return []
    pairs = []
    seen = set()
    for raw in sentence.split():
        if _DIGIT_RE.search(raw):
            continue
        if any(fragment in raw.lower() for fragment in word_lists.URL_FRAGMENTS):
            continue
        for token in split_token(raw):
            if config.advanced_only and len(token) > 1 and token.isupper():
                continue
            word = token.lower()
            if word in seen:
                continue
            if not is_candidate_token(
                word,
                stop_words=config.stop_words,
                min_length=config.min_word_length,
                max_length=config.max_word_length,
            ):
                continue
            if config.advanced_only and not is_advanced_word(
                word,
                common_words=config.common_words,
                min_length=config.advanced_min_length,
            ):
                continue
            seen.add(word)
            pairs.append((word, sentence))
    return pairs


def sentence_contains_word(sentence, word):
    """Whole-token, case-insensitive containment check."""
    if not sentence or not word:
        return False
    pattern = r'(?<![A-Za-z])' + re.escape(word) + r'(?![A-Za-z])'
    return re.search(pattern, sentence, flags=re.IGNORECASE) is not None
