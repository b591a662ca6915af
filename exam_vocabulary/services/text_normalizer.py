"""Turns one free-text question field into clean English sentence candidates."""

import html
import re
import unicodedata

DEFAULT_MIN_SENTENCE_LENGTH = 20

_TAG_RE = re.compile(r'<[^>]+>')
_PARENTHETICAL_RE = re.compile(r'\([^)]*\)|\[[^\]]*\]')
# Everything outside the Latin target script, except sentence terminators,
# apostrophes and hyphens, becomes a space.
_NON_TARGET_RE = re.compile(r"[^A-Za-z0-9\s.!?'\-]")
_WHITESPACE_RE = re.compile(r'\s+')
_SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')


def _fold_accents(text):
    decomposed = unicodedata.normalize('NFKD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text):
    """Strip markup, parentheticals and non-target characters; collapse whitespace."""
    if not isinstance(text, str) or not text:
        return ''
    cleaned = html.unescape(text)
    cleaned = _TAG_RE.sub(' ', cleaned)
    cleaned = _PARENTHETICAL_RE.sub(' ', cleaned)
    cleaned = _fold_accents(cleaned)
    cleaned = _NON_TARGET_RE.sub(' ', cleaned)
    return _WHITESPACE_RE.sub(' ', cleaned).strip()


def split_sentences(text, min_length=DEFAULT_MIN_SENTENCE_LENGTH):
    """Return the ordered sentence units of ``text`` longer than ``min_length`` chars."""
    normalized = normalize_text(text)
    if not normalized:
        return []
    sentences = []
    for unit in _SENTENCE_SPLIT_RE.split(normalized):
        unit = unit.strip(" '-")
        if len(unit) > min_length:
            sentences.append(unit)
    return sentences
