from exam_vocabulary.config import PipelineConfig
from exam_vocabulary.services.word_filter import (
    extract_candidates,
    is_advanced_word,
    is_candidate_token,
    sentence_contains_word,
    split_token,
)
from exam_vocabulary.services.word_lists import COMMON_WORDS, STOP_WORDS


def _words(sentence, config=None):
    return [word for word, _ in extract_candidates(sentence, config or PipelineConfig())]


def test_stop_words_are_never_candidates():
    sentence = "The and in the AND In and the in"
    basic = PipelineConfig(advanced_only=False)

    assert _words(sentence) == []
    assert _words(sentence, basic) == []


def test_candidate_token_rules():
    assert is_candidate_token("paradigm", stop_words=STOP_WORDS)
    assert not is_candidate_token("the", stop_words=STOP_WORDS)
    assert not is_candidate_token("ab", stop_words=STOP_WORDS)
    assert not is_candidate_token("a" * 21, stop_words=STOP_WORDS)
    assert not is_candidate_token("https", stop_words=STOP_WORDS)
    assert not is_candidate_token("wwwexample", stop_words=STOP_WORDS)


def test_advanced_word_bar():
    assert is_advanced_word("elaborate", common_words=COMMON_WORDS)
    assert is_advanced_word("biome", common_words=COMMON_WORDS)
    assert not is_advanced_word("ideas", common_words=COMMON_WORDS)
    assert not is_advanced_word("students", common_words=COMMON_WORDS)
    assert not is_advanced_word("calm", common_words=COMMON_WORDS)


def test_extract_candidates_skips_digits_acronyms_and_duplicates():
    sentence = "NASA launched 3D satellites; satellites orbit the planet in 2020s"

    assert _words(sentence) == ["launched", "satellites", "orbit", "planet"]


def test_extract_candidates_pairs_each_word_with_its_sentence():
    sentence = "The elaborate synthesis of ideas fascinated the students"

    pairs = extract_candidates(sentence, PipelineConfig())

    assert [word for word, _ in pairs] == ["elaborate", "synthesis", "fascinated"]
    assert all(origin == sentence for _, origin in pairs)


def test_hyphenated_and_possessive_tokens_are_split():
    assert split_token("paradigm-shifting") == ["paradigm", "shifting"]
    assert split_token("committee's,") == ["committee"]
    assert split_token("students'") == ["students"]
    assert split_token("doesn't") == ["does"]
    assert split_token("--") == []


def test_extract_candidates_keeps_parts_of_compound_words():
    words = _words("The paradigm-shifting hypothesis intrigued biologists")

    assert words[0] == "paradigm"
    assert {"hypothesis", "intrigued", "biologists"} <= set(words)


def test_extract_candidates_drops_possessive_suffix():
    words = _words("The committee's verdict surprised the delegation")

    assert "committee" in words
    assert not {"committees", "s"} & set(words)


def test_url_tokens_are_skipped_whole():
    assert _words("Consult https://www.example-journal.org/abstract thoroughly") == ["consult", "thoroughly"]


def test_sentence_contains_word_is_whole_token_and_case_insensitive():
    assert sentence_contains_word("Synthesis matters here", "synthesis")
    assert sentence_contains_word("a well-known synthesis.", "synthesis")
    assert not sentence_contains_word("photosynthesis matters", "synthesis")
    assert not sentence_contains_word("", "synthesis")
