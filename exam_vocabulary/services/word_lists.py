"""Static word lists used by the word filter and the difficulty scorer."""

from __future__ import annotations

from typing import FrozenSet, Tuple


STOP_WORDS: FrozenSet[str] = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
    'is', 'are', 'was', 'were', 'be', 'been', 'being', 'have', 'has', 'had', 'do', 'does', 'did',
    'will', 'would', 'could', 'should', 'may', 'might', 'can', 'must', 'shall',
    'this', 'that', 'these', 'those', 'it', 'its', 'he', 'she', 'they', 'we', 'you', 'i',
    'me', 'him', 'her', 'them', 'us', 'my', 'your', 'his', 'their', 'our',
    'what', 'when', 'where', 'why', 'how', 'which', 'who', 'whom', 'whose',
    'not', 'no', 'yes', 'so', 'very', 'much', 'many', 'more', 'most', 'some', 'any', 'all',
    'from', 'into', 'about', 'above', 'after', 'again', 'against', 'am', 'as', 'because',
    'before', 'below', 'between', 'both', 'down', 'during', 'each', 'few', 'further', 'here',
    'if', 'just', 'now', 'once', 'only', 'other', 'out', 'over', 'own', 'same', 'such', 'than',
    'then', 'there', 'through', 'too', 'under', 'until', 'up', 'while', 'one', 'get', 'go',
    'make', 'like', 'time', 'know', 'take', 'people', 'year', 'good', 'see', 'look', 'come',
    'think', 'also', 'back', 'use', 'two', 'work', 'first', 'well', 'way', 'even', 'new',
    'want', 'give', 'day', 'said', 'still', 'within', 'without', 'don',
})

# Everyday vocabulary that is too basic for the intermediate/advanced word bank.
COMMON_WORDS: FrozenSet[str] = STOP_WORDS | frozenset({
    'let', 'put', 'say', 'set', 'run', 'move', 'try', 'ask', 'need', 'feel', 'become', 'leave',
    'call', 'tell', 'keep', 'help', 'talk', 'turn', 'start', 'show', 'hear', 'play', 'live',
    'believe', 'bring', 'happen', 'write', 'provide', 'sit', 'stand', 'lose', 'pay', 'meet',
    'include', 'continue', 'learn', 'change', 'lead', 'watch', 'follow', 'stop', 'create',
    'speak', 'read', 'spend', 'grow', 'open', 'walk', 'win', 'offer', 'remember', 'appear',
    'every', 'although', 'across', 'behind', 'beyond', 'upon', 'among', 'throughout',
    'despite', 'towards', 'off', 'always', 'often', 'however', 'almost', 'enough', 'since',
    'yet', 'early', 'never', 'sometimes', 'together', 'already', 'several', 'himself',
    'herself', 'itself', 'myself', 'themselves', 'someone', 'nothing', 'anything',
    'everything', 'somewhat', 'somewhere', 'none', 'nor', 'another', 'either', 'neither',
    'ought', 'cannot', 'person', 'man', 'woman', 'child', 'children', 'boy', 'girl', 'week',
    'month', 'hour', 'minute', 'second', 'thing', 'world', 'life', 'hand', 'part', 'place',
    'case', 'point', 'government', 'company', 'group', 'problem', 'fact', 'money', 'lot',
    'right', 'left', 'water', 'room', 'mother', 'father', 'area', 'story', 'book', 'eye',
    'job', 'word', 'family', 'student', 'country', 'school', 'state', 'member', 'system',
    'home', 'house', 'service', 'friend', 'parent', 'power', 'health', 'question', 'business',
    'program', 'number', 'night', 'side', 'office', 'door', 'body', 'face', 'others', 'level',
    'order', 'sense', 'report', 'mind', 'end', 'line', 'city', 'community', 'name',
    'president', 'team', 'idea', 'information', 'phone', 'thanks', 'data', 'great', 'little',
    'large', 'small', 'long', 'old', 'young', 'important', 'different', 'things', 'really',
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
    'january', 'february', 'march', 'april', 'june', 'july', 'august', 'september',
    'october', 'november', 'december', 'today', 'tomorrow', 'yesterday', 'morning',
    'afternoon', 'evening', 'weekend', 'zero', 'three', 'four', 'five', 'six', 'seven',
    'eight', 'nine', 'ten', 'eleven', 'twelve', 'twenty', 'thirty', 'hundred', 'thousand',
    'million', 'billion', 'third', 'fourth', 'fifth', 'yeah', 'okay', 'maybe', 'perhaps',
    'probably', 'especially', 'particularly', 'generally', 'usually', 'simply', 'actually',
    'finally', 'quite', 'rather', 'pretty', 'fairly', 'truly', 'certainly', 'definitely',
    'absolutely', 'answer', 'example', 'passage', 'text', 'author', 'reader', 'writer',
    'paragraph', 'sentence', 'letter', 'page', 'article', 'essay', 'paper', 'test', 'exam',
    'study', 'choose', 'following', 'according', 'underlined', 'blank', 'best',
})

# Substrings that mark a word as academic even when it is short.
ACADEMIC_INDICATORS: Tuple[str, ...] = (
    'tion', 'sion', 'ment', 'ology', 'graphy', 'cracy', 'archy',
    'thesis', 'phobia', 'phil', 'morph', 'path', 'chron', 'bio',
)

ADVANCED_AFFIXES: Tuple[str, ...] = (
    'tion', 'sion', 'ment', 'ence', 'ance', 'ology', 'ism', 'ize', 'ify',
    'dis', 'pre', 'post', 'anti', 'inter', 'trans', 'super', 'sub',
    'micro', 'macro', 'pseudo', 'quasi', 'semi', 'multi', 'poly', 'mono',
    'hyper', 'ultra', 'meta', 'proto', 'para', 'neo', 'auto', 'homo', 'hetero',
)

ACADEMIC_ROOTS: Tuple[str, ...] = (
    'anthropo', 'astro', 'bio', 'chrono', 'demo', 'geo', 'graph', 'hydro',
    'meter', 'morph', 'path', 'phil', 'phobia', 'photo', 'psych', 'scope',
    'tele', 'therm', 'crypto', 'neuro', 'cardio', 'gastro', 'dermato',
)

RARE_PATTERNS: Tuple[str, ...] = ('x', 'z', 'qu', 'ph', 'gh', 'ough', 'augh')

URL_FRAGMENTS: Tuple[str, ...] = ('http', 'www', '://')

# Largest matching weight is applied; unknown areas count as 0.
SUBJECT_AREA_WEIGHTS = {
    'science': 1,
    'philosophy': 1,
    'economics': 1,
    'psychology': 1,
    'literature': 0,
    'english': 0,
    'general': 0,
    'daily_life': -1,
}
