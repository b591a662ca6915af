import os
from dataclasses import asdict, dataclass, field
from typing import Dict, FrozenSet

from dotenv import load_dotenv

from exam_vocabulary.services import word_lists

DEV_ENV_NAMES = {'development', 'dev', 'local', 'test'}
FIRESTORE_MAX_BATCH_WRITES = 500


@dataclass(frozen=True)
class AppConfig:
    """Central config object for the web app and scripts."""

    flask_secret_key: str = ''
    log_level: str = 'INFO'
    sentry_dsn: str = ''
    sentry_environment: str = 'production'
    sentry_release: str = 'exam-vocabulary'
    sentry_traces_sample_rate: float = 0.0
    admin_emails: FrozenSet[str] = frozenset()
    admin_uids: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class PipelineConfig:
    """Thresholds and collaborators for one vocabulary extraction run."""

    stop_words: FrozenSet[str] = word_lists.STOP_WORDS
    common_words: FrozenSet[str] = word_lists.COMMON_WORDS
    min_sentence_length: int = 20
    min_word_length: int = 3
    max_word_length: int = 20
    advanced_only: bool = True
    advanced_min_length: int = 5
    max_contexts: int = 5
    min_frequency: int = 1
    enrich_top_n: int = 300
    enrich_concurrency: int = 4
    enrich_batch_delay_seconds: float = 0.1
    min_definition_length: int = 20
    require_synonyms: bool = False
    write_batch_size: int = FIRESTORE_MAX_BATCH_WRITES
    write_max_retries: int = 3
    source_max_retries: int = 3
    retry_backoff_seconds: float = 1.0
    subject_weights: Dict[str, int] = field(default_factory=lambda: dict(word_lists.SUBJECT_AREA_WEIGHTS))
    vocabulary_collection: str = 'vocabulary'
    runs_collection: str = 'extraction_metadata'
    dictionary_api_url: str = 'https://api.dictionaryapi.dev/api/v2/entries/en'
    dictionary_timeout_seconds: float = 10.0
    algolia_app_id: str = ''
    algolia_api_key: str = ''
    algolia_index: str = 'korean-english-question-pairs'
    page_size: int = 1000

    def as_parameters(self):
        """Threshold snapshot stored on the extraction run audit record."""
        params = asdict(self)
        for key in ('stop_words', 'common_words', 'algolia_api_key'):
            params.pop(key, None)
        return params


def _env_str(name, default=''):
    return (os.getenv(name, default) or default).strip()


def _env_int(name, default, minimum=None, maximum=None):
    raw = os.getenv(name)
    try:
        value = int(str(raw).strip()) if raw is not None else default
    except ValueError:
        value = default
    if minimum is not None:
        value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


def _env_float(name, default, minimum=0.0):
    raw = os.getenv(name)
    try:
        value = float(str(raw).strip()) if raw is not None else default
    except ValueError:
        value = default
    return max(minimum, value)


def _env_flag(name, default=False):
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {'1', 'true', 'yes', 'on'}


def _env_set(name, lower=False):
    values = set()
    for item in os.getenv(name, '').split(','):
        item = item.strip()
        if item:
            values.add(item.lower() if lower else item)
    return frozenset(values)


def runtime_environment():
    return (
        os.getenv('SENTRY_ENVIRONMENT')
        or os.getenv('FLASK_ENV')
        or os.getenv('ENV')
        or ('production' if os.getenv('VERCEL') or os.getenv('RENDER') else 'development')
    ).strip().lower()


def load_config() -> AppConfig:
    load_dotenv()
    runtime_env = runtime_environment()
    config = AppConfig(
        flask_secret_key=_env_str('FLASK_SECRET_KEY'),
        log_level=_env_str('LOG_LEVEL', 'INFO').upper(),
        sentry_dsn=_env_str('SENTRY_DSN'),
        sentry_environment=runtime_env or 'production',
        sentry_release=_env_str('SENTRY_RELEASE', 'exam-vocabulary'),
        sentry_traces_sample_rate=min(_env_float('SENTRY_TRACES_SAMPLE_RATE', 0.0), 1.0),
        admin_emails=_env_set('ADMIN_EMAILS', lower=True),
        admin_uids=_env_set('ADMIN_UIDS'),
    )
    if runtime_env not in DEV_ENV_NAMES and not config.flask_secret_key:
        raise RuntimeError('FLASK_SECRET_KEY must be set in non-development environments.')
    return config


def load_pipeline_config() -> PipelineConfig:
    load_dotenv()
    defaults = PipelineConfig()
    min_word_length = _env_int('VOCAB_MIN_WORD_LENGTH', defaults.min_word_length, minimum=1)
    return PipelineConfig(
        min_sentence_length=_env_int('VOCAB_MIN_SENTENCE_LENGTH', defaults.min_sentence_length, minimum=0),
        min_word_length=min_word_length,
        max_word_length=_env_int('VOCAB_MAX_WORD_LENGTH', defaults.max_word_length, minimum=min_word_length),
        advanced_only=_env_flag('VOCAB_ADVANCED_ONLY', defaults.advanced_only),
        advanced_min_length=_env_int('VOCAB_ADVANCED_MIN_LENGTH', defaults.advanced_min_length, minimum=1),
        max_contexts=_env_int('VOCAB_MAX_CONTEXTS', defaults.max_contexts, minimum=1, maximum=10),
        min_frequency=_env_int('VOCAB_MIN_FREQUENCY', defaults.min_frequency, minimum=1),
        enrich_top_n=_env_int('VOCAB_ENRICH_TOP_N', defaults.enrich_top_n, minimum=0),
        enrich_concurrency=_env_int('VOCAB_ENRICH_CONCURRENCY', defaults.enrich_concurrency, minimum=1, maximum=16),
        enrich_batch_delay_seconds=_env_float('VOCAB_ENRICH_BATCH_DELAY_SECONDS', defaults.enrich_batch_delay_seconds),
        min_definition_length=_env_int('VOCAB_MIN_DEFINITION_LENGTH', defaults.min_definition_length, minimum=0),
        require_synonyms=_env_flag('VOCAB_REQUIRE_SYNONYMS', defaults.require_synonyms),
        write_batch_size=_env_int('VOCAB_WRITE_BATCH_SIZE', defaults.write_batch_size, minimum=1, maximum=FIRESTORE_MAX_BATCH_WRITES),
        write_max_retries=_env_int('VOCAB_WRITE_MAX_RETRIES', defaults.write_max_retries, minimum=0),
        source_max_retries=_env_int('VOCAB_SOURCE_MAX_RETRIES', defaults.source_max_retries, minimum=0),
        retry_backoff_seconds=_env_float('VOCAB_RETRY_BACKOFF_SECONDS', defaults.retry_backoff_seconds),
        vocabulary_collection=_env_str('VOCAB_COLLECTION', defaults.vocabulary_collection),
        runs_collection=_env_str('VOCAB_RUNS_COLLECTION', defaults.runs_collection),
        dictionary_api_url=_env_str('DICTIONARY_API_URL', defaults.dictionary_api_url).rstrip('/'),
        dictionary_timeout_seconds=_env_float('DICTIONARY_TIMEOUT_SECONDS', defaults.dictionary_timeout_seconds, minimum=1.0),
        algolia_app_id=_env_str('ALGOLIA_APP_ID'),
        algolia_api_key=_env_str('ALGOLIA_SEARCH_KEY'),
        algolia_index=_env_str('ALGOLIA_INDEX', defaults.algolia_index),
        page_size=_env_int('ALGOLIA_PAGE_SIZE', defaults.page_size, minimum=1, maximum=1000),
    )
