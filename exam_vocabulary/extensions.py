import json
import logging
import os
import threading
import time

import firebase_admin
import sentry_sdk
from firebase_admin import auth, credentials, firestore
from flask import jsonify
from sentry_sdk.integrations.flask import FlaskIntegration

from exam_vocabulary.services import auth_service

logger = logging.getLogger('exam_vocabulary')


def init_firestore():
    """Return ``(db, error_message)``; the app keeps serving health checks without Firestore."""
    try:
        if os.path.exists('firebase-credentials.json'):
            cred = credentials.Certificate('firebase-credentials.json')
        else:
            firebase_creds_raw = (os.getenv('FIREBASE_CREDENTIALS', '') or '').strip()
            if not firebase_creds_raw:
                raise ValueError("FIREBASE_CREDENTIALS is not set and firebase-credentials.json was not found.")
            cred = credentials.Certificate(json.loads(firebase_creds_raw))
        if not firebase_admin._apps:
            firebase_admin.initialize_app(cred)
        return firestore.client(), ''
    except Exception as exc:
        logger.info(f"⚠️ Firebase initialization skipped: {exc}")
        return None, str(exc)


def init_sentry(config):
    if not config.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=config.sentry_dsn,
        integrations=[FlaskIntegration()],
        traces_sample_rate=config.sentry_traces_sample_rate,
        send_default_pii=False,
        environment=config.sentry_environment,
        release=config.sentry_release,
    )
    return True


class AppContext:
    """Runtime collaborators handed to the service-layer handlers."""

    jsonify = staticmethod(jsonify)
    time = time
    threading = threading
    firestore = firestore

    def __init__(self, config, pipeline_config, *, db=None, auth_module=auth, firebase_init_error='',
                 corpus_source_factory=None, dictionary_client_factory=None):
        self.config = config
        self.pipeline_config = pipeline_config
        self.db = db
        self.auth_module = auth_module
        self.firebase_init_error = firebase_init_error
        self.logger = logger
        self.runs_store = {}
        self.runs_lock = threading.Lock()
        self.corpus_source_factory = corpus_source_factory
        self.dictionary_client_factory = dictionary_client_factory

    @property
    def firestore_ready(self):
        return self.db is not None

    def verify_firebase_token(self, request):
        return auth_service.verify_firebase_token(request, auth_module=self.auth_module, logger=self.logger)

    def is_admin_user(self, decoded_token):
        return auth_service.is_admin_user(
            decoded_token,
            admin_uids=self.config.admin_uids,
            admin_emails=self.config.admin_emails,
        )

    def build_corpus_source(self):
        if self.corpus_source_factory is not None:
            return self.corpus_source_factory(self.pipeline_config)
        from exam_vocabulary.services.corpus_service import AlgoliaCorpusSource

        cfg = self.pipeline_config
        return AlgoliaCorpusSource(cfg.algolia_app_id, cfg.algolia_api_key, cfg.algolia_index, page_size=cfg.page_size)

    def build_dictionary_client(self):
        if self.dictionary_client_factory is not None:
            return self.dictionary_client_factory(self.pipeline_config)
        from exam_vocabulary.services.enrichment_service import DictionaryClient

        cfg = self.pipeline_config
        return DictionaryClient(cfg.dictionary_api_url, timeout=cfg.dictionary_timeout_seconds)

    def build_pipeline(self, source, on_status=None):
        from exam_vocabulary.services.pipeline_service import ExtractionPipeline

        return ExtractionPipeline(
            self.pipeline_config,
            source=source,
            dictionary_client=self.build_dictionary_client(),
            db=self.db,
            on_status=on_status,
            firestore_module=self.firestore,
        )


def init_extensions(app, app_ctx) -> None:
    app.extensions.setdefault('exam_vocabulary', {})
    app.extensions['exam_vocabulary']['app_ctx'] = app_ctx


def get_app_ctx(app):
    return app.extensions['exam_vocabulary']['app_ctx']
