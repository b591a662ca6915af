from flask import Flask

from .config import load_config, load_pipeline_config
from .extensions import AppContext, init_extensions, init_firestore, init_sentry
from .logging_config import configure_logging


def create_app(config=None, pipeline_config=None, app_ctx=None):
    """App factory entrypoint.

    Tests pass a ready ``app_ctx`` (fake Firestore, fake auth); otherwise the
    Firestore client and Sentry are initialised from the environment.
    """
    config = config or load_config()
    configure_logging(config.log_level)

    if app_ctx is None:
        init_sentry(config)
        db, firebase_init_error = init_firestore()
        app_ctx = AppContext(
            config,
            pipeline_config or load_pipeline_config(),
            db=db,
            firebase_init_error=firebase_init_error,
        )

    app = Flask(__name__)
    app.secret_key = config.flask_secret_key or None
    init_extensions(app, app_ctx)

    from .blueprints import admin_bp, health_bp, vocabulary_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(vocabulary_bp)
    app.register_blueprint(admin_bp)
    return app
