import logging
from flask import Flask, session
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config
from extensions import db, migrate, server_session
from prediction_client import PredictionClient
import models  # noqa: F401  registers the tables


def configure_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def format_confidence(value):
    """Format a 0-1 confidence score as a percentage"""
    if value is None or value == '':
        return "-"
    try:
        return f"{float(value) * 100:.1f}%"
    except (ValueError, TypeError):
        return str(value)


def create_app(config_object=None, prediction_client=None):
    """
    Build the web application

    Args:
        config_object: settings class, defaults to Config
        prediction_client: client for the prediction service; built from
            PREDICTION_SERVICE_URL when not given
    """
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    configure_logging(app.config['LOG_LEVEL'])
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    database_url = app.config.get('SQLALCHEMY_DATABASE_URI')
    if not database_url:
        raise RuntimeError("DATABASE_URL environment variable is required for persistent storage")

    # Adjust settings for SQLite
    if database_url.startswith("sqlite"):
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {}
    else:
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
            "pool_recycle": 300,
            "pool_pre_ping": True,
        }

    db.init_app(app)
    migrate.init_app(app, db)
    app.config['SESSION_SQLALCHEMY'] = db
    server_session.init_app(app)

    with app.app_context():
        db.create_all()
        app.logger.info("Database tables created successfully")

    if prediction_client is None:
        prediction_client = PredictionClient(
            app.config['PREDICTION_SERVICE_URL'],
            timeout=app.config['PREDICTION_TIMEOUT'],
        )
    app.extensions['prediction_client'] = prediction_client

    app.jinja_env.filters['confidence'] = format_confidence

    @app.context_processor
    def inject_current_user():
        return {'current_user': session.get('user_name')}

    from views import main
    app.register_blueprint(main)

    return app


if __name__ == '__main__':
    app = create_app()
    try:
        app.run(host='0.0.0.0', port=app.config['PORT'])
    finally:
        app.extensions['prediction_client'].close()
