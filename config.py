import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application settings read from the environment"""
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SECRET_KEY = os.environ.get("SESSION_SECRET", "fallback_secret_key_for_development")
    PERMANENT_SESSION_LIFETIME = timedelta(hours=int(os.environ.get("SESSION_LIFETIME_HOURS", 24)))

    # Server-side sessions live in the same database as users and reports
    SESSION_TYPE = "sqlalchemy"
    SESSION_SQLALCHEMY_TABLE = "sessions"
    SESSION_PERMANENT = True

    PREDICTION_SERVICE_URL = os.environ.get(
        "PREDICTION_SERVICE_URL", os.environ.get("FLASK_URL", "http://localhost:5001")
    )
    PREDICTION_TIMEOUT = float(os.environ.get("PREDICTION_TIMEOUT", 5))

    # Not used by any route yet
    OPENWEATHER_KEY = os.environ.get("OPENWEATHER_KEY")

    PORT = int(os.environ.get("PORT", 3000))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    TESTING = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SECRET_KEY = "test-secret"
    PREDICTION_SERVICE_URL = "http://prediction.test"
    PREDICTION_TIMEOUT = 1.0
    LOG_LEVEL = "DEBUG"
