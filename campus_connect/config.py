"""
config.py
-----------------
Application settings, read from the environment (and a local .env file).
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name, default="false"):
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    # Flask
    SECRET_KEY = os.getenv("FLASK_SECRET", "campus-connect-dev-secret")
    ENVIRONMENT = os.getenv("ENVIRONMENT", os.getenv("FLASK_ENV", "development"))
    DEBUG = _flag("DEBUG")
    TESTING = _flag("TESTING")
    PORT = int(os.getenv("PORT", "5000"))

    # Database
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/CampusConnect")
    MONGO_SERVER_SELECTION_TIMEOUT_MS = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))

    # Authentication
    JWT_SECRET = os.getenv("JWT_SECRET", "campus-connect-dev-jwt-secret")
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_DAYS = int(os.getenv("JWT_EXPIRES_DAYS", "7"))

    # Messaging
    MESSAGES_PAGE_LIMIT = int(os.getenv("MESSAGES_PAGE_LIMIT", "50"))
    MESSAGES_MAX_LIMIT = int(os.getenv("MESSAGES_MAX_LIMIT", "100"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class TestConfig(Config):
    TESTING = True
    ENVIRONMENT = "test"
    JWT_SECRET = "campus-connect-test-secret"
    MONGO_URI = "mongodb://localhost:27017/CampusConnectTest"
    LOG_LEVEL = "WARNING"
