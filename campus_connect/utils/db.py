"""
utils/db.py
-----------------
This module initializes the MongoDB connection for the Flask application
and hands the database handle to the components that need it.
"""

import logging
import sys

from bson import ObjectId
from flask import current_app
from flask_pymongo import PyMongo
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

DB_EXTENSION = "campus_connect.db"


def init_db_connection(app, db=None):
    """
    Attach a database handle to the Flask app.
    Connects with Flask-PyMongo using MONGO_URI from the config, unless a
    ready handle is passed in (e.g. an in-memory database for tests).
    """
    if db is None:
        mongo = PyMongo(
            app,
            serverSelectionTimeoutMS=app.config.get("MONGO_SERVER_SELECTION_TIMEOUT_MS", 5000),
        )
        db = mongo.db

    app.extensions[DB_EXTENSION] = db
    logger.info("MongoDB handle initialized for database '%s'.", db.name)
    return db


def get_db():
    return current_app.extensions[DB_EXTENSION]


def ensure_indexes(db):
    db.users.create_index([("email", ASCENDING)], unique=True)
    db.messages.create_index(
        [("group_type", ASCENDING), ("group_id", ASCENDING), ("timestamp", DESCENDING)]
    )
    db.course_groups.create_index([("class_group", ASCENDING)])
    db.submissions.create_index(
        [("assignment_id", ASCENDING), ("student_id", ASCENDING)], unique=True
    )


def connection_status(db):
    try:
        db.command("ping")
    except PyMongoError as e:
        logger.warning("MongoDB ping failed: %s", e)
        return {"state": "disconnected", "connected": False, "dbName": db.name}
    return {"state": "connected", "connected": True, "dbName": db.name}


def bootstrap_db(app):
    """
    Create indexes before serving. Index creation needs a live server, so this
    also verifies the connection; outside test mode a failure ends the process.
    """
    db = app.extensions[DB_EXTENSION]
    try:
        ensure_indexes(db)
    except PyMongoError as e:
        logger.error("Error connecting to MongoDB: %s", e)
        if not app.config.get("TESTING"):
            sys.exit(1)
        raise

    logger.info("MongoDB connected: %s", db.name)
    return db


# ---------------------------------------------------------
# ID HELPERS
# ---------------------------------------------------------
def to_object_id(value):
    """Return an ObjectId for value, or None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def id_str(value):
    return str(value) if value is not None else None
