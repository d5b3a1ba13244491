import logging

from flask import Flask

from campus_connect.config import Config
from campus_connect.utils.db import init_db_connection, bootstrap_db
from campus_connect.utils.errors import register_error_handlers
from campus_connect.utils.logging_config import setup_logging

# Import controllers
from campus_connect.controllers.health_controller import health_bp, registered_routes
from campus_connect.controllers.auth_controller import auth_bp
from campus_connect.controllers.users_controller import users_bp, profiles_bp
from campus_connect.controllers.messages_controller import messages_bp
from campus_connect.controllers.groups_controller import groups_bp
from campus_connect.controllers.submissions_controller import submissions_bp

logger = logging.getLogger(__name__)


def create_app(config_object=Config, db=None):
    """
    Build the Flask app. Pass db to use an already constructed database
    handle instead of connecting to MONGO_URI.
    """
    app = Flask(__name__)               # Initialize Flask app
    app.config.from_object(config_object)
    setup_logging(app.config["LOG_LEVEL"], app.config["LOG_FORMAT"])

    init_db_connection(app, db)         # Initialize MongoDB connection
    bootstrap_db(app)                   # Create indexes

    # Register Blueprint
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(profiles_bp)
    app.register_blueprint(messages_bp)
    app.register_blueprint(groups_bp)
    app.register_blueprint(submissions_bp)

    register_error_handlers(app)
    return app


def main():
    app = create_app()

    logger.info("API ROUTES:\n%s", "\n".join(registered_routes(app)))
    logger.info("Server running in %s mode on port %s", app.config["ENVIRONMENT"], app.config["PORT"])
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=app.config["DEBUG"])


# Run the app
if __name__ == "__main__":
    main()
