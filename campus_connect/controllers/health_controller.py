from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from campus_connect.utils.db import get_db, connection_status

health_bp = Blueprint("health", __name__)


@health_bp.route("/")
def index():
    return "API is running"


# Health check, includes a live ping of the database
@health_bp.route("/health")
def health():
    return jsonify({
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": current_app.config["ENVIRONMENT"],
        "database": connection_status(get_db()),
    })


def registered_routes(app):
    routes = []
    for rule in sorted(app.url_map.iter_rules(), key=lambda r: r.rule):
        if rule.endpoint == "static":
            continue
        methods = sorted(m for m in rule.methods if m not in ("HEAD", "OPTIONS"))
        routes.append(f"{', '.join(methods)} {rule.rule}")
    return routes


@health_bp.route("/api/v1/routes")
def list_routes():
    return jsonify({"availableRoutes": registered_routes(current_app)})
