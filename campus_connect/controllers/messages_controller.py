from flask import Blueprint, current_app, jsonify, request

from campus_connect.models.messages import Message
from campus_connect.services.messaging import MessageService
from campus_connect.utils.auth import protect, current_user
from campus_connect.utils.db import get_db
from campus_connect.utils.validation import json_body

messages_bp = Blueprint("messages", __name__, url_prefix="/api/v1/messages")


def message_service():
    return MessageService(
        get_db(),
        default_limit=current_app.config["MESSAGES_PAGE_LIMIT"],
        max_limit=current_app.config["MESSAGES_MAX_LIMIT"],
    )


# Send a message (every authenticated role except admin)
@messages_bp.route("/send", methods=["POST"])
@protect
def send_message():
    data = json_body()
    message = message_service().send_message(
        current_user(),
        data.get("groupType"),
        data.get("groupId"),
        data.get("content"),
    )
    return jsonify({"success": True, "message": Message.to_json(message)}), 201


# Read a group's messages, newest first, paginated
@messages_bp.route("", methods=["GET"])
@protect
def get_messages():
    messages, pagination = message_service().get_messages(
        current_user(),
        request.args.get("groupType"),
        request.args.get("groupId"),
        page=request.args.get("page"),
        limit=request.args.get("limit"),
    )
    return jsonify({
        "success": True,
        "messages": [Message.to_json(m) for m in messages],
        "pagination": pagination,
    })
