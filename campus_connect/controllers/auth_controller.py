import logging

from flask import Blueprint, jsonify
from pymongo.errors import DuplicateKeyError

from campus_connect.models.roles import Role
from campus_connect.models.users import User, Identity
from campus_connect.utils.db import get_db
from campus_connect.utils.errors import AuthenticationError, ValidationError
from campus_connect.utils.tokens import generate_token
from campus_connect.utils.validation import json_body, require_fields

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")

REQUIRED_FIELDS = ("name", "email", "password", "department")
STUDENT_FIELDS = ("classGroup", "batch", "year")


def normalize_email(email):
    return str(email).strip().lower()


def auth_response(user_doc, status=200):
    identity = Identity.from_doc(user_doc)
    return jsonify({
        "success": True,
        "user": identity.to_json(),
        "token": generate_token(identity.id),
    }), status


def register_user(data):
    require_fields(data, REQUIRED_FIELDS, "Please provide name, email, password and department")

    role = Role.parse(data.get("role") or Role.STUDENT.value)
    if role is None:
        raise ValidationError(f"Role must be one of: {', '.join(Role.values())}")

    if role is Role.STUDENT:
        require_fields(data, STUDENT_FIELDS, "Students must provide classGroup, batch and year")

    db = get_db()
    email = normalize_email(data["email"])

    # Prevent duplicate users
    if User.find_by_email(db, email):
        raise ValidationError("User already exists")

    user = User(
        name=str(data["name"]).strip(),
        email=email,
        password=str(data["password"]),
        role=role,
        department=data["department"],
        class_group=data.get("classGroup") if role is Role.STUDENT else None,
        batch=data.get("batch") if role is Role.STUDENT else None,
        year=data.get("year") if role is Role.STUDENT else None,
        profile_image=data.get("profileImage"),
    )
    try:
        doc = user.save(db)
    except DuplicateKeyError:
        raise ValidationError("User already exists") from None

    logger.info("Registered %s user %s", role.value, doc["_id"])
    return auth_response(doc, 201)


def login_user(data):
    email = data.get("email")
    password = data.get("password")
    password = str(password) if password else None

    user = User.verify_password(get_db(), normalize_email(email), password) if email else None
    if not user:
        raise AuthenticationError("Invalid email or password")

    return auth_response(user)


# Register
@auth_bp.route("/register", methods=["POST"])
def register():
    return register_user(json_body())


# Login
@auth_bp.route("/login", methods=["POST"])
def login():
    return login_user(json_body())
