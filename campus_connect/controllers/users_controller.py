from flask import Blueprint, jsonify
from pymongo.errors import DuplicateKeyError

from campus_connect.controllers.auth_controller import register_user, login_user, normalize_email
from campus_connect.models.roles import Role
from campus_connect.models.users import User, Identity
from campus_connect.services.groups import GroupService
from campus_connect.utils.auth import protect, authorize_roles, current_user
from campus_connect.utils.db import get_db
from campus_connect.utils.errors import NotFoundError, ValidationError
from campus_connect.utils.tokens import generate_token
from campus_connect.utils.validation import json_body

users_bp = Blueprint("users", __name__, url_prefix="/api/v1/users")
profiles_bp = Blueprint("profiles", __name__, url_prefix="/api/v1/profiles")

# request field -> stored field
PROFILE_FIELDS = {
    "name": "name",
    "email": "email",
    "department": "department",
    "year": "year",
    "profileImage": "profile_image",
}
STUDENT_ONLY_FIELDS = {
    "classGroup": "class_group",
    "batch": "batch",
    "year": "year",
}


def _changes(data, fields):
    return {stored: data[key] for key, stored in fields.items() if data.get(key) not in (None, "")}


def _ensure_email_free(db, email, user_id):
    existing = User.find_by_email(db, email)
    if existing and existing["_id"] != user_id:
        raise ValidationError("Email already in use")


# The unique email index still catches a change that lands between check and write
def _apply_update(db, user_id, changes):
    try:
        return Identity.from_doc(User.update(db, user_id, changes))
    except DuplicateKeyError:
        raise ValidationError("Email already in use") from None


def _load_user(db, user_id):
    user = User.find_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return Identity.from_doc(user)


# -----------------------------
# PUBLIC (legacy paths for register/login)
# -----------------------------
@users_bp.route("", methods=["POST"])
def register():
    return register_user(json_body())


@users_bp.route("/login", methods=["POST"])
def login():
    return login_user(json_body())


# -----------------------------
# CURRENT USER
# -----------------------------
@users_bp.route("/me")
@protect
def get_me():
    return jsonify({"success": True, "user": current_user().to_json()})


@users_bp.route("/profile")
@profiles_bp.route("")
@protect
def get_profile():
    user = _load_user(get_db(), current_user().id)
    return jsonify({"success": True, "user": user.to_json()})


@users_bp.route("/profile", methods=["PUT"])
@profiles_bp.route("", methods=["PUT"])
@protect
def update_profile():
    db = get_db()
    data = json_body()
    me = current_user()

    changes = _changes(data, PROFILE_FIELDS)
    if "email" in changes:
        changes["email"] = normalize_email(changes["email"])
        _ensure_email_free(db, changes["email"], me.id)
    if data.get("password"):
        changes["password"] = str(data["password"])

    updated = _apply_update(db, me.id, changes)
    return jsonify({
        "success": True,
        "user": updated.to_json(),
        "token": generate_token(updated.id),
    })


@users_bp.route("/my-classes")
@protect
def my_classes():
    class_groups, course_groups = GroupService(get_db()).my_classes(current_user())
    return jsonify({
        "success": True,
        "classGroups": class_groups,
        "courseGroups": course_groups,
    })


# -----------------------------
# USER DIRECTORY
# -----------------------------
@users_bp.route("", methods=["GET"])
@protect
@authorize_roles(Role.ADMIN, Role.HOD, Role.PRINCIPAL)
def list_users():
    users = [Identity.from_doc(u).to_json() for u in User.find_all(get_db())]
    return jsonify({"success": True, "count": len(users), "users": users})


@users_bp.route("/<user_id>", methods=["GET"])
@protect
@authorize_roles(Role.ADMIN, Role.HOD, Role.PRINCIPAL)
def get_user(user_id):
    user = _load_user(get_db(), user_id)
    return jsonify({"success": True, "user": user.to_json()})


@users_bp.route("/<user_id>", methods=["PUT"])
@protect
@authorize_roles(Role.ADMIN, Role.PRINCIPAL)
def update_user(user_id):
    db = get_db()
    data = json_body()
    user = _load_user(db, user_id)

    changes = _changes(data, {"name": "name", "email": "email", "department": "department"})
    if "email" in changes:
        changes["email"] = normalize_email(changes["email"])
        _ensure_email_free(db, changes["email"], user.id)

    role = user.role
    if data.get("role"):
        role = Role.parse(data["role"])
        if role is None:
            raise ValidationError(f"Role must be one of: {', '.join(Role.values())}")
        changes["role"] = role.value

    # Class placement only applies to students
    if role is Role.STUDENT:
        changes.update(_changes(data, STUDENT_ONLY_FIELDS))

    updated = _apply_update(db, user.id, changes)
    return jsonify({"success": True, "user": updated.to_json()})
