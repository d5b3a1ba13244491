from flask import Blueprint, jsonify

from campus_connect.models.roles import Role, PROGRAM_COORDINATOR
from campus_connect.services.groups import GroupService
from campus_connect.utils.auth import protect, authorize_roles, current_user
from campus_connect.utils.db import get_db
from campus_connect.utils.validation import json_body

groups_bp = Blueprint("groups", __name__, url_prefix="/api/v1/groups")


# Assign a course to a class group
@groups_bp.route("/assign-course", methods=["POST"])
@protect
@authorize_roles(PROGRAM_COORDINATOR, Role.ADMIN)
def assign_course():
    data = json_body()
    course_group = GroupService(get_db()).assign_course(
        current_user(),
        course_code=data.get("courseCode"),
        course_name=data.get("courseName"),
        semester=data.get("semester"),
        faculty_id=data.get("facultyId"),
        class_group_id=data.get("classGroupId"),
    )
    return jsonify({
        "success": True,
        "message": "Course assigned to class group successfully",
        "courseGroup": course_group.to_json(),
    }), 201
