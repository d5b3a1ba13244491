import logging

from flask import Blueprint, jsonify
from pymongo.errors import DuplicateKeyError

from campus_connect.models.assignments import Assignment
from campus_connect.models.roles import Role
from campus_connect.models.submissions import Submission
from campus_connect.utils.auth import protect, current_user
from campus_connect.utils.db import get_db
from campus_connect.utils.errors import AuthorizationError, NotFoundError, ValidationError
from campus_connect.utils.validation import json_body, require_fields

logger = logging.getLogger(__name__)

submissions_bp = Blueprint("submissions", __name__, url_prefix="/api/v1/submissions")

REQUIRED_FIELDS = ("assignmentId", "submissionText", "submissionTitle")
DUPLICATE_MESSAGE = "You have already submitted this assignment"


def _student_only():
    me = current_user()
    if me.role is not Role.STUDENT:
        raise AuthorizationError("Not authorized, student only")
    return me


# Submit an assignment
@submissions_bp.route("", methods=["POST"])
@protect
def submit_assignment():
    me = _student_only()
    data = json_body()
    require_fields(data, REQUIRED_FIELDS)
    if not isinstance(data["submissionText"], str) or not isinstance(data["submissionTitle"], str):
        raise ValidationError("submissionText and submissionTitle must be strings")

    db = get_db()
    assignment = Assignment.find_by_id(db, data["assignmentId"])
    if not assignment:
        raise NotFoundError("Assignment not found")

    if Submission.find_for_student_assignment(db, me.id, assignment["_id"]):
        raise ValidationError(DUPLICATE_MESSAGE)

    submission = Submission(
        assignment_id=assignment["_id"],
        student_id=me.id,
        submission_text=data["submissionText"],
        submission_title=data["submissionTitle"],
    )
    try:
        doc = submission.save(db)
    except DuplicateKeyError:
        raise ValidationError(DUPLICATE_MESSAGE) from None

    logger.info("Student %s submitted assignment %s", me.id, assignment["_id"])
    return jsonify({"success": True, "submission": Submission.to_json(doc)}), 201


# The caller's own submissions
@submissions_bp.route("/my-submissions")
@protect
def my_submissions():
    me = _student_only()
    submissions = [Submission.to_json(doc) for doc in Submission.find_for_student(get_db(), me.id)]
    return jsonify({"success": True, "submissions": submissions})
