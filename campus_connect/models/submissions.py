from datetime import datetime, timezone

from pymongo import DESCENDING

from campus_connect.models.assignments import Assignment
from campus_connect.utils.db import to_object_id, id_str


class Submission:
    """A student's answer to an assignment. One per (assignment, student)."""

    @staticmethod
    def collection(db):
        return db.submissions

    def __init__(self, assignment_id, student_id, submission_text, submission_title,
                 attachment_url="", created_at=None, updated_at=None):
        self.assignment_id = to_object_id(assignment_id)
        self.student_id = to_object_id(student_id)
        self.submission_text = submission_text
        self.submission_title = submission_title
        self.attachment_url = attachment_url

        # Filled in by grading
        self.marks = None
        self.feedback = ""
        self.is_graded = False

        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def to_dict(self):
        return {
            "assignment_id": self.assignment_id,
            "student_id": self.student_id,
            "submission_text": self.submission_text,
            "submission_title": self.submission_title,
            "attachment_url": self.attachment_url,
            "marks": self.marks,
            "feedback": self.feedback,
            "is_graded": self.is_graded,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def save(self, db):
        doc = self.to_dict()
        result = self.collection(db).insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    @staticmethod
    def find_for_student_assignment(db, student_id, assignment_id):
        return Submission.collection(db).find_one({
            "student_id": to_object_id(student_id),
            "assignment_id": to_object_id(assignment_id),
        })

    @staticmethod
    def find_for_student(db, student_id):
        """A student's submissions, newest first, each with its assignment summary attached."""
        docs = list(
            Submission.collection(db)
            .find({"student_id": to_object_id(student_id)})
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        )
        assignments = Assignment.find_by_ids(db, {doc["assignment_id"] for doc in docs})
        for doc in docs:
            doc["assignment"] = assignments.get(doc["assignment_id"])
        return docs

    @staticmethod
    def to_json(doc):
        assignment = doc.get("assignment")
        created_at = doc.get("created_at")
        updated_at = doc.get("updated_at")
        return {
            "_id": id_str(doc["_id"]),
            "assignmentId": id_str(doc.get("assignment_id")),
            "assignment": Assignment.to_summary_json(assignment) if assignment else None,
            "studentId": id_str(doc.get("student_id")),
            "submissionText": doc.get("submission_text"),
            "submissionTitle": doc.get("submission_title"),
            "attachmentUrl": doc.get("attachment_url"),
            "marks": doc.get("marks"),
            "feedback": doc.get("feedback"),
            "isGraded": doc.get("is_graded"),
            "createdAt": created_at.isoformat() if created_at else None,
            "updatedAt": updated_at.isoformat() if updated_at else None,
        }
