from datetime import datetime, timezone

from campus_connect.utils.db import to_object_id, id_str


class Assignment:

    @staticmethod
    def collection(db):
        return db.assignments

    def __init__(self, title, description, due_date, course_id, course_name, faculty_id,
                 max_marks=100, attachment_url="", created_at=None, updated_at=None):
        self.title = title
        self.description = description
        self.due_date = due_date
        self.course_id = to_object_id(course_id)
        self.course_name = course_name
        self.faculty_id = to_object_id(faculty_id)
        self.max_marks = max_marks
        self.attachment_url = attachment_url
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    # Convert to dictionary for MongoDB
    def to_dict(self):
        return {
            "title": self.title,
            "description": self.description,
            "due_date": self.due_date,
            "course_id": self.course_id,
            "course_name": self.course_name,
            "faculty_id": self.faculty_id,
            "max_marks": self.max_marks,
            "attachment_url": self.attachment_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def save(self, db):
        doc = self.to_dict()
        result = self.collection(db).insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    @staticmethod
    def find_by_id(db, assignment_id):
        oid = to_object_id(assignment_id)
        if oid is None:
            return None
        return Assignment.collection(db).find_one({"_id": oid})

    @staticmethod
    def find_by_ids(db, assignment_ids):
        """Map of _id -> document for the given ids."""
        docs = Assignment.collection(db).find({"_id": {"$in": list(assignment_ids)}})
        return {doc["_id"]: doc for doc in docs}

    # The fields shown next to a submission
    @staticmethod
    def to_summary_json(doc):
        due_date = doc.get("due_date")
        return {
            "_id": id_str(doc["_id"]),
            "title": doc.get("title"),
            "dueDate": due_date.isoformat() if due_date else None,
            "maxMarks": doc.get("max_marks"),
            "courseId": id_str(doc.get("course_id")),
        }
