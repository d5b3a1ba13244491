"""
models/groups.py
-----------------
The three group kinds messages can be addressed to: departments, class
groups (a year/batch of students) and course groups (one course taught
to one class group).
"""

from datetime import datetime, timezone
from enum import Enum

from campus_connect.utils.db import to_object_id, id_str


class GroupType(str, Enum):
    DEPARTMENT = "Department"
    CLASS_GROUP = "ClassGroup"
    COURSE_GROUP = "CourseGroup"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


def _ids(values):
    oids = (to_object_id(v) for v in values or [])
    return [oid for oid in oids if oid is not None]


def _stamp(group):
    return {
        "createdAt": group.created_at.isoformat() if group.created_at else None,
        "updatedAt": group.updated_at.isoformat() if group.updated_at else None,
    }


class _GroupDocument:
    collection_name = None

    @classmethod
    def collection(cls, db):
        return db[cls.collection_name]

    @classmethod
    def find_by_id(cls, db, group_id):
        oid = to_object_id(group_id)
        if oid is None:
            return None
        doc = cls.collection(db).find_one({"_id": oid})
        return cls.from_doc(doc) if doc else None

    def save(self, db):
        doc = self.to_dict()
        result = self.collection(db).insert_one(doc)
        self.id = result.inserted_id
        return self


class Department(_GroupDocument):
    collection_name = "departments"

    def __init__(self, name, hod=None, faculties=None, students=None,
                 id=None, created_at=None, updated_at=None):
        self.id = id
        self.name = name
        self.hod = to_object_id(hod)
        self.faculties = _ids(faculties)
        self.students = _ids(students)
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    @classmethod
    def from_doc(cls, doc):
        return cls(
            id=doc["_id"],
            name=doc.get("name"),
            hod=doc.get("hod"),
            faculties=doc.get("faculties"),
            students=doc.get("students"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "hod": self.hod,
            "faculties": self.faculties,
            "students": self.students,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class ClassGroup(_GroupDocument):
    collection_name = "class_groups"

    def __init__(self, name, year, batch, department, tutor=None, program_coordinator=None,
                 students=None, id=None, created_at=None, updated_at=None):
        self.id = id
        self.name = name
        self.year = year
        self.batch = batch
        self.department = to_object_id(department)
        # At most one of each at a time, both optional
        self.tutor = to_object_id(tutor)
        self.program_coordinator = to_object_id(program_coordinator)
        self.students = _ids(students)
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    @classmethod
    def from_doc(cls, doc):
        return cls(
            id=doc["_id"],
            name=doc.get("name"),
            year=doc.get("year"),
            batch=doc.get("batch"),
            department=doc.get("department"),
            tutor=doc.get("tutor"),
            program_coordinator=doc.get("program_coordinator"),
            students=doc.get("students"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    # Class groups where the user is tutor, coordinator or a student
    @classmethod
    def find_for_member(cls, db, user_id):
        query = {"$or": [
            {"tutor": user_id},
            {"program_coordinator": user_id},
            {"students": user_id},
        ]}
        return [cls.from_doc(doc) for doc in cls.collection(db).find(query).sort("name", 1)]

    def to_dict(self):
        return {
            "name": self.name,
            "year": self.year,
            "batch": self.batch,
            "department": self.department,
            "tutor": self.tutor,
            "program_coordinator": self.program_coordinator,
            "students": self.students,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_json(self):
        return {
            "_id": id_str(self.id),
            "name": self.name,
            "year": self.year,
            "batch": self.batch,
            "department": id_str(self.department),
            "tutor": id_str(self.tutor),
            "programCoordinator": id_str(self.program_coordinator),
            "studentCount": len(self.students),
            **_stamp(self),
        }


class CourseGroup(_GroupDocument):
    collection_name = "course_groups"

    def __init__(self, course_code, course_name, semester, class_group, faculty=None,
                 students=None, id=None, created_at=None, updated_at=None):
        self.id = id
        self.course_code = course_code
        self.course_name = course_name
        self.semester = semester
        self.class_group = to_object_id(class_group)
        self.faculty = to_object_id(faculty)
        self.students = _ids(students)
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    @classmethod
    def from_doc(cls, doc):
        return cls(
            id=doc["_id"],
            course_code=doc.get("course_code"),
            course_name=doc.get("course_name"),
            semester=doc.get("semester"),
            class_group=doc.get("class_group"),
            faculty=doc.get("faculty"),
            students=doc.get("students"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    @classmethod
    def for_class_group(cls, class_group, course_code, course_name, semester, faculty):
        """New course group whose student list is a copy of the class group's, taken now."""
        return cls(
            course_code=course_code,
            course_name=course_name,
            semester=semester,
            class_group=class_group.id,
            faculty=faculty,
            students=list(class_group.students),
        )

    @classmethod
    def find_for_member(cls, db, user_id):
        query = {"$or": [{"faculty": user_id}, {"students": user_id}]}
        return [cls.from_doc(doc) for doc in cls.collection(db).find(query).sort("course_code", 1)]

    def to_dict(self):
        return {
            "course_code": self.course_code,
            "course_name": self.course_name,
            "semester": self.semester,
            "class_group": self.class_group,
            "faculty": self.faculty,
            "students": self.students,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def to_json(self):
        return {
            "_id": id_str(self.id),
            "courseCode": self.course_code,
            "courseName": self.course_name,
            "semester": self.semester,
            "classGroup": id_str(self.class_group),
            "faculty": id_str(self.faculty),
            "students": [id_str(s) for s in self.students],
            **_stamp(self),
        }


GROUP_MODELS = {
    GroupType.DEPARTMENT: Department,
    GroupType.CLASS_GROUP: ClassGroup,
    GroupType.COURSE_GROUP: CourseGroup,
}
