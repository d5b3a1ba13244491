import itertools
from datetime import datetime, timedelta, timezone

import mongomock
import pytest

from campus_connect.app import create_app
from campus_connect.config import TestConfig
from campus_connect.models import User, Identity, Role, Department, ClassGroup, CourseGroup, Assignment
from campus_connect.utils.db import ensure_indexes
from campus_connect.utils.tokens import generate_token

PASSWORD = "secret123"

_seq = itertools.count(1)


@pytest.fixture()
def db():
    """Fresh in-memory database per test."""
    database = mongomock.MongoClient()["campus_connect_test"]
    ensure_indexes(database)
    return database


@pytest.fixture()
def app(db):
    return create_app(TestConfig, db=db)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(db):
    def _make_user(role=Role.STUDENT, **overrides):
        n = next(_seq)
        role = Role(role)
        fields = {
            "name": f"{role.value.title()} {n}",
            "email": f"{role.value}{n}@campus.test",
            "password": PASSWORD,
            "role": role,
            "department": "CSE",
        }
        if role is Role.STUDENT:
            fields.update(class_group="CSE-2024", batch="A", year="2")
        fields.update(overrides)
        return Identity.from_doc(User(**fields).save(db))
    return _make_user


@pytest.fixture()
def make_department(db):
    def _make_department(**overrides):
        fields = {"name": f"Department {next(_seq)}"}
        fields.update(overrides)
        return Department(**fields).save(db)
    return _make_department


@pytest.fixture()
def make_class_group(db, make_department):
    def _make_class_group(**overrides):
        fields = {"name": f"CSE-{next(_seq)}", "year": 2, "batch": "A"}
        fields.update(overrides)
        if "department" not in fields:
            fields["department"] = make_department().id
        return ClassGroup(**fields).save(db)
    return _make_class_group


@pytest.fixture()
def make_course_group(db, make_class_group):
    def _make_course_group(**overrides):
        fields = {"course_code": f"CS{100 + next(_seq)}", "course_name": "Data Structures", "semester": 3}
        fields.update(overrides)
        if "class_group" not in fields:
            fields["class_group"] = make_class_group().id
        return CourseGroup(**fields).save(db)
    return _make_course_group


@pytest.fixture()
def make_assignment(db, make_user, make_course_group):
    def _make_assignment(**overrides):
        course = make_course_group()
        fields = {
            "title": f"Assignment {next(_seq)}",
            "description": "Implement a linked list",
            "due_date": datetime.now(timezone.utc) + timedelta(days=7),
            "course_id": course.id,
            "course_name": course.course_name,
            "faculty_id": make_user(Role.FACULTY).id,
        }
        fields.update(overrides)
        return Assignment(**fields).save(db)
    return _make_assignment


@pytest.fixture()
def auth_headers(app):
    """Bearer headers for an identity (or a raw user id)."""
    def _auth_headers(user):
        user_id = getattr(user, "id", user)
        with app.app_context():
            token = generate_token(user_id)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
