from datetime import datetime, timezone

from pymongo import ASCENDING
from werkzeug.security import generate_password_hash, check_password_hash

from campus_connect.models.roles import Role
from campus_connect.utils.db import to_object_id, id_str

DEFAULT_PROFILE_IMAGE = "default-profile.png"


class User:

    @staticmethod
    def collection(db):
        return db.users

    def __init__(self, name, email, password, role=Role.STUDENT, department=None,
                 class_group=None, batch=None, year=None, profile_image=None,
                 created_at=None, updated_at=None):
        self.name = name
        self.email = email
        self.password = generate_password_hash(password)
        self.role = Role(role)
        self.department = department

        # Only meaningful for students
        self.class_group = class_group
        self.batch = batch
        self.year = year

        self.profile_image = profile_image or DEFAULT_PROFILE_IMAGE
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    # Convert to dictionary for MongoDB
    def to_dict(self):
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "role": self.role.value,
            "department": self.department,
            "class_group": self.class_group,
            "batch": self.batch,
            "year": self.year,
            "profile_image": self.profile_image,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    # Save new user, returns the stored document
    def save(self, db):
        doc = self.to_dict()
        result = self.collection(db).insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    # Find user by ID (None for unknown or malformed ids)
    @staticmethod
    def find_by_id(db, user_id):
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return User.collection(db).find_one({"_id": oid})

    # Find user by email
    @staticmethod
    def find_by_email(db, email):
        return User.collection(db).find_one({"email": email})

    @staticmethod
    def find_all(db):
        return list(User.collection(db).find().sort("name", ASCENDING))

    # Verify password
    @staticmethod
    def verify_password(db, email, password):
        user = User.find_by_email(db, email)
        if user and password and check_password_hash(user["password"], password):
            return user
        return None

    @staticmethod
    def update(db, user_id, fields):
        """Apply a partial update; a plain-text "password" entry is hashed first."""
        changes = dict(fields)
        if changes.get("password"):
            changes["password"] = generate_password_hash(changes["password"])
        changes["updated_at"] = datetime.now(timezone.utc)

        User.collection(db).update_one({"_id": to_object_id(user_id)}, {"$set": changes})
        return User.find_by_id(db, user_id)


class Identity:
    """The authenticated caller, resolved from a bearer token to a user document."""

    def __init__(self, id, name, email, role, department=None, class_group=None,
                 batch=None, year=None, profile_image=None, created_at=None, updated_at=None):
        self.id = id
        self.name = name
        self.email = email
        self.role = role
        self.department = department
        self.class_group = class_group
        self.batch = batch
        self.year = year
        self.profile_image = profile_image
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_doc(cls, doc):
        role = Role.parse(doc.get("role"))
        if role is None:
            raise ValueError(f"User {doc.get('_id')} has unknown role {doc.get('role')!r}")

        return cls(
            id=doc["_id"],
            name=doc.get("name"),
            email=doc.get("email"),
            role=role,
            department=doc.get("department"),
            class_group=doc.get("class_group"),
            batch=doc.get("batch"),
            year=doc.get("year"),
            profile_image=doc.get("profile_image"),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )

    @property
    def is_admin(self):
        return self.role is Role.ADMIN

    # Public view, never includes the password hash
    def to_json(self):
        return {
            "_id": id_str(self.id),
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
            "classGroup": self.class_group,
            "batch": self.batch,
            "year": self.year,
            "profileImage": self.profile_image,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Identity {self.id} {self.role.value}>"
