from datetime import datetime, timezone

from pymongo import DESCENDING

from campus_connect.models.groups import GroupType
from campus_connect.utils.db import to_object_id, id_str


class Message:
    """A group chat message. Messages are append-only: never updated or deleted."""

    @staticmethod
    def collection(db):
        return db.messages

    def __init__(self, sender, sender_name, sender_role, group_type, group_id, content, timestamp=None):
        self.sender = to_object_id(sender)
        self.sender_name = sender_name
        self.sender_role = sender_role
        self.group_type = GroupType(group_type)
        self.group_id = to_object_id(group_id)
        self.content = content
        self.timestamp = timestamp or datetime.now(timezone.utc)

    def to_dict(self):
        return {
            "sender": self.sender,
            "sender_name": self.sender_name,
            "sender_role": self.sender_role,
            "group_type": self.group_type.value,
            "group_id": self.group_id,
            "content": self.content,
            "timestamp": self.timestamp,
        }

    # Insert, returns the stored document
    def save(self, db):
        doc = self.to_dict()
        result = self.collection(db).insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    @staticmethod
    def _group_query(group_type, group_id):
        return {"group_type": GroupType(group_type).value, "group_id": to_object_id(group_id)}

    # Newest first; _id breaks ties between messages stored in the same millisecond
    @staticmethod
    def find_for_group(db, group_type, group_id, page=1, limit=50):
        cursor = (
            Message.collection(db)
            .find(Message._group_query(group_type, group_id))
            .sort([("timestamp", DESCENDING), ("_id", DESCENDING)])
            .skip((page - 1) * limit)
            .limit(limit)
        )
        return list(cursor)

    @staticmethod
    def count_for_group(db, group_type, group_id):
        return Message.collection(db).count_documents(Message._group_query(group_type, group_id))

    @staticmethod
    def to_json(doc):
        timestamp = doc.get("timestamp")
        return {
            "_id": id_str(doc.get("_id")),
            "sender": id_str(doc.get("sender")),
            "senderName": doc.get("sender_name"),
            "senderRole": doc.get("sender_role"),
            "groupType": doc.get("group_type"),
            "groupId": id_str(doc.get("group_id")),
            "content": doc.get("content"),
            "timestamp": timestamp.isoformat() if timestamp else None,
        }
