import math

from campus_connect.models.groups import GroupType
from campus_connect.models.messages import Message
from campus_connect.services.access_control import AccessControl, GroupAction
from campus_connect.utils.errors import ValidationError
from campus_connect.utils.validation import positive_int


class MessageService:

    def __init__(self, db, access=None, default_limit=50, max_limit=100):
        self.db = db
        self.access = access or AccessControl(db)
        self.default_limit = default_limit
        self.max_limit = max_limit

    def send_message(self, identity, group_type, group_id, content):
        if isinstance(content, str):
            content = content.strip()

        self.access.authorize_group_operation(
            identity, group_type, group_id, action=GroupAction.SEND, content=content
        ).raise_for_denial()

        if not isinstance(content, str):
            raise ValidationError("content must be a string")

        message = Message(
            sender=identity.id,
            sender_name=identity.name,
            sender_role=identity.role.value,
            group_type=GroupType(group_type),
            group_id=group_id,
            content=content,
        )
        return message.save(self.db)

    def get_messages(self, identity, group_type, group_id, page=None, limit=None):
        """Return (messages, pagination) for one page of a group's history, newest first."""
        self.access.authorize_group_operation(
            identity, group_type, group_id, action=GroupAction.READ
        ).raise_for_denial()

        page = positive_int(page, "page") if page not in (None, "") else 1
        limit = positive_int(limit, "limit") if limit not in (None, "") else self.default_limit
        limit = min(limit, self.max_limit)

        total = Message.count_for_group(self.db, group_type, group_id)

        # Pages past the end are empty; the skip for a huge page would not fit in an int64
        if (page - 1) * limit >= total:
            messages = []
        else:
            messages = Message.find_for_group(self.db, group_type, group_id, page=page, limit=limit)

        pagination = {
            "total": total,
            "page": page,
            "pages": math.ceil(total / limit),
            "limit": limit,
        }
        return messages, pagination
