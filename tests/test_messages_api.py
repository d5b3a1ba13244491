import re

import pytest
from bson import ObjectId

from campus_connect.models import Role, Message


@pytest.fixture()
def department_with_members(make_user, make_department):
    faculty = make_user(Role.FACULTY)
    student = make_user(Role.STUDENT)
    dept = make_department(faculties=[faculty.id], students=[student.id])
    return dept, faculty, student


def send(client, headers, **body):
    return client.post("/api/v1/messages/send", json=body, headers=headers)


def test_faculty_member_sends_to_department(client, auth_headers, department_with_members):
    dept, faculty, _ = department_with_members

    res = send(client, auth_headers(faculty), groupType="Department", groupId=str(dept.id), content="hi")

    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    assert body["message"]["sender"] == str(faculty.id)
    assert body["message"]["senderRole"] == "faculty"
    assert body["message"]["groupType"] == "Department"
    assert body["message"]["content"] == "hi"


def test_unaffiliated_faculty_cannot_send(client, auth_headers, make_user, department_with_members):
    dept, _, _ = department_with_members
    outsider = make_user(Role.FACULTY)

    res = send(client, auth_headers(outsider), groupType="Department", groupId=str(dept.id), content="hi")

    assert res.status_code == 403
    assert res.get_json()["success"] is False
    assert re.search(r"do not have permission", res.get_json()["message"], re.I)


def test_student_sends_to_department(client, auth_headers, department_with_members):
    dept, _, student = department_with_members
    res = send(client, auth_headers(student), groupType="Department", groupId=str(dept.id), content="hello")
    assert res.status_code == 201


def test_admin_cannot_send_even_with_missing_fields(client, auth_headers, make_user):
    res = send(client, auth_headers(make_user(Role.ADMIN)), groupType="Department")
    assert res.status_code == 403
    assert res.get_json()["message"] == "Admin users are not allowed to send messages"


def test_send_requires_content(client, auth_headers, department_with_members):
    dept, faculty, _ = department_with_members
    res = send(client, auth_headers(faculty), groupType="Department", groupId=str(dept.id), content="   ")
    assert res.status_code == 400
    assert res.get_json()["message"] == "Please provide groupType, groupId and content"


def test_send_to_missing_group_is_forbidden(client, auth_headers, make_user):
    res = send(client, auth_headers(make_user(Role.STUDENT)),
               groupType="ClassGroup", groupId=str(ObjectId()), content="anyone?")
    assert res.status_code == 403


def test_send_requires_token(client):
    res = client.post("/api/v1/messages/send", json={"groupType": "Department"})
    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Not authorized, no token provided"}


def test_get_requires_group_type_and_id(client, auth_headers, make_user):
    res = client.get("/api/v1/messages?groupType=Department", headers=auth_headers(make_user(Role.STUDENT)))
    assert res.status_code == 400
    assert re.search(r"provide groupType and groupId", res.get_json()["message"], re.I)


def test_admin_cannot_read(client, auth_headers, make_user, department_with_members):
    dept, _, _ = department_with_members
    res = client.get(f"/api/v1/messages?groupType=Department&groupId={dept.id}",
                     headers=auth_headers(make_user(Role.ADMIN)))
    assert res.status_code == 403
    assert res.get_json()["message"] == "Admin users are not allowed to read messages"


def test_non_member_cannot_read(client, auth_headers, make_user, make_class_group):
    group = make_class_group(students=[make_user(Role.STUDENT).id])
    res = client.get(f"/api/v1/messages?groupType=ClassGroup&groupId={group.id}",
                     headers=auth_headers(make_user(Role.STUDENT)))
    assert res.status_code == 403
    assert "do not have permission to access messages" in res.get_json()["message"]


def test_sent_message_is_returned_first(client, auth_headers, department_with_members):
    dept, faculty, student = department_with_members
    for text in ("first", "second"):
        assert send(client, auth_headers(faculty), groupType="Department",
                    groupId=str(dept.id), content=text).status_code == 201

    res = send(client, auth_headers(student), groupType="Department", groupId=str(dept.id), content="latest")
    new_id = res.get_json()["message"]["_id"]

    res = client.get(f"/api/v1/messages?groupType=Department&groupId={dept.id}", headers=auth_headers(faculty))
    assert res.status_code == 200
    messages = res.get_json()["messages"]
    assert [m["content"] for m in messages] == ["latest", "second", "first"]
    assert messages[0]["_id"] == new_id


def test_repeated_reads_are_identical(client, auth_headers, department_with_members):
    dept, faculty, _ = department_with_members
    for i in range(5):
        send(client, auth_headers(faculty), groupType="Department", groupId=str(dept.id), content=f"m{i}")

    url = f"/api/v1/messages?groupType=Department&groupId={dept.id}&page=1&limit=3"
    first = client.get(url, headers=auth_headers(faculty)).get_json()
    second = client.get(url, headers=auth_headers(faculty)).get_json()

    assert first == second


def test_pagination(client, auth_headers, department_with_members):
    dept, faculty, _ = department_with_members
    for i in range(5):
        send(client, auth_headers(faculty), groupType="Department", groupId=str(dept.id), content=f"m{i}")

    res = client.get(f"/api/v1/messages?groupType=Department&groupId={dept.id}&page=2&limit=2",
                     headers=auth_headers(faculty))
    body = res.get_json()

    assert res.status_code == 200
    assert [m["content"] for m in body["messages"]] == ["m2", "m1"]
    assert body["pagination"] == {"total": 5, "page": 2, "pages": 3, "limit": 2}


def test_messages_are_scoped_to_their_group(client, auth_headers, make_user, make_department):
    faculty = make_user(Role.FACULTY)
    first = make_department(faculties=[faculty.id])
    other = make_department(faculties=[faculty.id])
    send(client, auth_headers(faculty), groupType="Department", groupId=str(first.id), content="only here")

    res = client.get(f"/api/v1/messages?groupType=Department&groupId={other.id}", headers=auth_headers(faculty))
    assert res.get_json()["messages"] == []
    assert res.get_json()["pagination"]["total"] == 0


@pytest.mark.parametrize("query", ["page=0", "limit=abc", "page=-1"])
def test_invalid_paging_rejected(client, auth_headers, department_with_members, query):
    dept, faculty, _ = department_with_members
    res = client.get(f"/api/v1/messages?groupType=Department&groupId={dept.id}&{query}",
                     headers=auth_headers(faculty))
    assert res.status_code == 400


def test_limit_is_capped(client, app, auth_headers, department_with_members):
    dept, faculty, _ = department_with_members
    res = client.get(f"/api/v1/messages?groupType=Department&groupId={dept.id}&limit=100000",
                     headers=auth_headers(faculty))
    assert res.get_json()["pagination"]["limit"] == app.config["MESSAGES_MAX_LIMIT"]


def test_class_group_tutor_reads_messages(client, auth_headers, make_user, make_class_group):
    tutor = make_user(Role.FACULTY)
    student = make_user(Role.STUDENT)
    group = make_class_group(tutor=tutor.id, students=[student.id])
    send(client, auth_headers(student), groupType="ClassGroup", groupId=str(group.id), content="question")

    res = client.get(f"/api/v1/messages?groupType=ClassGroup&groupId={group.id}", headers=auth_headers(tutor))
    assert res.status_code == 200
    assert res.get_json()["messages"][0]["senderName"] == student.name


def test_page_past_the_end_is_empty(client, auth_headers, department_with_members, monkeypatch):
    dept, faculty, _ = department_with_members
    send(client, auth_headers(faculty), groupType="Department", groupId=str(dept.id), content="only one")

    original = Message.find_for_group

    # The real driver cannot encode a skip beyond int64
    def bounded_find(db, group_type, group_id, page=1, limit=50):
        if (page - 1) * limit >= 2 ** 63:
            raise OverflowError("MongoDB can only handle up to 8-byte ints")
        return original(db, group_type, group_id, page=page, limit=limit)

    monkeypatch.setattr(Message, "find_for_group", staticmethod(bounded_find))

    res = client.get(f"/api/v1/messages?groupType=Department&groupId={dept.id}&page={10 ** 20}",
                     headers=auth_headers(faculty))

    assert res.status_code == 200
    body = res.get_json()
    assert body["messages"] == []
    assert body["pagination"]["total"] == 1
    assert body["pagination"]["page"] == 10 ** 20
