"""
POST /v1/notifications/send status matrix and delivery records.
"""
from models.auth_accounts import AuthAccount
from models.notifications import EmailNotification
from utils.security import create_access_token

URL = "/v1/notifications/send"


def test_requires_authentication(client, make_note):
    note = make_note()
    response = client.post(URL, json={"noteId": note.id})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_rejects_garbage_token(client, make_note):
    response = client.post(URL, json={"noteId": make_note().id}, headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_parents_are_forbidden(client, make_note, school_graph, headers_for):
    response = client.post(URL, json={"noteId": make_note().id}, headers=headers_for(school_graph["parent"]))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


def test_missing_user_record(client, db, make_note):
    account = AuthAccount(phone_number="555-9999", password_hash="x")
    db.add(account)
    db.commit()
    headers = {"Authorization": f"Bearer {create_access_token(account.id)}"}

    response = client.post(URL, json={"noteId": make_note().id}, headers=headers)
    assert response.status_code == 404


def test_missing_note_id(client, school_graph, headers_for):
    headers = headers_for(school_graph["teacher"])

    assert client.post(URL, json={}, headers=headers).status_code == 400
    assert client.post(URL, json={"noteId": ""}, headers=headers).status_code == 400
    assert client.post(URL, headers=headers).status_code == 400


def test_unknown_note_fails_without_side_effects(client, db, school_graph, headers_for):
    response = client.post(URL, json={"noteId": "abc"}, headers=headers_for(school_graph["teacher"]))

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send notification"}
    assert db.query(EmailNotification).count() == 0


def test_teacher_dispatch(client, db, make_note, school_graph, headers_for):
    note = make_note()
    response = client.post(URL, json={"noteId": note.id}, headers=headers_for(school_graph["teacher"]))

    assert response.status_code == 200
    assert response.json() == {"success": True}
    record = db.query(EmailNotification).one()
    assert record.note_id == note.id
    assert record.user_id == school_graph["parent"].id


def test_admin_dispatch_twice_records_twice(client, db, make_note, school_graph, headers_for):
    note = make_note()
    headers = headers_for(school_graph["admin"])

    assert client.post(URL, json={"noteId": note.id}, headers=headers).status_code == 200
    assert client.post(URL, json={"noteId": note.id}, headers=headers).status_code == 200
    assert db.query(EmailNotification).filter_by(note_id=note.id).count() == 2


def test_admin_lists_delivery_records(client, make_note, school_graph, headers_for):
    note = make_note()
    headers = headers_for(school_graph["admin"])
    client.post(URL, json={"noteId": note.id}, headers=headers)

    response = client.get("/v1/notifications/", params={"note_id": note.id}, headers=headers)
    body = response.json()

    assert response.status_code == 200
    assert body["meta"]["total"] == 1
    assert body["data"][0]["email_type"] == "new_note"

    teacher_view = client.get("/v1/notifications/", headers=headers_for(school_graph["teacher"]))
    assert teacher_view.status_code == 403
