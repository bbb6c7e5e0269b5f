from datetime import date


def test_parent_dashboard(client, make_note, school_graph, headers_for):
    make_note(title="Visible", note_date=date(2025, 10, 1))
    make_note(title="Draft", status="draft")

    response = client.get("/v1/dashboard/parent", headers=headers_for(school_graph["parent"]))
    data = response.json()["data"]

    assert response.status_code == 200
    assert [s["first_name"] for s in data["students"]] == ["Ana"]
    assert [n["title"] for n in data["recent_notes"]] == ["Visible"]
    assert data["total_notes"] == 1


def test_teacher_dashboard(client, make_note, school_graph, headers_for):
    make_note(title="Sent")
    make_note(title="Pending", status="draft")

    data = client.get("/v1/dashboard/teacher", headers=headers_for(school_graph["teacher"])).json()["data"]

    assert [c["name"] for c in data["classes"]] == ["Grade 3A"]
    assert [s["first_name"] for s in data["students"]] == ["Ana"]
    assert [n["title"] for n in data["recent_notes"]] == ["Sent"]
    assert [n["title"] for n in data["pending_notes"]] == ["Pending"]


def test_admin_dashboard(client, make_note, school_graph, headers_for):
    make_note()
    headers = headers_for(school_graph["admin"])
    client.post("/v1/schools/", json={"name": "Oak Primary"}, headers=headers)

    data = client.get("/v1/dashboard/admin", headers=headers).json()["data"]

    assert data["total_users"] == 3
    assert data["total_students"] == 1
    assert data["total_notes"] == 1
    assert [s["name"] for s in data["schools"]] == ["Maple Elementary", "Oak Primary"]
    assert data["recent_activity"][0]["action"] == "school.created"


def test_dashboards_are_role_specific(client, school_graph, headers_for):
    assert client.get("/v1/dashboard/admin", headers=headers_for(school_graph["teacher"])).status_code == 403
    assert client.get("/v1/dashboard/teacher", headers=headers_for(school_graph["parent"])).status_code == 403
    assert client.get("/v1/dashboard/parent", headers=headers_for(school_graph["admin"])).status_code == 403
