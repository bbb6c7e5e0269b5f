"""
Schools, classes, users and students administration.
"""


class TestSchools:
    def test_crud_and_soft_delete(self, client, school_graph, headers_for):
        headers = headers_for(school_graph["admin"])

        created = client.post("/v1/schools/", json={"name": "Oak Primary", "address": "1 Oak St"}, headers=headers)
        assert created.status_code == 201
        school_id = created.json()["data"]["id"]

        renamed = client.put(f"/v1/schools/{school_id}", json={"name": "Oak Primary School"}, headers=headers)
        assert renamed.json()["data"]["name"] == "Oak Primary School"
        assert renamed.json()["data"]["address"] == "1 Oak St"

        assert client.delete(f"/v1/schools/{school_id}", headers=headers).status_code == 200
        active = client.get("/v1/schools/", headers=headers).json()["data"]
        everything = client.get("/v1/schools/", params={"include_inactive": "true"}, headers=headers).json()["data"]
        assert [s["name"] for s in active] == ["Maple Elementary"]
        assert len(everything) == 2

    def test_only_admins_write(self, client, school_graph, headers_for):
        response = client.post("/v1/schools/", json={"name": "X"}, headers=headers_for(school_graph["teacher"]))
        assert response.status_code == 403

    def test_unknown_school(self, client, school_graph, headers_for):
        response = client.get("/v1/schools/missing", headers=headers_for(school_graph["parent"]))

        assert response.status_code == 404
        assert response.json()["error"] == {"code": "NOT_FOUND", "message": "School not found"}


class TestClasses:
    def test_create_and_assign_teacher(self, client, make_user, school_graph, headers_for):
        headers = headers_for(school_graph["admin"])
        teacher = make_user("teacher")

        created = client.post(
            "/v1/classes/",
            json={"school_id": school_graph["school"].id, "name": "Grade 4B", "academic_year": "2025-2026"},
            headers=headers,
        )
        assert created.status_code == 201
        class_id = created.json()["data"]["id"]

        assigned = client.post(f"/v1/classes/{class_id}/teachers", json={"teacher_id": teacher.id}, headers=headers)
        assert assigned.status_code == 201
        again = client.post(f"/v1/classes/{class_id}/teachers", json={"teacher_id": teacher.id}, headers=headers)
        assert again.status_code == 400

        mine = client.get("/v1/classes/", headers=headers_for(teacher)).json()["data"]
        assert [c["name"] for c in mine] == ["Grade 4B"]

        removed = client.delete(f"/v1/classes/{class_id}/teachers/{teacher.id}", headers=headers)
        assert removed.status_code == 200
        assert client.get("/v1/classes/", headers=headers_for(teacher)).json()["data"] == []

    def test_unknown_school(self, client, school_graph, headers_for):
        response = client.post(
            "/v1/classes/",
            json={"school_id": "missing", "name": "Grade 1", "academic_year": "2025-2026"},
            headers=headers_for(school_graph["admin"]),
        )
        assert response.status_code == 400

    def test_only_teachers_can_be_assigned(self, client, school_graph, headers_for):
        response = client.post(
            f"/v1/classes/{school_graph['class'].id}/teachers",
            json={"teacher_id": school_graph["parent"].id},
            headers=headers_for(school_graph["admin"]),
        )
        assert response.status_code == 400

    def test_class_roster(self, client, make_user, school_graph, headers_for):
        url = f"/v1/classes/{school_graph['class'].id}/students"

        roster = client.get(url, headers=headers_for(school_graph["teacher"])).json()["data"]
        assert [s["student_id"] for s in roster] == ["S-1001"]
        assert client.get(url, headers=headers_for(make_user("teacher"))).status_code == 403

    def test_parent_sees_childs_class(self, client, school_graph, headers_for):
        data = client.get("/v1/classes/", headers=headers_for(school_graph["parent"])).json()["data"]
        assert [c["id"] for c in data] == [school_graph["class"].id]


class TestUsers:
    def test_admin_creates_teacher_who_can_log_in(self, client, school_graph, headers_for):
        response = client.post(
            "/v1/users/",
            json={
                "phone_number": "555-3000",
                "password": "teach123",
                "first_name": "Alan",
                "last_name": "Turing",
                "role": "teacher",
            },
            headers=headers_for(school_graph["admin"]),
        )
        assert response.status_code == 201
        assert response.json()["data"]["role"] == "teacher"

        login = client.post("/v1/auth/login", json={"phone_number": "555-3000", "password": "teach123"})
        assert login.status_code == 200

    def test_search_and_filter(self, client, school_graph, headers_for):
        headers = headers_for(school_graph["admin"])

        teachers = client.get("/v1/users/", params={"role": "teacher"}, headers=headers).json()
        assert [u["last_name"] for u in teachers["data"]] == ["Hopper"]

        found = client.get("/v1/users/", params={"search": "lop"}, headers=headers).json()
        assert [u["first_name"] for u in found["data"]] == ["Maria"]

    def test_deactivate(self, client, school_graph, headers_for):
        parent = school_graph["parent"]
        response = client.put(
            f"/v1/users/{parent.id}", json={"is_active": False}, headers=headers_for(school_graph["admin"])
        )

        assert response.json()["data"]["is_active"] is False
        assert client.get("/v1/auth/me", headers=headers_for(parent)).status_code == 403

    def test_unknown_user(self, client, school_graph, headers_for):
        response = client.put("/v1/users/missing", json={"is_active": False}, headers=headers_for(school_graph["admin"]))
        assert response.status_code == 404


class TestStudents:
    def test_teacher_adds_student_to_own_class(self, client, school_graph, headers_for):
        response = client.post(
            "/v1/students/",
            json={"first_name": "Leo", "last_name": "Park", "class_id": school_graph["class"].id},
            headers=headers_for(school_graph["teacher"]),
        )
        assert response.status_code == 201

    def test_parent_reference_must_be_a_parent(self, client, school_graph, headers_for):
        response = client.post(
            "/v1/students/",
            json={
                "first_name": "Leo",
                "last_name": "Park",
                "class_id": school_graph["class"].id,
                "parent_id": school_graph["teacher"].id,
            },
            headers=headers_for(school_graph["admin"]),
        )
        assert response.status_code == 400

    def test_parent_sees_own_children_only(self, client, make_user, school_graph, headers_for):
        student = school_graph["student"]

        mine = client.get("/v1/students/", headers=headers_for(school_graph["parent"])).json()
        assert [s["id"] for s in mine["data"]] == [student.id]
        assert client.get(f"/v1/students/{student.id}", headers=headers_for(make_user("parent"))).status_code == 403

    def test_deactivate_keeps_notes(self, client, make_note, school_graph, headers_for):
        note = make_note()
        student = school_graph["student"]

        response = client.delete(f"/v1/students/{student.id}", headers=headers_for(school_graph["admin"]))
        assert response.status_code == 200
        assert client.get(f"/v1/notes/{note.id}", headers=headers_for(school_graph["admin"])).status_code == 200
