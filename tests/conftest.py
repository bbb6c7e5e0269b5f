"""
Test configuration and fixtures.

Environment is set before the app is imported so that settings pick up an
in-memory sqlite database and fast bcrypt rounds.
"""
import os
from datetime import date

import pytest

os.environ["DB_URL_OVERRIDE"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-testing"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["REQUEST_LOG_JSON"] = "false"
os.environ["APP_URL"] = "https://portal.example.test"

from fastapi.testclient import TestClient  # noqa: E402

from database.db import Base, SessionLocal, engine, get_db, init_db  # noqa: E402
from main import app  # noqa: E402
from models.classes import SchoolClass, TeacherClass  # noqa: E402
from models.notes import DailyNote, NoteAttachment, NoteComment  # noqa: E402
from models.schools import School  # noqa: E402
from models.students import Student  # noqa: E402
from services.accounts import create_account  # noqa: E402
from services.storage import LocalFileStorage, get_storage  # noqa: E402
from utils.security import create_access_token  # noqa: E402


@pytest.fixture
def db():
    """Fresh schema per test, one session shared with the app."""
    init_db(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(str(tmp_path / "uploads"), max_bytes=64 * 1024)


@pytest.fixture
def client(db, storage):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="parent", first_name=None, last_name="Tester", email="auto", password="secret123"):
        counter["n"] += 1
        n = counter["n"]
        user = create_account(
            db,
            f"555-01{n:02d}",
            password,
            email=f"{role}{n}@example.test" if email == "auto" else email,
            first_name=first_name or f"{role.title()}{n}",
            last_name=last_name,
            role=role,
        )
        db.commit()
        db.refresh(user)
        return user

    return _make


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def school_graph(db, make_user):
    """School -> class (teacher assigned) -> student with a parent."""
    school = School(name="Maple Elementary")
    db.add(school)
    db.flush()
    school_class = SchoolClass(school_id=school.id, name="Grade 3A", grade_level="3", academic_year="2025-2026")
    db.add(school_class)
    db.flush()

    teacher = make_user("teacher", first_name="Grace", last_name="Hopper")
    parent = make_user("parent", first_name="Maria", last_name="Lopez")
    admin = make_user("admin", first_name="Ada", last_name="Admin")
    db.add(TeacherClass(teacher_id=teacher.id, class_id=school_class.id))

    student = Student(
        first_name="Ana",
        last_name="Lopez",
        student_id="S-1001",
        class_id=school_class.id,
        parent_id=parent.id,
    )
    db.add(student)
    db.commit()
    return {
        "school": school,
        "class": school_class,
        "teacher": teacher,
        "parent": parent,
        "admin": admin,
        "student": student,
    }


@pytest.fixture
def make_note(db, school_graph):
    def _make(
        content="Ana did great in reading today.",
        title="Reading",
        note_date=date(2025, 10, 15),
        status="published",
        student=None,
        teacher=None,
        attachments=(),
        comments=(),
    ):
        note = DailyNote(
            student_id=(student or school_graph["student"]).id,
            teacher_id=(teacher or school_graph["teacher"]).id,
            note_date=note_date,
            title=title,
            content=content,
            status=status,
        )
        db.add(note)
        db.flush()
        for name in attachments:
            db.add(NoteAttachment(note_id=note.id, file_name=name, file_path=f"notes/x/{name}", file_size=10))
        for author, text in comments:
            db.add(NoteComment(note_id=note.id, user_id=author.id, content=text))
        db.commit()
        db.refresh(note)
        return note

    return _make


@pytest.fixture
def headers_for():
    return auth_headers
