from datetime import date

from models.students import Student
from scripts.import_students import import_students


def test_import_links_class_and_parent(db, school_graph, tmp_path):
    class_id = school_graph["class"].id
    parent_phone = school_graph["parent"].phone_number
    csv_path = tmp_path / "students.csv"
    csv_path.write_text(
        "first_name,last_name,class_id,student_id,date_of_birth,parent_phone\n"
        f"Leo,Park,{class_id},S-2001,2017-04-02,{parent_phone}\n"
        f"Mia,Chen,{class_id},,,\n"
        "Zoe,Gray,no-such-class,S-2003,,\n",
        encoding="utf-8",
    )

    assert import_students(db, str(csv_path)) == 2

    leo = db.query(Student).filter_by(first_name="Leo").one()
    assert leo.student_id == "S-2001"
    assert leo.date_of_birth == date(2017, 4, 2)
    assert leo.parent_id == school_graph["parent"].id

    mia = db.query(Student).filter_by(first_name="Mia").one()
    assert mia.student_id is None
    assert mia.parent_id is None
    assert db.query(Student).filter_by(first_name="Zoe").first() is None


def test_unknown_parent_phone_imports_without_parent(db, school_graph, tmp_path):
    csv_path = tmp_path / "students.csv"
    csv_path.write_text(
        "first_name,last_name,class_id,parent_phone\n" f"Leo,Park,{school_graph['class'].id},000-0000\n",
        encoding="utf-8",
    )

    assert import_students(db, str(csv_path)) == 1
    assert db.query(Student).filter_by(first_name="Leo").one().parent_id is None
