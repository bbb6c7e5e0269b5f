"""
CSV -> students import.

Columns: first_name, last_name, class_id, and optionally student_id,
date_of_birth (YYYY-MM-DD), parent_phone (matched against users.phone_number).

    python -m scripts.import_students data/students.csv
"""

import csv
import logging
import sys
from datetime import date

from sqlalchemy.orm import Session

from database.db import SessionLocal, init_db
from models.classes import SchoolClass
from models.students import Student as StudentModel
from models.users import User

logger = logging.getLogger(__name__)

CSV_PATH = "data/students.csv"


def import_students(db: Session, csv_path: str = CSV_PATH) -> int:
    """Insert one student per row; rows with an unknown class are skipped. Returns rows imported."""
    class_ids = {c.id for c in db.query(SchoolClass.id).all()}
    imported = 0

    with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for line_no, row in enumerate(reader, start=2):
            class_id = (row.get("class_id") or "").strip()
            if class_id not in class_ids:
                logger.warning("line %d: unknown class_id %r, skipped", line_no, class_id)
                continue

            parent_id = None
            parent_phone = (row.get("parent_phone") or "").strip()
            if parent_phone:
                parent = db.query(User).filter(User.phone_number == parent_phone, User.role == "parent").first()
                if parent is None:
                    logger.warning("line %d: no parent with phone %s", line_no, parent_phone)
                else:
                    parent_id = parent.id

            dob = (row.get("date_of_birth") or "").strip()
            db.add(
                StudentModel(
                    first_name=row["first_name"].strip(),
                    last_name=row["last_name"].strip(),
                    class_id=class_id,
                    student_id=(row.get("student_id") or "").strip() or None,
                    date_of_birth=date.fromisoformat(dob) if dob else None,
                    parent_id=parent_id,
                )
            )
            imported += 1

    db.commit()
    logger.info("Imported %d students from %s", imported, csv_path)
    return imported


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        count = import_students(db, sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
    finally:
        db.close()
    print(f"✅ students CSV -> DB import complete ({count} rows)")
