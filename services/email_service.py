"""
services/email_service.py

Notification emails for the portal.

Delivery is simulated: the rendered payload is written to the log and, for
new-note notifications, a row is added to email_notifications. There is no
transport, retry or de-duplication; two calls for the same note record two
deliveries.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.orm import Session, joinedload, selectinload

from config.settings import settings
from models.classes import SchoolClass
from models.common import utcnow
from models.notes import DailyNote
from models.notifications import EmailNotification
from models.students import Student
from models.users import User
from schemas.notifications import EmailTemplate
from utils.exceptions import DispatchError, NotFoundError
from utils.formatting import long_date, person_name

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

NEW_NOTE = "new_note"


class EmailService:
    def __init__(
        self,
        db: Session,
        clock: Callable[[], datetime] = utcnow,
        app_url: str = settings.APP_URL,
        mail_from: str = settings.MAIL_FROM,
        template_dir: Path = TEMPLATE_DIR,
    ):
        self.db = db
        self.clock = clock
        self.app_url = app_url.rstrip("/")
        self.mail_from = mail_from
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )

    # ==========================================================
    # Templates
    # ==========================================================
    def _render(self, name: str, subject: str, **context) -> EmailTemplate:
        html = self.env.get_template(f"email/{name}.html").render(**context)
        text = self.env.get_template(f"email/{name}.txt").render(**context)
        return EmailTemplate(subject=subject, html=html, text=text)

    def build_new_note_email(self, note: DailyNote, parent: User) -> EmailTemplate:
        student = note.student
        student_name = person_name(student)
        note_date = long_date(note.note_date)
        school_class = getattr(student, "school_class", None)

        return self._render(
            "new_note",
            f"New Daily Note for {student_name} - {note_date}",
            parent_first_name=parent.first_name,
            student_name=student_name,
            teacher_name=person_name(note.teacher),
            note_title=note.title or "Daily Note",
            note_date=note_date,
            class_name=(school_class.name if school_class is not None else None) or "N/A",
            content=note.content,
            attachments=[a.file_name for a in note.attachments],
            dashboard_url=f"{self.app_url}/dashboard/parent",
        )

    def build_password_reset_email(self, user: User, reset_link: str) -> EmailTemplate:
        return self._render(
            "password_reset",
            "Password Reset Request - Parent-Teacher Communication System",
            first_name=user.first_name,
            reset_link=reset_link,
            expire_hours=settings.PASSWORD_RESET_EXPIRE_HOURS,
        )

    def build_welcome_email(self, user: User) -> EmailTemplate:
        return self._render(
            "welcome",
            "Welcome to Parent-Teacher Communication System",
            first_name=user.first_name,
            full_name=person_name(user),
            phone_number=user.phone_number,
            role=user.role,
            app_url=self.app_url,
        )

    # ==========================================================
    # Lookup / deliver
    # ==========================================================
    def _load_note(self, note_id: str) -> DailyNote:
        note = (
            self.db.query(DailyNote)
            .options(
                joinedload(DailyNote.student).joinedload(Student.parent),
                joinedload(DailyNote.student).joinedload(Student.school_class).joinedload(SchoolClass.school),
                joinedload(DailyNote.teacher),
                selectinload(DailyNote.attachments),
            )
            .filter(DailyNote.id == note_id)
            .first()
        )
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")
        if note.student is None:
            raise NotFoundError(f"Student for note {note_id} not found")
        if note.student.parent is None:
            raise NotFoundError(f"No parent found for student {note.student_id}")
        return note

    def _load_user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        if not user.email:
            raise NotFoundError(f"User {user_id} has no email address")
        return user

    def _deliver(self, to: str, template: EmailTemplate):
        logger.info(
            "Email would be sent: %s",
            {"to": to, "from": self.mail_from, "subject": template.subject, "html": template.html},
        )

    def send_new_note_notification(self, note_id: str) -> bool:
        """Resolve, render and record a new-note email. False on any failure."""
        try:
            note = self._load_note(note_id)
            parent = note.student.parent
            try:
                template = self.build_new_note_email(note, parent)
            except Exception as exc:
                raise DispatchError(f"Could not render notification for note {note_id}") from exc

            self._deliver(parent.email, template)
            self.db.add(
                EmailNotification(
                    user_id=parent.id,
                    note_id=note.id,
                    email_type=NEW_NOTE,
                    status="sent",
                    sent_at=self.clock(),
                )
            )
            self.db.commit()
            return True
        except NotFoundError as exc:
            logger.warning("Notification not sent: %s", exc.message)
        except Exception:
            logger.exception("Error sending email notification for note %s", note_id)
        self.db.rollback()
        return False

    def send_password_reset_email(self, user_id: str, reset_link: str) -> bool:
        try:
            user = self._load_user(user_id)
            self._deliver(user.email, self.build_password_reset_email(user, reset_link))
            return True
        except NotFoundError as exc:
            logger.warning("Password reset email not sent: %s", exc.message)
        except Exception:
            logger.exception("Error sending password reset email to user %s", user_id)
        return False

    def send_welcome_email(self, user_id: str) -> bool:
        try:
            user = self._load_user(user_id)
            self._deliver(user.email, self.build_welcome_email(user))
            return True
        except NotFoundError as exc:
            logger.warning("Welcome email not sent: %s", exc.message)
        except Exception:
            logger.exception("Error sending welcome email to user %s", user_id)
        return False
