"""
services/report_compiler.py

Builds the downloadable notes report for one student.

- layout()      : cursor based page layout -> ReportLayout (pure, testable)
- render_html() : ReportLayout -> HTML via the Jinja2 template
- compile()     : HTML -> PDF bytes via WeasyPrint

Lines are broken by measured glyph widths (services/font_metrics.py) so no
line is wider than its column; the template draws them unwrapped.
Timestamps are shown in the configured display timezone.

Missing optional data (names, class, dates) renders as blanks; the compiler
never raises for it. Notes are laid out in the order they are given.
"""

import logging
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Callable, Iterable, List, Optional
from zoneinfo import ZoneInfo

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config.settings import settings
from models.common import utcnow
from schemas.reports import ReportLayout, ReportPage, Rule, TextLine
from services.font_metrics import HELVETICA, PT_TO_MM, FontMetrics
from utils.formatting import month_day_time, person_name, short_date, short_datetime, to_zone

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

# A4 geometry (mm)
PAGE_WIDTH = 210
TOP = 20
MARGIN = 20
PAGE_HEIGHT = 280          # last baseline allowed before a page break
RULE_RIGHT = 190
BODY_WIDTH = 170
INDENT = 5
COMMENT_WIDTH = 160
FOOTER_X = 190
FOOTER_Y = 290

REPORT_TITLE = "Parent-Teacher Communication Report"
NO_NOTES = "No notes found for the selected period."
SEPARATOR_GREY = (200, 200, 200)


def _split_word(word: str, fits: Callable[[str], bool]) -> List[str]:
    pieces = [""]
    for ch in word:
        if pieces[-1] and not fits(pieces[-1] + ch):
            pieces.append(ch)
        else:
            pieces[-1] += ch
    return pieces


def wrap_text(
    text: Optional[str],
    width_mm: float,
    size_pt: float,
    bold: bool = False,
    metrics: FontMetrics = HELVETICA,
) -> List[str]:
    """Split text into lines whose measured width fits width_mm at size_pt."""

    def fits(candidate: str) -> bool:
        return metrics.text_width(candidate, size_pt, bold) <= width_mm

    lines: List[str] = []
    for paragraph in (text or "").splitlines() or [""]:
        if fits(paragraph):
            lines.append(paragraph)
            continue
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if fits(candidate):
                current = candidate
                continue
            if current:
                lines.append(current)
            pieces = _split_word(word, fits)
            lines.extend(pieces[:-1])
            current = pieces[-1]
        lines.append(current)
    return lines


class _PageWriter:
    """Vertical cursor over a growing list of pages (one per layout call)."""

    def __init__(self):
        self.pages: List[ReportPage] = [ReportPage(number=1)]
        self.y: float = TOP

    @property
    def page(self) -> ReportPage:
        return self.pages[-1]

    def new_page(self):
        self.pages.append(ReportPage(number=len(self.pages) + 1))
        self.y = TOP

    def ensure(self, height: float):
        """Break before a block of `height` mm that would cross the threshold."""
        if self.y > TOP and self.y + height > PAGE_HEIGHT:
            self.new_page()

    def text(self, text: str, advance: float, x: float = MARGIN, **style):
        if self.y > PAGE_HEIGHT:
            self.new_page()
        if text:
            self.page.lines.append(TextLine(x=x, y=self.y, text=text, **style))
        self.y += advance

    def paragraph(self, lines: Iterable[str], line_height: float, x: float = MARGIN, **style):
        for line in lines:
            self.text(line, line_height, x=x, **style)

    def rule(self, width: float, color=(0, 0, 0)):
        if self.y > PAGE_HEIGHT:
            self.new_page()
        self.page.rules.append(Rule(x1=MARGIN, x2=RULE_RIGHT, y=self.y, width=width, color=color))

    def skip(self, height: float):
        self.y += height


class ReportCompiler:
    def __init__(
        self,
        clock: Callable[[], datetime] = utcnow,
        tz: Optional[tzinfo] = None,
        font_path: Optional[str] = settings.REPORT_FONT_PATH,
        bold_font_path: Optional[str] = settings.REPORT_FONT_BOLD_PATH,
        template_dir: Path = TEMPLATE_DIR,
    ):
        self.clock = clock
        self.tz = tz or ZoneInfo(settings.DISPLAY_TIMEZONE)

        # measured fonts are embedded so the PDF draws with the same widths
        self.font_faces = []
        if font_path:
            self.metrics = FontMetrics.from_font_file(font_path, bold_font_path)
            self.font_faces = [
                {"weight": "normal", "url": Path(font_path).resolve().as_uri()},
                {"weight": "bold", "url": Path(bold_font_path or font_path).resolve().as_uri()},
            ]
        else:
            self.metrics = HELVETICA

        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.globals["box_top"] = _box_top
        self.env.globals["page_width"] = PAGE_WIDTH

    def _wrap(self, text: Optional[str], width_mm: float, size_pt: float, bold: bool = False) -> List[str]:
        return wrap_text(text, width_mm, size_pt, bold=bold, metrics=self.metrics)

    def _now(self) -> datetime:
        return to_zone(self.clock(), self.tz)

    # ==========================================================
    # Layout
    # ==========================================================
    def layout(
        self,
        student,
        notes,
        date_from=None,
        date_to=None,
        include_comments: bool = True,
        include_attachments: bool = True,
    ) -> ReportLayout:
        writer = _PageWriter()
        self._add_header(writer, student, date_from, date_to)

        notes = list(notes or [])
        if not notes:
            writer.text(NO_NOTES, 6, size=12, style="italic")
        else:
            for note in notes:
                self._add_note(writer, note, include_comments, include_attachments)

        self._add_footers(writer.pages)
        return ReportLayout(pages=writer.pages)

    def _header_line(self, w: _PageWriter, text: str):
        w.paragraph(self._wrap(text, BODY_WIDTH, 14), 6, size=14)

    def _add_header(self, w: _PageWriter, student, date_from, date_to):
        w.text(REPORT_TITLE, 10, size=20, weight="bold")
        self._header_line(w, f"Student: {person_name(student)}")

        student_code = getattr(student, "student_id", None)
        if student_code:
            self._header_line(w, f"Student ID: {student_code}")

        school_class = getattr(student, "school_class", None)
        if school_class is not None:
            self._header_line(w, f"Class: {getattr(school_class, 'name', '') or ''}")
            school = getattr(school_class, "school", None)
            if school is not None:
                self._header_line(w, f"School: {getattr(school, 'name', '') or ''}")

        if date_from or date_to:
            start = short_date(date_from) or "Start"
            end = short_date(date_to) or "Present"
            w.text(f"Period: {start} - {end}", 6, size=14)

        w.text(f"Generated: {short_datetime(self._now())}", 15, size=14)
        w.rule(0.5)
        w.skip(10)

    def _add_note(self, w: _PageWriter, note, include_comments: bool, include_attachments: bool):
        # keep title, author and the first body line together
        w.ensure(6 + 6 + 4)

        title = getattr(note, "title", None) or "Daily Note"
        heading = f"{title} - {short_date(getattr(note, 'note_date', None))}"
        w.paragraph(self._wrap(heading, BODY_WIDTH, 12, bold=True), 6, size=12, weight="bold")
        author = f"By: {person_name(getattr(note, 'teacher', None))}"
        w.paragraph(self._wrap(author, BODY_WIDTH, 10), 6, size=10)

        w.paragraph(self._wrap(getattr(note, "content", ""), BODY_WIDTH, 11), 4, size=11)
        w.skip(5)

        attachments = getattr(note, "attachments", None) or []
        if include_attachments and attachments:
            w.ensure(4 + 4)
            w.text("Attachments:", 4, size=10, weight="bold")
            for attachment in attachments:
                name = f"• {getattr(attachment, 'file_name', '') or ''}"
                w.paragraph(self._wrap(name, COMMENT_WIDTH, 10), 4, x=MARGIN + INDENT, size=10)
            w.skip(2)

        comments = getattr(note, "comments", None) or []
        if include_comments and comments:
            w.ensure(4 + 3 + 3)
            w.text(f"Comments ({len(comments)}):", 4, size=10, weight="bold")
            for comment in comments:
                w.ensure(3 + 3)
                created_at = getattr(comment, "created_at", None)
                stamp = month_day_time(to_zone(created_at, self.tz))
                byline = f"{person_name(getattr(comment, 'user', None))} - {stamp}"
                w.paragraph(self._wrap(byline, COMMENT_WIDTH, 10), 3, x=MARGIN + INDENT, size=10)
                body = self._wrap(getattr(comment, "content", ""), COMMENT_WIDTH, 10)
                w.paragraph(body, 3, x=MARGIN + INDENT, size=10)
                w.skip(3)
            w.skip(5)

        w.rule(0.2, color=SEPARATOR_GREY)
        w.skip(8)

    def _add_footers(self, pages: List[ReportPage]):
        total = len(pages)
        for page in pages:
            page.footer = TextLine(
                x=FOOTER_X, y=FOOTER_Y, text=f"Page {page.number} of {total}", size=8, align="right"
            )

    # ==========================================================
    # Rendering
    # ==========================================================
    def render_html(self, layout: ReportLayout) -> str:
        template = self.env.get_template("reports/notes_report.html")
        return template.render(pages=layout.pages, title=REPORT_TITLE, font_faces=self.font_faces)

    def _html_to_pdf(self, html_content: str) -> bytes:
        # WeasyPrint loads pango on import
        from weasyprint import HTML

        return HTML(string=html_content).write_pdf()

    def compile(
        self,
        student,
        notes,
        date_from=None,
        date_to=None,
        include_comments: bool = True,
        include_attachments: bool = True,
    ) -> bytes:
        layout = self.layout(student, notes, date_from, date_to, include_comments, include_attachments)
        logger.info("Compiling notes report: student=%s pages=%d", person_name(student), layout.page_count)
        return self._html_to_pdf(self.render_html(layout))

    def filename(self, student) -> str:
        first = getattr(student, "first_name", None) or ""
        last = getattr(student, "last_name", None) or ""
        return f"parent-teacher-notes-{first}-{last}-{self._now():%Y-%m-%d}.pdf"


def _box_top(line: TextLine) -> float:
    """CSS top of a text box whose baseline sits at line.y."""
    return round(line.y - line.size * PT_TO_MM * 0.8, 2)
