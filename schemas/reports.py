"""
schemas/reports.py

Page model produced by services/report_compiler.py.
All coordinates are millimetres on an A4 page, y grows downwards
and marks the text baseline.
"""

from datetime import date
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


class TextLine(BaseModel):
    x: float
    y: float
    text: str
    size: float = 11                                  # font size (pt)
    weight: Literal["normal", "bold"] = "normal"
    style: Literal["normal", "italic"] = "normal"
    align: Literal["left", "right"] = "left"


class Rule(BaseModel):
    """Horizontal separator line."""
    x1: float
    x2: float
    y: float
    width: float = 0.5                                # stroke width (mm)
    color: Tuple[int, int, int] = (0, 0, 0)


class ReportPage(BaseModel):
    number: int
    lines: List[TextLine] = Field(default_factory=list)
    rules: List[Rule] = Field(default_factory=list)
    footer: Optional[TextLine] = None


class ReportLayout(BaseModel):
    pages: List[ReportPage] = Field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def texts(self) -> List[str]:
        """Every body line in reading order (footers excluded)."""
        return [line.text for page in self.pages for line in page.lines]


class NoteExportQuery(BaseModel):
    """Query options of the PDF export endpoint."""
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    keyword: Optional[str] = None
    include_comments: bool = True
    include_attachments: bool = True
