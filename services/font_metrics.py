"""
services/font_metrics.py

Glyph advance widths used to break report lines before they are drawn.

- FontMetrics.from_font_file() : widths read from a TrueType/OpenType file (fontTools)
- HELVETICA                    : standard Helvetica / Helvetica-Bold AFM widths,
                                 matching the Helvetica/Arial/Liberation Sans stack
                                 the report template falls back to

Widths are in em. Characters a font does not cover count as a full em
(the width of a CJK ideograph), wider than any Latin glyph.
"""

import unicodedata
from typing import Dict, Optional

PT_TO_MM = 0.3528
MISSING_GLYPH_EM = 1.0

_ASCII = "".join(chr(c) for c in range(32, 127))

# AFM widths (1/1000 em) for U+0020..U+007E
_HELVETICA_REGULAR = [
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 278, 278, 584, 584, 584, 556,
    1015, 667, 667, 722, 722, 667, 611, 778, 722, 278, 500, 667, 556, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 278, 278, 278, 469, 556,
    333, 556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833, 556, 556,
    556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500, 334, 260, 334, 584,
]
_HELVETICA_BOLD = [
    278, 333, 474, 556, 556, 889, 722, 238, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 333, 333, 584, 584, 584, 611,
    975, 722, 722, 722, 722, 667, 611, 778, 722, 278, 556, 722, 611, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 333, 278, 333, 584, 556,
    333, 556, 611, 556, 611, 556, 333, 611, 611, 278, 278, 556, 278, 889, 611, 611,
    611, 611, 389, 556, 333, 611, 556, 778, 556, 556, 500, 389, 280, 389, 584,
]
# punctuation used by the report outside ASCII
_EXTRA_REGULAR = {"•": 350, "–": 556, "—": 1000, "’": 222, "‘": 222, "“": 333, "”": 333, "…": 1000}
_EXTRA_BOLD = {"•": 350, "–": 556, "—": 1000, "’": 278, "‘": 278, "“": 500, "”": 500, "…": 1000}


def _afm_table(ascii_widths, extra) -> Dict[str, float]:
    table = {ch: w / 1000 for ch, w in zip(_ASCII, ascii_widths)}
    table.update({ch: w / 1000 for ch, w in extra.items()})
    return table


class FontMetrics:
    """Advance widths (em) for a regular and a bold face."""

    def __init__(self, regular: Dict[str, float], bold: Optional[Dict[str, float]] = None, name: str = "custom"):
        self.regular = regular
        self.bold = bold if bold is not None else regular
        self.name = name

    @staticmethod
    def _read_widths(path: str) -> Dict[str, float]:
        from fontTools.ttLib import TTFont

        font = TTFont(path, lazy=True)
        try:
            units = font["head"].unitsPerEm
            advances = font["hmtx"].metrics
            return {
                chr(codepoint): advances[glyph][0] / units
                for codepoint, glyph in font.getBestCmap().items()
                if glyph in advances
            }
        finally:
            font.close()

    @classmethod
    def from_font_file(cls, regular_path: str, bold_path: Optional[str] = None) -> "FontMetrics":
        regular = cls._read_widths(regular_path)
        bold = cls._read_widths(bold_path) if bold_path else None
        return cls(regular, bold, name=regular_path)

    def char_width(self, ch: str, bold: bool = False) -> float:
        width = (self.bold if bold else self.regular).get(ch)
        if width is not None:
            return width
        if unicodedata.combining(ch):
            return 0.0
        return MISSING_GLYPH_EM

    def text_width(self, text: str, size_pt: float, bold: bool = False) -> float:
        """Rendered width of text in mm."""
        em = sum(self.char_width(ch, bold) for ch in text)
        return em * size_pt * PT_TO_MM


HELVETICA = FontMetrics(
    _afm_table(_HELVETICA_REGULAR, _EXTRA_REGULAR),
    _afm_table(_HELVETICA_BOLD, _EXTRA_BOLD),
    name="Helvetica",
)
