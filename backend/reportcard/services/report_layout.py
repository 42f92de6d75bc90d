"""
Report card layout engine — places a student's record onto one A4 page.

The output is a Page: a flat list of absolutely positioned draw commands
(text runs, lines, rectangles) in PDF points with the origin at the
bottom-left corner. Nothing here knows about ReportLab; pdf_report.py
paints the commands onto a canvas.

How it works:
- Every size, offset and column width lives in LayoutConstants.
- Text width comes from an injected measure(text, font, size) function,
  so right/center alignment can be unit-tested with a fake font.
- Regions are drawn top-to-bottom. Each _draw_* function takes the
  current cursor y and returns the next one; y only ever decreases.
- There is exactly one page. If the content would run past the bottom
  margin we raise ReportRenderError instead of emitting a clipped page.

Regions, in order:
    1. Header (logo box + right-aligned school letterhead)
    2. Underlined title
    3. Two-column student info block
    4. Score table (header, one row per subject, grand total)
    5. Conduct / interest comments
    6. Class teacher's and headmaster's remarks
    7. Signature rules
    8. Footer note with the resumption date
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from reportcard.services.grading import (
    ScoreSummary,
    format_long_date,
    headmaster_remark,
    summarize_scores,
    teacher_remark,
    term_dates,
)

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"

REPORT_TITLE = "Academic Report Sheet"
NOT_AVAILABLE = "N/A"
ELLIPSIS = "..."

# measure(text, font_name, font_size) -> width in points
MeasureText = Callable[[str, str, float], float]


class ReportRenderError(Exception):
    """The record could not be laid out on a single page."""


# --- Draw commands ---

@dataclass(frozen=True)
class TextRun:
    x: float
    y: float  # Baseline
    text: str
    font: str = FONT_REGULAR
    size: float = 10
    color: str = "#000000"


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 1.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float  # Bottom edge
    width: float
    height: float
    fill: Optional[str] = None
    stroke: bool = True
    line_width: float = 0.5


@dataclass
class Page:
    """Accumulates draw commands in paint order."""
    width: float
    height: float
    commands: list = field(default_factory=list)

    def text(self, x, y, text, font=FONT_REGULAR, size=10, color="#000000"):
        self.commands.append(TextRun(x, y, text, font, size, color))

    def line(self, x1, y1, x2, y2, width=1.0):
        self.commands.append(Line(x1, y1, x2, y2, width))

    def rect(self, x, y, width, height, fill=None, stroke=True, line_width=0.5):
        self.commands.append(Rect(x, y, width, height, fill, stroke, line_width))

    @property
    def text_runs(self) -> list[TextRun]:
        return [c for c in self.commands if isinstance(c, TextRun)]


@dataclass(frozen=True)
class SchoolInfo:
    """Letterhead printed in the header."""
    name: str
    address_lines: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings) -> "SchoolInfo":
        return cls(
            name=settings.SCHOOL_NAME,
            address_lines=tuple(settings.school_address_lines),
        )


@dataclass(frozen=True)
class LayoutConstants:
    """Every magic number of the report page, in points."""

    # Page (ISO A4)
    page_width: float = 595
    page_height: float = 842
    margin: float = 50

    # Header
    logo_size: float = 60
    logo_fill: str = "#F0F0F0"
    logo_caption_size: float = 7
    school_name_size: float = 14
    school_line_size: float = 9
    school_line_gap: float = 13
    header_rule_gap: float = 10
    header_rule_width: float = 1.5

    # Title
    title_size: float = 13
    title_gap: float = 26
    underline_offset: float = 3

    # Student info block
    info_size: float = 10
    info_label_width: float = 80
    info_row_height: float = 16

    # Score table
    column_widths: tuple[float, ...] = (170, 60, 60, 60, 145)
    table_gap: float = 18
    table_font_size: float = 9
    row_height: float = 20
    cell_padding: float = 5
    header_fill: str = "#E2E8F0"
    zebra_fill: str = "#F5F5F5"

    # Comments and remarks
    body_size: float = 10
    body_leading: float = 14
    comment_label_width: float = 60
    section_gap: float = 18

    # Signatures and footer
    signature_space: float = 45
    signature_width: float = 180
    caption_gap: float = 14
    footer_gap: float = 30
    footer_size: float = 10

    def __post_init__(self):
        if abs(sum(self.column_widths) - self.content_width) > 0.01:
            raise ValueError(
                f"column widths sum to {sum(self.column_widths):g}, "
                f"content width is {self.content_width:g}"
            )

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def right_edge(self) -> float:
        return self.page_width - self.margin


DEFAULT_LAYOUT = LayoutConstants()


# --- Text helpers ---

def fit_text(text: str, font: str, size: float, max_width: float, measure: MeasureText) -> str:
    """Truncate text with an ellipsis so it fits within max_width."""
    if measure(text, font, size) <= max_width:
        return text
    while text and measure(text + ELLIPSIS, font, size) > max_width:
        text = text[:-1]
    return text.rstrip() + ELLIPSIS if text else ""


def wrap_text(text: str, font: str, size: float, max_width: float, measure: MeasureText) -> list[str]:
    """Greedy word wrap. A single word wider than max_width gets its own line."""
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and measure(candidate, font, size) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def _centered_x(text, font, size, left, width, measure) -> float:
    return left + (width - measure(text, font, size)) / 2


def _format_score(value: float) -> str:
    return f"{value:.1f}"


def _format_total(value: float) -> str:
    return f"{value:.2f}"


# --- Region renderers ---

def _draw_header(page: Page, y: float, school: SchoolInfo, measure: MeasureText,
                 c: LayoutConstants) -> float:
    """Logo placeholder at left, letterhead hugging the right margin."""
    logo_bottom = y - c.logo_size
    page.rect(c.margin, logo_bottom, c.logo_size, c.logo_size, fill=c.logo_fill)
    for i, caption in enumerate(("School", "Logo")):
        page.text(
            _centered_x(caption, FONT_REGULAR, c.logo_caption_size, c.margin, c.logo_size, measure),
            y - c.logo_size / 2 + c.logo_caption_size * (0.5 - 1.3 * i),
            caption, FONT_REGULAR, c.logo_caption_size, color="#666666",
        )

    baseline = y - c.school_name_size
    page.text(
        c.right_edge - measure(school.name, FONT_BOLD, c.school_name_size),
        baseline, school.name, FONT_BOLD, c.school_name_size,
    )
    for line in school.address_lines:
        baseline -= c.school_line_gap
        page.text(
            c.right_edge - measure(line, FONT_REGULAR, c.school_line_size),
            baseline, line, FONT_REGULAR, c.school_line_size,
        )

    rule_y = min(logo_bottom, baseline) - c.header_rule_gap
    page.line(c.margin, rule_y, c.right_edge, rule_y, c.header_rule_width)
    return rule_y


def _draw_title(page: Page, y: float, measure: MeasureText, c: LayoutConstants) -> float:
    baseline = y - c.title_gap
    width = measure(REPORT_TITLE, FONT_BOLD, c.title_size)
    x = (c.page_width - width) / 2
    page.text(x, baseline, REPORT_TITLE, FONT_BOLD, c.title_size)
    underline_y = baseline - c.underline_offset
    page.line(x, underline_y, x + width, underline_y, 0.8)
    return underline_y


def _draw_student_info(page: Page, y: float, record, dates, term_number: str,
                       measure: MeasureText, c: LayoutConstants) -> float:
    """Two columns of label/value rows sharing a fixed label width."""
    attendance = NOT_AVAILABLE
    if record.attendance is not None:
        attendance = f"{record.attendance.present_days}/{record.attendance.total_days}"

    left_column = [
        ("Name:", record.student.name),
        ("Class:", record.student.class_name),
        ("Attendance:", attendance),
    ]
    right_column = [
        ("No. on Roll:", str(record.rank)),
        ("Term:", term_number),
        ("Term Closes:", format_long_date(dates.closes)),
        ("Next Term:", format_long_date(dates.next_term_starts)),
    ]

    column_width = c.content_width / 2
    value_width = column_width - c.info_label_width - c.cell_padding
    y -= c.section_gap / 2
    for x, rows in ((c.margin, left_column), (c.margin + column_width, right_column)):
        for i, (label, value) in enumerate(rows, 1):
            baseline = y - c.info_row_height * i
            page.text(x, baseline, label, FONT_BOLD, c.info_size)
            page.text(
                x + c.info_label_width, baseline,
                fit_text(value, FONT_REGULAR, c.info_size, value_width, measure),
                FONT_REGULAR, c.info_size,
            )

    return y - c.info_row_height * max(len(left_column), len(right_column))


def _draw_table_row(page: Page, y: float, cells: list[str], font: str, fill: Optional[str],
                    measure: MeasureText, c: LayoutConstants) -> float:
    """One bordered row. First column left-aligned, the rest centered."""
    size = c.table_font_size
    baseline = y - c.row_height / 2 - size * 0.35
    x = c.margin
    for index, (width, text) in enumerate(zip(c.column_widths, cells)):
        page.rect(x, y - c.row_height, width, c.row_height, fill=fill)
        if text:
            text = fit_text(text, font, size, width - 2 * c.cell_padding, measure)
            if index == 0:
                text_x = x + c.cell_padding
            else:
                text_x = _centered_x(text, font, size, x, width, measure)
            page.text(text_x, baseline, text, font, size)
        x += width
    return y - c.row_height


def _draw_score_table(page: Page, y: float, summary: ScoreSummary, max_component_score: float,
                      measure: MeasureText, c: LayoutConstants) -> float:
    y -= c.table_gap
    header = [
        "Subject",
        f"Class ({max_component_score:g})",
        f"Exam ({max_component_score:g})",
        f"Total ({2 * max_component_score:g})",
        "Remarks",
    ]
    y = _draw_table_row(page, y, header, FONT_BOLD, c.header_fill, measure, c)

    for index, result in enumerate(summary.subjects):
        cells = [
            result.subject_name,
            _format_score(result.class_score),
            _format_score(result.exam_score),
            _format_total(result.total),
            result.remark.value,
        ]
        fill = c.zebra_fill if index % 2 == 0 else None
        y = _draw_table_row(page, y, cells, FONT_REGULAR, fill, measure, c)

    average_remark = summary.average_remark.value if summary.average_remark else ""
    totals = ["GRAND TOTAL", "", "", _format_total(summary.grand_total), average_remark]
    return _draw_table_row(page, y, totals, FONT_BOLD, None, measure, c)


def _draw_comments(page: Page, y: float, comments, measure: MeasureText,
                   c: LayoutConstants) -> float:
    conduct = (comments.conduct if comments else None) or NOT_AVAILABLE
    interest = (comments.interest if comments else None) or NOT_AVAILABLE

    y -= c.section_gap
    value_width = c.content_width - c.comment_label_width
    for label, value in (("Conduct:", conduct), ("Interest:", interest)):
        y -= c.body_leading
        page.text(c.margin, y, label, FONT_BOLD, c.body_size)
        page.text(
            c.margin + c.comment_label_width, y,
            fit_text(value, FONT_REGULAR, c.body_size, value_width, measure),
            FONT_REGULAR, c.body_size,
        )
    return y


def _draw_remarks(page: Page, y: float, summary: ScoreSummary, measure: MeasureText,
                  c: LayoutConstants) -> float:
    if summary.percentage is None:
        remarks = [
            ("Class Teacher's Remarks:", NOT_AVAILABLE),
            ("Headmaster's Remarks:", NOT_AVAILABLE),
        ]
    else:
        remarks = [
            ("Class Teacher's Remarks:", teacher_remark(summary.percentage)),
            ("Headmaster's Remarks:", headmaster_remark(summary.percentage)),
        ]

    for label, text in remarks:
        y -= c.section_gap
        page.text(c.margin, y, label, FONT_BOLD, c.body_size)
        for line in wrap_text(text, FONT_REGULAR, c.body_size, c.content_width, measure):
            y -= c.body_leading
            page.text(c.margin, y, line, FONT_REGULAR, c.body_size)
    return y


def _draw_signatures(page: Page, y: float, measure: MeasureText, c: LayoutConstants) -> float:
    rule_y = y - c.signature_space
    caption_y = rule_y - c.caption_gap
    left_x = c.margin
    right_x = c.right_edge - c.signature_width
    for x, caption in ((left_x, "Class Teacher"), (right_x, "Head Teacher")):
        page.line(x, rule_y, x + c.signature_width, rule_y, 0.8)
        page.text(
            _centered_x(caption, FONT_BOLD, c.body_size, x, c.signature_width, measure),
            caption_y, caption, FONT_BOLD, c.body_size,
        )
    return caption_y


def _draw_footer_note(page: Page, y: float, dates, measure: MeasureText,
                      c: LayoutConstants) -> float:
    note = f"School resumes on {format_long_date(dates.next_term_starts)}"
    baseline = y - c.footer_gap
    page.text(
        _centered_x(note, FONT_ITALIC, c.footer_size, 0, c.page_width, measure),
        baseline, note, FONT_ITALIC, c.footer_size,
    )
    return baseline


# --- Entry point ---

def layout_report(
    record,
    today: date,
    measure: MeasureText,
    school: SchoolInfo,
    constants: LayoutConstants = DEFAULT_LAYOUT,
    term_number: str = "3",
    max_component_score: float = 50.0,
) -> Page:
    """Lay out a ReportRecord as one page of draw commands.

    Pure: the same record, clock and measure function always give the same
    Page. Raises ReportRenderError if the content does not fit the page.
    """
    c = constants
    summary = summarize_scores(record.scores, max_component_score)
    dates = term_dates(today)
    page = Page(width=c.page_width, height=c.page_height)

    y = c.page_height - c.margin
    y = _draw_header(page, y, school, measure, c)
    y = _draw_title(page, y, measure, c)
    y = _draw_student_info(page, y, record, dates, term_number, measure, c)
    y = _draw_score_table(page, y, summary, max_component_score, measure, c)
    y = _draw_comments(page, y, record.comments, measure, c)
    y = _draw_remarks(page, y, summary, measure, c)
    y = _draw_signatures(page, y, measure, c)
    y = _draw_footer_note(page, y, dates, measure, c)

    if y < c.margin:
        raise ReportRenderError(
            f"Report for {record.student.name} does not fit on one page "
            f"({summary.subject_count} subjects, overflow {c.margin - y:.0f}pt)"
        )
    return page
