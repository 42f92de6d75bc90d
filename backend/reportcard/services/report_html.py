"""
HTML rendering of the report card.

The HTML version carries the same content and the same grading rules as
the drawn PDF. It is what we send to the remote HTML->PDF conversion
service, and what the caller gets back when that service is unavailable.
"""

from datetime import date
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from reportcard.services.grading import (
    format_long_date,
    headmaster_remark,
    summarize_scores,
    teacher_remark,
    term_dates,
)
from reportcard.services.report_layout import NOT_AVAILABLE, SchoolInfo

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class ReportCardHTMLRenderer:
    """Renders a ReportRecord through the report_card.html template."""

    template_name = "report_card.html"

    def __init__(
        self,
        school: SchoolInfo,
        term_number: str = "3",
        max_component_score: float = 50.0,
    ):
        self.school = school
        self.term_number = term_number
        self.max_component_score = max_component_score
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, record, today: date) -> str:
        summary = summarize_scores(record.scores, self.max_component_score)
        dates = term_dates(today)
        comments = record.comments

        if summary.percentage is None:
            teacher, headmaster = NOT_AVAILABLE, NOT_AVAILABLE
        else:
            teacher = teacher_remark(summary.percentage)
            headmaster = headmaster_remark(summary.percentage)

        attendance = NOT_AVAILABLE
        if record.attendance is not None:
            attendance = f"{record.attendance.present_days}/{record.attendance.total_days}"

        template = self.env.get_template(self.template_name)
        return template.render(
            school=self.school,
            student=record.student,
            rank=record.rank,
            term_number=self.term_number,
            attendance=attendance,
            term_closes=format_long_date(dates.closes),
            next_term=format_long_date(dates.next_term_starts),
            max_score=f"{self.max_component_score:g}",
            max_total=f"{2 * self.max_component_score:g}",
            summary=summary,
            conduct=(comments.conduct if comments else None) or NOT_AVAILABLE,
            interest=(comments.interest if comments else None) or NOT_AVAILABLE,
            teacher_remark=teacher,
            headmaster_remark=headmaster,
        )
