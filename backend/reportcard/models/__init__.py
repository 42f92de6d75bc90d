from reportcard.models.models import (
    Attendance,
    Base,
    Score,
    Student,
    Subject,
    TeacherComment,
)

__all__ = [
    "Base",
    "Student",
    "Subject",
    "Score",
    "Attendance",
    "TeacherComment",
]
