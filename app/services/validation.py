"""Explicit invariant checks run before any write."""
from datetime import datetime, time

from app.core.exceptions import InputValidationError
from app.utils.timeutils import ensure_aware


def validate_test_window(start_date: datetime, end_date: datetime, now: datetime, *, allow_past_start: bool = False) -> None:
    start_date = ensure_aware(start_date)
    end_date = ensure_aware(end_date)
    if end_date <= start_date:
        raise InputValidationError("End time must be after start time")
    if not allow_past_start:
        start_of_today = datetime.combine(ensure_aware(now).date(), time.min, tzinfo=start_date.tzinfo)
        if start_date < start_of_today:
            raise InputValidationError("Date cannot be in the past")


def validate_attempt_times(start_time: datetime, due_time: datetime = None, end_time: datetime = None) -> None:
    if start_time and due_time and ensure_aware(due_time) < ensure_aware(start_time):
        raise InputValidationError("dueTime must be after startTime")
    if start_time and end_time and ensure_aware(end_time) < ensure_aware(start_time):
        raise InputValidationError("endTime must be after startTime")


def validate_answer_window(exam_start_time: datetime, exam_end_time: datetime) -> None:
    if ensure_aware(exam_end_time) <= ensure_aware(exam_start_time):
        raise InputValidationError("examEndTime must be after examStartTime")


def normalize_answer_text(answer_text) -> str:
    if not isinstance(answer_text, str) or not answer_text.strip():
        raise InputValidationError("Answer text is required")
    return answer_text.strip()


def validate_mark(mark) -> float:
    if isinstance(mark, bool) or not isinstance(mark, (int, float)) or mark < 0:
        raise InputValidationError("mark must be a non-negative number")
    return float(mark)
