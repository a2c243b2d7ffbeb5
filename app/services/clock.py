"""
Clock authority.

Maps a test's configured window to its derived status. Callers sample ``now``
once per request and pass the same instant to every check they make.
"""
from datetime import datetime

from app.core.constants import TestStatusEnum
from app.utils.timeutils import ensure_aware


def window_status(start_date: datetime, end_date: datetime, now: datetime) -> TestStatusEnum:
    now = ensure_aware(now)
    if now < ensure_aware(start_date):
        return TestStatusEnum.UPCOMING
    if now > ensure_aware(end_date):
        return TestStatusEnum.FINISHED
    return TestStatusEnum.ACTIVE


def derive_status(test, now: datetime) -> TestStatusEnum:
    return window_status(test.start_date, test.end_date, now)


def remaining_ms(deadline: datetime, now: datetime) -> int:
    delta = ensure_aware(deadline) - ensure_aware(now)
    return max(0, int(delta.total_seconds() * 1000))
