from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import InputValidationError
from app.services.validation import (
    normalize_answer_text,
    validate_answer_window,
    validate_attempt_times,
    validate_mark,
    validate_test_window,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def test_test_window_requires_end_after_start():
    with pytest.raises(InputValidationError) as exc:
        validate_test_window(NOW + timedelta(hours=2), NOW + timedelta(hours=1), NOW)
    assert exc.value.detail == "End time must be after start time"

    with pytest.raises(InputValidationError):
        validate_test_window(NOW, NOW, NOW)


def test_test_window_allows_earlier_today_but_not_yesterday():
    validate_test_window(NOW - timedelta(hours=3), NOW + timedelta(hours=1), NOW)

    with pytest.raises(InputValidationError) as exc:
        validate_test_window(NOW - timedelta(days=1), NOW + timedelta(hours=1), NOW)
    assert exc.value.detail == "Date cannot be in the past"

    validate_test_window(NOW - timedelta(days=1), NOW + timedelta(hours=1), NOW, allow_past_start=True)


def test_attempt_times_ordering():
    validate_attempt_times(NOW, NOW + timedelta(minutes=30), NOW + timedelta(minutes=45))
    with pytest.raises(InputValidationError):
        validate_attempt_times(NOW, NOW - timedelta(minutes=1))
    with pytest.raises(InputValidationError):
        validate_attempt_times(NOW, None, NOW - timedelta(seconds=1))


def test_answer_window_ordering():
    with pytest.raises(InputValidationError):
        validate_answer_window(NOW, NOW)


@pytest.mark.parametrize("raw", [None, "", "   ", 42])
def test_answer_text_required(raw):
    with pytest.raises(InputValidationError) as exc:
        normalize_answer_text(raw)
    assert exc.value.detail == "Answer text is required"


def test_answer_text_trimmed():
    assert normalize_answer_text("  forty two \n") == "forty two"


@pytest.mark.parametrize("mark", [-1, "5", True, None])
def test_mark_must_be_non_negative_number(mark):
    with pytest.raises(InputValidationError):
        validate_mark(mark)


def test_mark_zero_is_valid():
    assert validate_mark(0) == 0.0
