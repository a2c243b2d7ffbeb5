from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.core.constants import TestStatusEnum as WindowStatus
from app.services.clock import derive_status, remaining_ms, window_status
from app.utils.timeutils import ensure_aware

START = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)
END = datetime(2026, 3, 10, 17, 0, tzinfo=timezone.utc)
WINDOW = SimpleNamespace(start_date=START, end_date=END)


@pytest.mark.parametrize("now, expected", [
    (START - timedelta(microseconds=1), WindowStatus.UPCOMING),
    (START, WindowStatus.ACTIVE),
    (START + timedelta(hours=4), WindowStatus.ACTIVE),
    (END, WindowStatus.ACTIVE),
    (END + timedelta(microseconds=1), WindowStatus.FINISHED),
])
def test_derive_status_window_boundaries(now, expected):
    assert derive_status(WINDOW, now) == expected


def test_derive_status_accepts_naive_stored_dates():
    stored = SimpleNamespace(start_date=START.replace(tzinfo=None), end_date=END.replace(tzinfo=None))
    assert derive_status(stored, START + timedelta(minutes=1)) == WindowStatus.ACTIVE


def test_derive_status_compares_instants_across_offsets():
    plus_two = timezone(timedelta(hours=2))
    local_now = datetime(2026, 3, 10, 10, 30, tzinfo=plus_two)  # 08:30 UTC
    assert derive_status(WINDOW, local_now) == WindowStatus.UPCOMING


def test_remaining_ms_never_negative():
    assert remaining_ms(START, START + timedelta(seconds=5)) == 0
    assert remaining_ms(START + timedelta(seconds=90), START) == 90000


def test_ensure_aware():
    assert ensure_aware(None) is None
    naive = datetime(2026, 1, 1, 12, 0)
    assert ensure_aware(naive).tzinfo == timezone.utc
    assert ensure_aware(naive).hour == 12


def test_derive_status_never_moves_backwards():
    order = [WindowStatus.UPCOMING, WindowStatus.ACTIVE, WindowStatus.FINISHED]
    instants = [START + timedelta(minutes=m) for m in range(-90, 600, 15)]
    ranks = [order.index(derive_status(WINDOW, t)) for t in instants]
    assert ranks == sorted(ranks)


def test_window_status_matches_derive_status_for_bare_dates():
    for now in (START - timedelta(minutes=1), START, END + timedelta(minutes=1)):
        assert window_status(START, END, now) == derive_status(WINDOW, now)


def test_clock_no_longer_reexports_now_helper():
    import app.services.clock as clock

    assert not hasattr(clock, "utc_now")
