from datetime import timedelta

import pytest
from pydantic import ValidationError

from app.core.constants import TestStatusEnum as WindowStatus
from app.core.exceptions import InputValidationError, NotFound
from app.models.test import Test
from app.schemas.test import TestUpdate
from app.services.test import test_service


def test_update_writes_fields_and_status_together(db_session, make_test, domain_factory, now):
    test = make_test([domain_factory()], start_offset=timedelta(hours=1), end_offset=timedelta(hours=2))

    updated = test_service.update_test(
        db_session,
        test.id,
        TestUpdate(title="Rescheduled", start_date=now - timedelta(minutes=5), end_date=now + timedelta(hours=1)),
        now,
    )

    assert updated.title == "Rescheduled"
    assert updated.status == WindowStatus.ACTIVE
    row = db_session.get(Test, test.id)
    db_session.refresh(row)
    assert row.status == WindowStatus.ACTIVE


def test_update_title_collision_at_write_is_a_validation_error(db_session, make_test, domain_factory, now,
                                                                monkeypatch):
    domain = domain_factory()
    make_test([domain], title="Taken Title")
    test = make_test([domain], title="Original Title")
    # Another request claims the title after the pre-check has passed.
    monkeypatch.setattr(test_service, "title_exists", lambda db, title: False)

    with pytest.raises(InputValidationError):
        test_service.update_test(db_session, test.id, TestUpdate(title="Taken Title"), now)

    row = db_session.get(Test, test.id)
    db_session.refresh(row)
    assert row.title == "Original Title"


def test_update_title_pre_check(db_session, make_test, domain_factory, now):
    domain = domain_factory()
    make_test([domain], title="Taken Title")
    test = make_test([domain], title="Original Title")

    with pytest.raises(InputValidationError):
        test_service.update_test(db_session, test.id, TestUpdate(title=" Taken Title "), now)


def test_update_title_too_short_after_strip():
    with pytest.raises(ValidationError):
        TestUpdate(title="  ab   ")
    assert TestUpdate(title="  abc ").title == "abc"


def test_update_missing_test(db_session, now):
    with pytest.raises(NotFound):
        test_service.update_test(db_session, 9999, TestUpdate(title="Anything"), now)


def test_domain_tests_listing(db_session, make_test, domain_factory, now):
    reading = domain_factory("Reading")
    writing = domain_factory("Writing")
    early = make_test([reading], start_offset=timedelta(hours=-2), end_offset=timedelta(hours=-1), title="Early")
    late = make_test([reading, writing], start_offset=timedelta(hours=1), end_offset=timedelta(hours=2),
                     title="Late")
    make_test([writing], title="Writing only")

    tests = test_service.list_tests_for_domain(db_session, reading.id, now)

    assert [t.id for t in tests] == [late.id, early.id]
    assert [t.status for t in tests] == [WindowStatus.UPCOMING, WindowStatus.FINISHED]

    with pytest.raises(NotFound):
        test_service.list_tests_for_domain(db_session, 31337, now)
