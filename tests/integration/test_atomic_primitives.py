from datetime import timedelta

from app.core.constants import AttemptStatusEnum
from app.crud.attempt import attempt as crud_attempt
from app.crud.answer import answer as crud_answer
from app.models.attempt import Attempt
from app.models.answer import Answer


def test_admit_creates_once(db_session, student, active_test, now):
    values = {
        "student_id": student.id,
        "test_id": active_test.id,
        "start_time": now,
        "due_time": now + timedelta(minutes=60),
        "status": AttemptStatusEnum.IN_PROGRESS,
    }
    assert crud_attempt.admit(db_session, values=values) is True
    assert crud_attempt.admit(db_session, values={**values, "start_time": now + timedelta(minutes=1)}) is False

    rows = db_session.query(Attempt).all()
    assert len(rows) == 1


def test_update_if_only_applies_when_predicate_holds(db_session, student, active_test, now):
    row = crud_attempt.create(db_session, obj_in={
        "student_id": student.id,
        "test_id": active_test.id,
        "status": AttemptStatusEnum.IN_PROGRESS,
    })

    first = crud_attempt.update_if(
        db_session,
        id=row.id,
        predicate=(Attempt.status == AttemptStatusEnum.IN_PROGRESS,),
        values={"status": AttemptStatusEnum.COMPLETED, "end_time": now},
    )
    second = crud_attempt.update_if(
        db_session,
        id=row.id,
        predicate=(Attempt.status == AttemptStatusEnum.IN_PROGRESS,),
        values={"status": AttemptStatusEnum.EXPIRED},
    )

    assert first is not None and first.status == AttemptStatusEnum.COMPLETED
    assert second is None
    db_session.refresh(row)
    assert row.status == AttemptStatusEnum.COMPLETED


def test_update_if_missing_row(db_session):
    assert crud_attempt.update_if(db_session, id=123, predicate=(), values={"score": 1}) is None


def test_set_score_upserts_single_row(db_session, student, active_test):
    first = crud_attempt.set_score(db_session, student_id=student.id, test_id=active_test.id, score=2)
    second = crud_attempt.set_score(db_session, student_id=student.id, test_id=active_test.id, score=9)

    assert first.id == second.id
    assert second.score == 9
    assert second.status == AttemptStatusEnum.PENDING
    assert db_session.query(Attempt).count() == 1


def test_save_submission_keyed_by_student_question_domain_section(db_session, student, active_test, now):
    question = active_test.domains[0].questions[0]
    values = {
        "student_id": student.id,
        "question_id": question.id,
        "domain_id": question.domain_id,
        "section": question.section,
        "answer_text": "one",
        "submitted_at": now,
        "exam_start_time": now,
        "exam_end_time": now + timedelta(minutes=120),
        "is_submitted": True,
    }
    crud_answer.save_submission(db_session, values=values)
    crud_answer.save_submission(db_session, values={**values, "answer_text": "two"})
    crud_answer.save_submission(db_session, values={**values, "section": "Z", "answer_text": "three"})

    texts = sorted(a.answer_text for a in db_session.query(Answer).all())
    assert texts == ["three", "two"]
