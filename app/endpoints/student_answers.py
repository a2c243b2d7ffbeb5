from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.schemas.answer import (
    Answer,
    AnswerSubmit,
    ExamSessionStart,
    ExamSessionWindow,
    ExamStatus,
    MarkAdd,
    MarkEdit,
    StudentAnswer,
    TotalRequest,
    TotalResult,
)
from app.schemas.response import APIResponse
from app.schemas.user import Principal
from app.services.scoring import scoring_service
from app.services.submission import submission_service
from app.utils import deps
from app.utils.events import (
    event_bus,
    ANSWER_DELETED,
    ANSWER_SUBMITTED,
    EXAM_STARTED,
    MARK_ADDED,
    MARK_EDITED,
    TOTAL_COMPUTED,
)

router = APIRouter()


@router.post("/start-exam", response_model=APIResponse[ExamSessionWindow])
async def start_exam(
    *,
    db: Session = Depends(deps.get_transactional_db),
    session_in: ExamSessionStart,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_student)
):
    window = submission_service.start_exam(
        db, principal=principal, domain_id=session_in.domain_id, section=session_in.section, now=now
    )
    if not window.resumed:
        await event_bus.publish(EXAM_STARTED, {
            "student_id": principal.id,
            "domain_id": window.domain_id,
            "section": window.section,
        })
    message = "Exam already started" if window.resumed else "Exam started"
    return APIResponse(message=message, data=window)


@router.post("/submit", response_model=APIResponse[StudentAnswer])
async def submit_answer(
    *,
    db: Session = Depends(deps.get_transactional_db),
    answer_in: AnswerSubmit,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_student)
):
    answer = submission_service.submit_answer(db, answer_in=answer_in, principal=principal, now=now)
    await event_bus.publish(ANSWER_SUBMITTED, {
        "answer_id": answer.id,
        "student_id": principal.id,
        "question_id": answer.question_id,
    })
    return APIResponse(message="Answer submitted successfully", data=answer)


@router.post("/marks/add", response_model=APIResponse[Answer])
async def add_mark(
    *,
    db: Session = Depends(deps.get_transactional_db),
    mark_in: MarkAdd,
    principal: Principal = Depends(deps.require_staff)
):
    answer = scoring_service.add_mark(db, answer_id=mark_in.answer_id, mark=mark_in.mark)
    await event_bus.publish(MARK_ADDED, {"answer_id": answer.id, "mark": answer.mark, "staff_id": principal.id})
    return APIResponse(message="Mark saved successfully", data=answer)


@router.put("/marks/edit/{answer_id}", response_model=APIResponse[Answer])
async def edit_mark(
    *,
    db: Session = Depends(deps.get_transactional_db),
    answer_id: int,
    mark_in: MarkEdit,
    principal: Principal = Depends(deps.require_staff)
):
    answer = scoring_service.edit_mark(db, answer_id=answer_id, mark=mark_in.mark)
    await event_bus.publish(MARK_EDITED, {"answer_id": answer.id, "mark": answer.mark, "staff_id": principal.id})
    return APIResponse(message="Mark updated successfully", data=answer)


@router.post("/calculate-total", response_model=APIResponse[TotalResult])
async def calculate_total(
    *,
    db: Session = Depends(deps.get_transactional_db),
    total_in: TotalRequest,
    principal: Principal = Depends(deps.require_staff)
):
    result = scoring_service.compute_total(
        db, student_id=total_in.student_id, domain_id=total_in.domain_id, test_id=total_in.test_id
    )
    await event_bus.publish(TOTAL_COMPUTED, result.model_dump())
    return APIResponse(message="Total calculated", data=result)


@router.get("/my-answers/{domain_id}/{section}", response_model=APIResponse[List[StudentAnswer]])
async def get_my_answers(
    *,
    db: Session = Depends(deps.get_db),
    domain_id: int,
    section: str,
    principal: Principal = Depends(deps.require_student)
):
    answers = submission_service.get_my_answers(db, principal=principal, domain_id=domain_id, section=section)
    return APIResponse(message="Answers retrieved successfully", data=answers)


@router.get("/exam-status/{domain_id}/{section}", response_model=APIResponse[ExamStatus])
async def get_exam_status(
    *,
    db: Session = Depends(deps.get_db),
    domain_id: int,
    section: str,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_student)
):
    exam_status = submission_service.get_exam_status(
        db, principal=principal, domain_id=domain_id, section=section, now=now
    )
    return APIResponse(message="Exam status retrieved", data=exam_status)


@router.delete("/answers/{answer_id}", response_model=APIResponse[None])
async def delete_answer(
    *,
    db: Session = Depends(deps.get_transactional_db),
    answer_id: int,
    principal: Principal = Depends(deps.require_staff)
):
    scoring_service.delete_answer(db, answer_id=answer_id)
    await event_bus.publish(ANSWER_DELETED, {"answer_id": answer_id, "staff_id": principal.id})
    return APIResponse(message="Answer deleted successfully")
