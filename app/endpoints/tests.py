from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.schemas.attempt import AttemptFinish, AttemptStart, AttemptWindow
from app.schemas.projection import AttemptBuckets, TestBuckets
from app.schemas.response import APIResponse, Page
from app.schemas.test import Test, TestCreate, TestSummary, TestUpdate, TitleAvailability
from app.schemas.user import Principal
from app.services.admission import admission_service
from app.services.projection import projection_service
from app.services.submission import submission_service
from app.services.test import test_service
from app.utils import deps
from app.utils.events import event_bus, ATTEMPT_STARTED, ATTEMPT_FINISHED

router = APIRouter()


@router.get("/check-title/{title}", response_model=APIResponse[TitleAvailability])
async def check_title(
    *,
    db: Session = Depends(deps.get_db),
    title: str,
    principal: Principal = Depends(deps.require_admin)
):
    exists = test_service.title_exists(db, title)
    return APIResponse(message="Title availability checked", data=TitleAvailability(exists=exists))


@router.post("/admin", response_model=APIResponse[Test], status_code=status.HTTP_201_CREATED)
async def create_test(
    *,
    db: Session = Depends(deps.get_transactional_db),
    test_in: TestCreate,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_admin)
):
    test = test_service.create_test(db, test_in=test_in, now=now)
    return APIResponse(message="Test created successfully", data=test)


@router.get("/", response_model=APIResponse[Union[Page[TestSummary], List[TestSummary]]])
async def list_tests(
    db: Session = Depends(deps.get_db),
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_admin),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1)
):
    tests = test_service.list_tests(db, now=now, page=page, limit=limit)
    return APIResponse(message="Tests retrieved successfully", data=tests)


@router.get("/student", response_model=APIResponse[TestBuckets])
async def list_student_tests(
    db: Session = Depends(deps.get_db),
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_student)
):
    buckets = projection_service.project_tests_for_student(db, principal=principal, now=now)
    return APIResponse(message="Tests retrieved successfully", data=buckets)


@router.get("/student/my-tests", response_model=APIResponse[AttemptBuckets])
async def list_my_tests(
    db: Session = Depends(deps.get_db),
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_student)
):
    buckets = projection_service.get_my_tests(db, principal=principal, now=now)
    return APIResponse(message="Your tests retrieved successfully", data=buckets)


@router.get("/{test_id}", response_model=APIResponse[Test])
async def get_test(
    *,
    db: Session = Depends(deps.get_db),
    test_id: int,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.get_current_principal)
):
    test = test_service.get_test(db, test_id=test_id, now=now)
    return APIResponse(message="Test retrieved successfully", data=test)


@router.put("/{test_id}", response_model=APIResponse[Test])
async def update_test(
    *,
    db: Session = Depends(deps.get_transactional_db),
    test_id: int,
    test_in: TestUpdate,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_admin)
):
    test = test_service.update_test(db, test_id=test_id, test_in=test_in, now=now)
    return APIResponse(message="Test updated successfully", data=test)


@router.delete("/{test_id}", response_model=APIResponse[None])
async def delete_test(
    *,
    db: Session = Depends(deps.get_transactional_db),
    test_id: int,
    principal: Principal = Depends(deps.require_admin)
):
    test_service.delete_test(db, test_id=test_id)
    return APIResponse(message="Test deleted")


@router.post("/{test_id}/start", response_model=APIResponse[AttemptWindow])
async def start_attempt(
    *,
    db: Session = Depends(deps.get_transactional_db),
    test_id: int,
    attempt_in: AttemptStart,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_student)
):
    window = admission_service.start_attempt(db, test_id=test_id, attempt_in=attempt_in, principal=principal, now=now)
    await event_bus.publish(ATTEMPT_STARTED, {
        "student_id": principal.id,
        "test_id": test_id,
        "attempt_id": window.attempt.id,
        "due_time": window.due_time.isoformat(),
    })
    return APIResponse(message="Test started", data=window)


@router.post("/{test_id}/submit", response_model=APIResponse[AttemptFinish])
async def finish_attempt(
    *,
    db: Session = Depends(deps.get_transactional_db),
    test_id: int,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_student)
):
    result = submission_service.finish_attempt(db, test_id=test_id, principal=principal, now=now)
    await event_bus.publish(ATTEMPT_FINISHED, {
        "student_id": principal.id,
        "test_id": test_id,
        "status": result.status.value,
    })
    return APIResponse(message="Test submitted", data=result)
