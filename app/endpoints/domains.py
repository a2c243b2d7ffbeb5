from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.schemas.answer import StudentAnswerGroup
from app.schemas.projection import CompletedUser
from app.schemas.response import APIResponse
from app.schemas.test import TestSummary
from app.schemas.user import Principal
from app.services.projection import projection_service
from app.services.scoring import scoring_service
from app.services.test import test_service
from app.utils import deps

router = APIRouter()


@router.get("/{domain_id}/answers", response_model=APIResponse[List[StudentAnswerGroup]])
async def get_domain_answers(
    *,
    db: Session = Depends(deps.get_db),
    domain_id: int,
    test_id: Optional[int] = Query(None),
    principal: Principal = Depends(deps.require_staff)
):
    groups = scoring_service.get_domain_answers(db, domain_id=domain_id, test_id=test_id)
    return APIResponse(message="Domain answers retrieved successfully", data=groups)


@router.get("/{domain_id}/tests", response_model=APIResponse[List[TestSummary]])
async def get_domain_tests(
    *,
    db: Session = Depends(deps.get_db),
    domain_id: int,
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_staff)
):
    tests = test_service.list_tests_for_domain(db, domain_id=domain_id, now=now)
    return APIResponse(message="Domain tests retrieved successfully", data=tests)


@router.get("/{domain_id}/completed-users", response_model=APIResponse[List[CompletedUser]])
async def get_completed_users(
    *,
    db: Session = Depends(deps.get_db),
    domain_id: int,
    test_id: Optional[int] = Query(None),
    now: datetime = Depends(deps.get_now),
    principal: Principal = Depends(deps.require_staff)
):
    users = projection_service.get_completed_users(db, domain_id=domain_id, now=now, test_id=test_id)
    return APIResponse(message="Completed users retrieved successfully", data=users)
