from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AssessmentError(HTTPException):
    """HTTPException carrying a stable reason code for the error envelope."""

    code: str = "ASSESSMENT_ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request could not be processed."

    def __init__(self, detail: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)
        self.details = details


class InputValidationError(AssessmentError):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."


class NotFound(AssessmentError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."


class NotEligible(AssessmentError):
    code = "NOT_ELIGIBLE"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not eligible for this test."


class NotActive(AssessmentError):
    code = "NOT_ACTIVE"
    default_detail = "Test is not active."


class DomainNotInTest(AssessmentError):
    code = "DOMAIN_NOT_IN_TEST"
    default_detail = "Domain not in this test."


class InvalidSection(AssessmentError):
    code = "INVALID_SECTION"
    default_detail = "Invalid section."


class AlreadyCompleted(AssessmentError):
    code = "ALREADY_COMPLETED"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "You have already completed this test."


class ExamExpired(AssessmentError):
    code = "EXAM_EXPIRED"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Exam time has expired."

    def __init__(self, detail: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(detail, details={"examExpired": True, **(details or {})})


class NotStarted(AssessmentError):
    code = "NOT_STARTED"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not started."


class MarkAlreadyExists(AssessmentError):
    code = "MARK_ALREADY_EXISTS"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Mark already exists. Use edit endpoint to update."


class NoExistingMark(AssessmentError):
    code = "NO_EXISTING_MARK"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "No existing mark found. Use add endpoint to create a new mark."
