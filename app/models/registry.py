# Importing this module registers every mapped class so that string-based
# relationships resolve regardless of which model is touched first.
from app.models.user import User  # noqa: F401
from app.models.domain import Domain  # noqa: F401
from app.models.question import Question  # noqa: F401
from app.models.test import Test, test_domains, test_eligible_students  # noqa: F401
from app.models.attempt import Attempt  # noqa: F401
from app.models.answer import Answer  # noqa: F401
from app.models.exam_session import ExamSession  # noqa: F401
