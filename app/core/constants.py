from enum import Enum


class RoleEnum(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    STUDENT = "student"

class TestStatusEnum(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    FINISHED = "finished"

class AttemptStatusEnum(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    EXPIRED = "expired"

class QuestionTypeEnum(str, Enum):
    MCQ = "mcq"
    TEXT = "text"
    FILE = "file"

class BucketEnum(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


TERMINAL_ATTEMPT_STATUSES = (AttemptStatusEnum.COMPLETED, AttemptStatusEnum.EXPIRED)

ANSWER_TEXT_MAX_LENGTH = 10000
TEST_TITLE_MIN_LENGTH = 3
TEST_TITLE_MAX_LENGTH = 200
