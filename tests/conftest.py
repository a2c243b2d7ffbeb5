import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
import uuid
from datetime import datetime, timedelta, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient
from app.core.config import settings
from app.core.constants import RoleEnum, TestStatusEnum
from app.core.database import Base, enable_sqlite_foreign_keys
from app.core.security import create_access_token
from app.models.domain import Domain
from app.models.question import Question
from app.models.test import Test
from app.models.user import User
from app.schemas.user import Principal
from app.utils import deps as deps_utils
from app.utils.events import event_bus
import main

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

FROZEN_NOW = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
        enable_sqlite_foreign_keys(engine)
    else:
        engine = create_engine(test_db_url)
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()
    if test_db_url.startswith("sqlite") and os.path.exists("./test.db"):
        os.remove("./test.db")

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        # CRUD operations commit, so every table is emptied between tests.
        with database_engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(table.delete())

@pytest.fixture
def now():
    return FROZEN_NOW

@pytest.fixture(scope="function")
def client(db_session, now):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_now] = lambda: now
    event_bus.reset()
    try:
        yield TestClient(main.app)
    finally:
        main.app.dependency_overrides.clear()
        event_bus.reset()

@pytest.fixture
def set_now(client):
    def _set_now(value: datetime):
        main.app.dependency_overrides[deps_utils.get_now] = lambda: value
    return _set_now

@pytest.fixture
def user_factory(db_session):
    def _user_factory(role: RoleEnum = RoleEnum.STUDENT, name: str = None, is_active: bool = True) -> User:
        suffix = uuid.uuid4().hex[:8]
        user = User(
            name=name or f"Test {role.value} {suffix}",
            email=f"{role.value}-{suffix}@test.com",
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _user_factory

@pytest.fixture
def student(user_factory):
    return user_factory(RoleEnum.STUDENT, name="Student One")

@pytest.fixture
def admin(user_factory):
    return user_factory(RoleEnum.ADMIN, name="Admin User")

@pytest.fixture
def staff(user_factory):
    return user_factory(RoleEnum.STAFF, name="Staff User")

@pytest.fixture
def principal_for():
    def _principal_for(user: User) -> Principal:
        return Principal(id=user.id, role=user.role)
    return _principal_for

@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token(user.id, user.role.value)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers

@pytest.fixture
def domain_factory(db_session):
    def _domain_factory(name: str = None) -> Domain:
        domain = Domain(name=name or f"Domain {uuid.uuid4().hex[:8]}")
        db_session.add(domain)
        db_session.commit()
        db_session.refresh(domain)
        return domain
    return _domain_factory

@pytest.fixture
def question_factory(db_session):
    def _question_factory(domain: Domain, section: str = "A", title: str = "Explain the answer", is_active: bool = True) -> Question:
        question = Question(
            domain_id=domain.id,
            title=title,
            description=f"{title} in detail.",
            section=section,
            is_active=is_active,
        )
        db_session.add(question)
        db_session.commit()
        db_session.refresh(question)
        return question
    return _question_factory

@pytest.fixture
def make_test(db_session, now):
    """Inserts tests directly so windows in the past can be arranged."""
    def _make_test(
        domains,
        start_offset: timedelta = timedelta(hours=-1),
        end_offset: timedelta = timedelta(hours=1),
        duration_minutes: int = 60,
        sections=("A", "B"),
        eligible_students=(),
        title: str = None,
    ) -> Test:
        test = Test(
            title=title or f"Test {uuid.uuid4().hex[:8]}",
            start_date=now + start_offset,
            end_date=now + end_offset,
            duration_minutes=duration_minutes,
            sections=list(sections),
            status=TestStatusEnum.UPCOMING,
            domains=list(domains),
            eligible_students=list(eligible_students),
        )
        db_session.add(test)
        db_session.commit()
        db_session.refresh(test)
        return test
    return _make_test

@pytest.fixture
def active_test(make_test, domain_factory, question_factory):
    domain = domain_factory("Reading")
    question_factory(domain, section="A", title="First question")
    question_factory(domain, section="A", title="Second question")
    question_factory(domain, section="B", title="Other section")
    return make_test([domain])
