"""
EduFlow - test configuration and fixtures
"""
import os
from typing import Callable, Generator

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["ENVIRONMENT"] = "development"

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from eduflow.main import api
from eduflow.db.base import Base
from eduflow.db.session import get_db
from eduflow.core.security_password import hash_password
from eduflow.core.tokens import create_access_token
from eduflow.models import Course, Enrollment, User

fake = Faker()

TEST_PASSWORD = "testpassword123"

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh schema per test"""
    Base.metadata.create_all(test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db():
        yield db_session

    api.dependency_overrides[get_db] = override_get_db
    yield TestClient(api)
    api.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _make(role: str = "student", name: str | None = None, email: str | None = None) -> User:
        user = User(
            name=name or fake.name(),
            email=email or f"{fake.unique.user_name()}@eduflow.io".lower(),
            hashed_password=hash_password(TEST_PASSWORD),
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def make_course(db_session: Session) -> Callable[..., Course]:
    def _make(title: str | None = None, instructor_name: str = "Maya Khoury", published: bool = True) -> Course:
        course = Course(
            title=title or fake.catch_phrase(),
            description=fake.sentence(),
            instructor_name=instructor_name,
            category="development",
            modules=[],
            published=published,
        )
        db_session.add(course)
        db_session.commit()
        db_session.refresh(course)
        return course
    return _make


@pytest.fixture
def enroll(db_session: Session) -> Callable[..., Enrollment]:
    def _enroll(user: User, course: Course, progress: int = 0) -> Enrollment:
        enr = Enrollment(user_id=user.id, course_id=course.id, progress=progress)
        db_session.add(enr)
        db_session.commit()
        db_session.refresh(enr)
        return enr
    return _enroll


def headers_for(user: User) -> dict:
    token = create_access_token(sub=str(user.id), role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student(make_user) -> User:
    return make_user(role="student", name="Lina Aziz")


@pytest.fixture
def admin(make_user) -> User:
    return make_user(role="admin", name="Site Admin")


@pytest.fixture
def student_headers(student: User) -> dict:
    return headers_for(student)


@pytest.fixture
def admin_headers(admin: User) -> dict:
    return headers_for(admin)


@pytest.fixture
def auth_headers_for() -> Callable[[User], dict]:
    return headers_for
