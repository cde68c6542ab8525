import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import uuid
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.database import Base
from app.core.constants import EnrollmentStatusEnum, PaymentStatusEnum
from app.core.security import create_access_token
from app.crud.course import course as crud_course
from app.crud.enrollment import enrollment as crud_enrollment
from app.crud.lesson_file import lesson_file as crud_lesson_file
from app.crud.series import series as crud_series
from app.crud.user import user as crud_user
from app.models import course, course_progress, enrollment, lesson_file, lesson_progress, series, user  # noqa: F401
from app.schemas.content import CourseCreate, LessonFileCreate, SeriesCreate
from app.utils import deps as deps_utils
import main

test_db_url = settings.TEST_DATABASE_URL or "sqlite:///./test.db"

@pytest.fixture(scope="session")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
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

@pytest.fixture(scope="function")
def client(db_session):
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = lambda: db_session
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def user_factory(db_session):
    def _user_factory(is_active=True):
        return crud_user.create(db_session, obj_in={
            "full_name": "Test Student",
            "email": f"student-{uuid.uuid4().hex[:10]}@test.com",
            "is_active": is_active,
        })
    return _user_factory

@pytest.fixture
def student(user_factory):
    return user_factory()

@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}
    return _headers

@pytest.fixture
def series_factory(db_session):
    """Build a series from a layout such as ``[{"lessons": 2, "intro": True}, {"lessons": 1}]``."""
    def _series_factory(layout):
        suffix = uuid.uuid4().hex[:8]
        new_series = crud_series.create(
            db_session, obj_in=SeriesCreate(title=f"Series {suffix}", slug=f"series-{suffix}")
        )
        courses = []
        for index, entry in enumerate(layout):
            new_course = crud_course.create(db_session, obj_in=CourseCreate(
                series_id=new_series.id,
                title=f"Course {index}",
                intro_video_url=f"courses/{suffix}/{index}/intro.mp4" if entry.get("intro") else None,
                end_video_url=f"courses/{suffix}/{index}/end.mp4" if entry.get("end") else None,
            ))
            lessons = [
                crud_lesson_file.create(db_session, obj_in=LessonFileCreate(
                    course_id=new_course.id,
                    title=f"Lesson {index}.{position}",
                    file_key=f"lessons/{suffix}/{index}/{position}.mp4",
                ))
                for position in range(entry.get("lessons", 0))
            ]
            courses.append(SimpleNamespace(course=new_course, lessons=lessons))
        return SimpleNamespace(series=new_series, courses=courses)
    return _series_factory

@pytest.fixture
def enroll(db_session):
    def _enroll(user, series, payment_status=PaymentStatusEnum.COMPLETED, status=EnrollmentStatusEnum.ACTIVE):
        return crud_enrollment.create(db_session, obj_in={
            "user_id": user.id,
            "series_id": series.id,
            "status": status,
            "payment_status": payment_status.value,
        })
    return _enroll
