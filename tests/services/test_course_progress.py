import pytest
from sqlalchemy.orm import Session

from app.core.constants import CourseProgressStatusEnum, EnrollmentStatusEnum, PaymentStatusEnum
from app.crud.course_progress import course_progress as crud_course_progress
from app.crud.lesson_file import lesson_file as crud_lesson_file
from app.schemas.progress import VideoProgressData
from app.services.course_progress import completion_ratio, course_progress_service
from app.services.lesson_progress import lesson_progress_service
from app.services.lesson_unlock import lesson_unlock_service


def _complete(db_session, student, lesson):
    lesson_unlock_service.unlock_lesson(db_session, student.id, lesson)
    lesson_progress_service.mark_completed(db_session, student.id, lesson, VideoProgressData(completion_percentage=100))


@pytest.mark.parametrize("completed,total,expected", [(0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 8, 12), (3, 8, 38), (3, 3, 100)])
def test_completion_ratio_rounds(completed, total, expected):
    assert completion_ratio(completed, total) == expected


def test_recompute_course_tracks_partial_and_full_completion(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 2}])
    course = built.courses[0].course
    first, second = built.courses[0].lessons

    _complete(db_session, student, first)
    assert course_progress_service.recompute_course(db_session, student.id, course) is False

    row = crud_course_progress.get_by_user_and_course(db_session, user_id=student.id, course_id=course.id)
    assert row.completion_percentage == 50
    assert row.is_completed is False
    assert row.status == CourseProgressStatusEnum.IN_PROGRESS.value

    _complete(db_session, student, second)
    assert course_progress_service.recompute_course(db_session, student.id, course) is True
    assert row.completion_percentage == 100
    assert row.is_completed is True
    assert row.status == CourseProgressStatusEnum.COMPLETED.value
    completed_at = row.completed_at
    assert completed_at is not None

    assert course_progress_service.recompute_course(db_session, student.id, course) is False
    assert row.completed_at == completed_at


def test_course_completion_unlocks_end_video(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1, "end": True}])
    course = built.courses[0].course

    _complete(db_session, student, built.courses[0].lessons[0])
    course_progress_service.recompute_course(db_session, student.id, course)

    row = crud_course_progress.get_by_user_and_course(db_session, user_id=student.id, course_id=course.id)
    assert row.end_video_unlocked is True


def test_course_completion_without_end_video_leaves_flag_unset(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1}])
    course = built.courses[0].course

    _complete(db_session, student, built.courses[0].lessons[0])
    course_progress_service.recompute_course(db_session, student.id, course)

    row = crud_course_progress.get_by_user_and_course(db_session, user_id=student.id, course_id=course.id)
    assert row.is_completed is True
    assert row.end_video_unlocked is False


def test_recompute_course_without_lessons_is_skipped(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 0}])
    assert course_progress_service.recompute_course(db_session, student.id, built.courses[0].course) is False
    assert crud_course_progress.get_by_user_and_course(
        db_session, user_id=student.id, course_id=built.courses[0].course.id
    ) is None


def test_recompute_enrollment_rounds_series_percentage(db_session: Session, student, series_factory, enroll):
    built = series_factory([{"lessons": 2}, {"lessons": 1}])
    enrollment = enroll(student, built.series)
    lessons = built.courses[0].lessons + built.courses[1].lessons

    _complete(db_session, student, lessons[0])
    course_progress_service.recompute_enrollment(db_session, student.id, built.series.id)
    assert enrollment.progress_percentage == 33
    assert enrollment.status == EnrollmentStatusEnum.ACTIVE
    assert enrollment.last_accessed_at is not None

    _complete(db_session, student, lessons[1])
    course_progress_service.recompute_enrollment(db_session, student.id, built.series.id)
    assert enrollment.progress_percentage == 67

    _complete(db_session, student, lessons[2])
    course_progress_service.recompute_enrollment(db_session, student.id, built.series.id)
    assert enrollment.progress_percentage == 100
    assert enrollment.status == EnrollmentStatusEnum.COMPLETED
    assert enrollment.completed_at is not None


def test_recompute_enrollment_ignores_unpaid_enrollment(db_session: Session, student, series_factory, enroll):
    built = series_factory([{"lessons": 1}])
    enrollment = enroll(student, built.series, payment_status=PaymentStatusEnum.PENDING)

    _complete(db_session, student, built.courses[0].lessons[0])

    assert course_progress_service.recompute_enrollment(db_session, student.id, built.series.id) is None
    assert enrollment.progress_percentage == 0


def test_set_course_status_creates_row_when_missing(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1}])
    course = built.courses[0].course

    row = course_progress_service.set_course_status(db_session, student.id, course, CourseProgressStatusEnum.ABANDONED)

    assert row.status == CourseProgressStatusEnum.ABANDONED.value
    assert row.completion_percentage == 0


def test_soft_deleted_lessons_drop_out_of_completed_counts(db_session: Session, student, series_factory, enroll):
    built = series_factory([{"lessons": 2}])
    course = built.courses[0].course
    first, second = built.courses[0].lessons
    enrollment = enroll(student, built.series)

    _complete(db_session, student, first)
    _complete(db_session, student, second)
    crud_lesson_file.delete(db_session, id=second.id)

    course_progress_service.recompute_course(db_session, student.id, course)
    course_progress_service.recompute_enrollment(db_session, student.id, built.series.id)

    row = crud_course_progress.get_by_user_and_course(db_session, user_id=student.id, course_id=course.id)
    assert row.completion_percentage == 100
    assert row.is_completed is True
    assert enrollment.progress_percentage == 100
    assert enrollment.status == EnrollmentStatusEnum.COMPLETED
