import pytest
from sqlalchemy.orm import Session

from app.core.constants import CourseProgressStatusEnum, UnitStateEnum
from app.core.exceptions import LessonNotUnlockedError, LessonNotViewedError
from app.crud.course_progress import course_progress as crud_course_progress
from app.schemas.progress import VideoProgressData
from app.services.lesson_progress import lesson_progress_service
from app.services.lesson_unlock import lesson_unlock_service


@pytest.fixture
def started(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 2}])
    lesson_unlock_service.unlock_first_unit_of_series(db_session, student.id, built.series)
    return built


def test_locked_lesson_rejects_every_operation(db_session: Session, student, started):
    locked = started.courses[0].lessons[1]

    with pytest.raises(LessonNotUnlockedError):
        lesson_progress_service.mark_viewed(db_session, student.id, locked)
    with pytest.raises(LessonNotUnlockedError):
        lesson_progress_service.mark_completed(db_session, student.id, locked)
    with pytest.raises(LessonNotUnlockedError):
        lesson_progress_service.update_video_progress(
            db_session, student.id, locked, VideoProgressData(completion_percentage=10)
        )


def test_mark_viewed_starts_pending_course(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]

    progress = lesson_progress_service.mark_viewed(db_session, student.id, lesson)

    course_row = crud_course_progress.get_by_user_and_course(db_session, user_id=student.id, course_id=lesson.course_id)
    assert progress.is_viewed is True
    assert progress.viewed_at is not None
    assert progress.state == UnitStateEnum.VIEWED.value
    assert course_row.status == CourseProgressStatusEnum.IN_PROGRESS.value


def test_mark_viewed_leaves_non_pending_course_status(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]
    course_row = crud_course_progress.get_by_user_and_course(db_session, user_id=student.id, course_id=lesson.course_id)
    course_row.status = CourseProgressStatusEnum.COMPLETED.value
    db_session.flush()

    lesson_progress_service.mark_viewed(db_session, student.id, lesson)

    assert course_row.status == CourseProgressStatusEnum.COMPLETED.value


def test_manual_completion_requires_view(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]

    with pytest.raises(LessonNotViewedError):
        lesson_progress_service.mark_completed(db_session, student.id, lesson)

    progress = lesson_progress_service._get_unlocked_progress(db_session, student.id, lesson)
    assert progress.is_completed is False
    assert progress.completion_percentage == 0
    assert progress.state == UnitStateEnum.UNLOCKED.value


def test_mark_completed_after_view(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]
    lesson_progress_service.mark_viewed(db_session, student.id, lesson)

    progress = lesson_progress_service.mark_completed(db_session, student.id, lesson)

    assert progress.is_completed is True
    assert progress.is_viewed is True
    assert progress.completion_percentage == 100
    assert progress.state == UnitStateEnum.COMPLETED.value


def test_completion_with_data_skips_view_requirement(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]

    progress = lesson_progress_service.mark_completed(
        db_session, student.id, lesson, VideoProgressData(completion_percentage=95, time_spent=300.7, last_position=290)
    )

    assert progress.is_completed is True
    assert progress.is_viewed is True
    assert progress.completion_percentage == 95
    assert progress.time_spent == 300


def test_repeated_completion_keeps_first_timestamp(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]
    lesson_progress_service.mark_viewed(db_session, student.id, lesson)

    first = lesson_progress_service.mark_completed(db_session, student.id, lesson)
    completed_at = first.completed_at
    second = lesson_progress_service.mark_completed(db_session, student.id, lesson)

    assert second.completed_at == completed_at


def test_progress_requires_view(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]

    with pytest.raises(LessonNotViewedError):
        lesson_progress_service.update_video_progress(
            db_session, student.id, lesson, VideoProgressData(completion_percentage=20)
        )


def test_regression_keeps_percentage_but_records_position(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]
    lesson_progress_service.mark_viewed(db_session, student.id, lesson)
    lesson_progress_service.update_video_progress(
        db_session, student.id, lesson, VideoProgressData(completion_percentage=50, time_spent=60, last_position=60)
    )

    update = lesson_progress_service.update_video_progress(
        db_session, student.id, lesson, VideoProgressData(completion_percentage=30, time_spent=90, last_position=36)
    )

    assert update.regression_prevented is True
    assert update.progress.completion_percentage == 50
    assert update.progress.time_spent == 90
    assert update.progress.last_position == 36


def test_percentage_never_decreases(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]
    lesson_progress_service.mark_viewed(db_session, student.id, lesson)

    seen = []
    for reported in [10, 40, 20, 60, 5, 85, 60]:
        update = lesson_progress_service.update_video_progress(
            db_session, student.id, lesson, VideoProgressData(completion_percentage=reported)
        )
        seen.append(update.progress.completion_percentage)

    assert seen == sorted(seen)
    assert seen[-1] == 85


def test_missing_percentage_keeps_stored_value(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]
    lesson_progress_service.mark_viewed(db_session, student.id, lesson)
    lesson_progress_service.update_video_progress(db_session, student.id, lesson, VideoProgressData(completion_percentage=40))

    update = lesson_progress_service.update_video_progress(db_session, student.id, lesson, VideoProgressData(last_position=12))

    assert update.regression_prevented is False
    assert update.progress.completion_percentage == 40
    assert update.progress.last_position == 12


def test_threshold_auto_completes(db_session: Session, student, started):
    lesson = started.courses[0].lessons[0]
    lesson_progress_service.mark_viewed(db_session, student.id, lesson)

    below = lesson_progress_service.update_video_progress(db_session, student.id, lesson, VideoProgressData(completion_percentage=89))
    assert below.auto_completed is False
    assert below.progress.is_completed is False

    update = lesson_progress_service.update_video_progress(db_session, student.id, lesson, VideoProgressData(completion_percentage=95))
    assert update.auto_completed is True
    assert update.progress.is_completed is True
    assert update.progress.completion_percentage == 95

    again = lesson_progress_service.update_video_progress(db_session, student.id, lesson, VideoProgressData(completion_percentage=97))
    assert again.auto_completed is False


def test_get_state_reads_missing_row_as_locked():
    assert lesson_progress_service.get_state(None) == UnitStateEnum.LOCKED
