from sqlalchemy.orm import Session

from app.core.constants import CascadeOutcome, CourseProgressStatusEnum
from app.crud.course_progress import course_progress as crud_course_progress
from app.crud.lesson_file import lesson_file as crud_lesson_file
from app.crud.lesson_progress import lesson_progress as crud_lesson_progress
from app.schemas.content import LessonFileCreate
from app.services.lesson_unlock import lesson_unlock_service


def _is_unlocked(db: Session, user, lesson) -> bool:
    return crud_lesson_progress.get_by_user_and_lesson(db, user_id=user.id, lesson_id=lesson.id) is not None


def test_unlock_first_unit_creates_course_progress_and_first_lesson(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1}, {"lessons": 1}])

    outcome = lesson_unlock_service.unlock_first_unit_of_series(db_session, student.id, built.series)

    assert outcome == CascadeOutcome.LESSON_UNLOCKED
    assert _is_unlocked(db_session, student, built.courses[0].lessons[0])
    assert not _is_unlocked(db_session, student, built.courses[1].lessons[0])

    rows = crud_course_progress.get_all_by_user_and_series(db_session, user_id=student.id, series_id=built.series.id)
    assert [row.course_id for row in rows] == [c.course.id for c in built.courses]
    assert all(row.status == CourseProgressStatusEnum.PENDING.value for row in rows)


def test_unlock_first_unit_prefers_intro_video(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 2, "intro": True}])

    outcome = lesson_unlock_service.unlock_first_unit_of_series(db_session, student.id, built.series)

    progress = crud_course_progress.get_by_user_and_course(
        db_session, user_id=student.id, course_id=built.courses[0].course.id
    )
    assert outcome == CascadeOutcome.INTRO_UNLOCKED
    assert progress.intro_video_unlocked is True
    assert not _is_unlocked(db_session, student, built.courses[0].lessons[0])


def test_unlock_first_unit_is_idempotent(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 2}, {"lessons": 1}])

    lesson_unlock_service.unlock_first_unit_of_series(db_session, student.id, built.series)
    second = lesson_unlock_service.unlock_first_unit_of_series(db_session, student.id, built.series)

    assert second == CascadeOutcome.ALREADY_UNLOCKED
    assert len(crud_lesson_progress.get_all_by_user_and_series(
        db_session, user_id=student.id, series_id=built.series.id
    )) == 1
    assert len(crud_course_progress.get_all_by_user_and_series(
        db_session, user_id=student.id, series_id=built.series.id
    )) == 2


def test_empty_series_reports_no_lessons(db_session: Session, student, series_factory):
    built = series_factory([])
    assert lesson_unlock_service.unlock_first_unit_of_series(db_session, student.id, built.series) == CascadeOutcome.NO_LESSONS


def test_advance_unlocks_next_lesson_in_course(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 3}])
    first, second, third = built.courses[0].lessons

    assert lesson_unlock_service.advance(db_session, student.id, first) == CascadeOutcome.LESSON_UNLOCKED
    assert _is_unlocked(db_session, student, second)
    assert not _is_unlocked(db_session, student, third)
    assert lesson_unlock_service.advance(db_session, student.id, first) == CascadeOutcome.ALREADY_UNLOCKED


def test_advance_from_last_lesson_moves_to_next_course(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1}, {"lessons": 2}])

    outcome = lesson_unlock_service.advance(db_session, student.id, built.courses[0].lessons[0])

    assert outcome == CascadeOutcome.LESSON_UNLOCKED
    assert _is_unlocked(db_session, student, built.courses[1].lessons[0])
    assert not _is_unlocked(db_session, student, built.courses[1].lessons[1])


def test_advance_into_course_with_intro_unlocks_intro_only(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1}, {"lessons": 1, "intro": True}])
    next_course = built.courses[1].course

    outcome = lesson_unlock_service.advance(db_session, student.id, built.courses[0].lessons[0])

    progress = crud_course_progress.get_by_user_and_course(db_session, user_id=student.id, course_id=next_course.id)
    assert outcome == CascadeOutcome.INTRO_UNLOCKED
    assert progress.intro_video_unlocked is True
    assert not _is_unlocked(db_session, student, built.courses[1].lessons[0])


def test_advance_past_last_course_is_a_quiet_no_op(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1}])
    assert lesson_unlock_service.advance(db_session, student.id, built.courses[0].lessons[0]) == CascadeOutcome.SERIES_EXHAUSTED


def test_traversal_follows_sequence_index_not_insertion_order(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 0}])
    course = built.courses[0].course
    late = crud_lesson_file.create(db_session, obj_in=LessonFileCreate(course_id=course.id, title="late", sequence_index=5))
    early = crud_lesson_file.create(db_session, obj_in=LessonFileCreate(course_id=course.id, title="early", sequence_index=1))

    lesson_unlock_service.unlock_first_unit_of_series(db_session, student.id, built.series)

    assert _is_unlocked(db_session, student, early)
    assert not _is_unlocked(db_session, student, late)

    lesson_unlock_service.advance(db_session, student.id, early)
    assert _is_unlocked(db_session, student, late)


def test_advance_after_intro_completion_unlocks_first_lesson(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 2, "intro": True}])
    course = built.courses[0].course

    assert lesson_unlock_service.advance_after_intro_completion(db_session, student.id, course) == CascadeOutcome.LESSON_UNLOCKED
    assert lesson_unlock_service.advance_after_intro_completion(db_session, student.id, course) == CascadeOutcome.ALREADY_UNLOCKED
    assert _is_unlocked(db_session, student, built.courses[0].lessons[0])


def test_start_next_course_marks_it_in_progress(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1}, {"lessons": 1}])
    lesson_unlock_service.unlock_first_unit_of_series(db_session, student.id, built.series)

    outcome = lesson_unlock_service.start_next_course(db_session, student.id, built.courses[0].course)

    progress = crud_course_progress.get_by_user_and_course(
        db_session, user_id=student.id, course_id=built.courses[1].course.id
    )
    assert outcome == CascadeOutcome.NEXT_COURSE_STARTED
    assert progress.status == CourseProgressStatusEnum.IN_PROGRESS.value
    assert _is_unlocked(db_session, student, built.courses[1].lessons[0])


def test_start_next_course_after_last_course(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 1}])
    assert lesson_unlock_service.start_next_course(db_session, student.id, built.courses[0].course) == CascadeOutcome.SERIES_EXHAUSTED


def test_soft_deleted_lessons_are_skipped(db_session: Session, student, series_factory):
    built = series_factory([{"lessons": 3}])
    first, second, third = built.courses[0].lessons

    crud_lesson_file.delete(db_session, id=second.id)

    assert lesson_unlock_service.advance(db_session, student.id, first) == CascadeOutcome.LESSON_UNLOCKED
    assert _is_unlocked(db_session, student, third)
    assert not _is_unlocked(db_session, student, second)
    assert crud_lesson_file.count_in_course(db_session, course_id=built.courses[0].course.id) == 2
