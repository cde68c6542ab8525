import logging
from sqlalchemy.orm import Session

from app.core.constants import CascadeOutcome, CourseProgressStatusEnum
from app.crud.course import course as crud_course
from app.crud.course_progress import course_progress as crud_course_progress
from app.crud.lesson_file import lesson_file as crud_lesson_file
from app.crud.lesson_progress import lesson_progress as crud_lesson_progress
from app.models.course import Course
from app.models.lesson_file import LessonFile
from app.models.series import Series

logger = logging.getLogger(__name__)


class LessonUnlockService:
    """Walks the ordered unit sequence of a series and materialises the next unlock.

    Every operation only ensures a flag is set or a row exists, so calling it
    again for the same target is a no-op. Terminal states are reported as
    ``CascadeOutcome`` values.
    """

    def unlock_lesson(self, db: Session, user_id: int, lesson: LessonFile) -> CascadeOutcome:
        _, created = crud_lesson_progress.unlock(
            db,
            user_id=user_id,
            lesson_id=lesson.id,
            course_id=lesson.course_id,
            series_id=lesson.course.series_id,
        )
        if not created:
            return CascadeOutcome.ALREADY_UNLOCKED

        logger.info(f"Unlocked lesson {lesson.id} for user {user_id}")
        return CascadeOutcome.LESSON_UNLOCKED

    def unlock_first_unit_of_course(self, db: Session, user_id: int, course: Course) -> CascadeOutcome:
        if course.has_intro_video:
            progress, _ = crud_course_progress.get_or_create(
                db, user_id=user_id, course_id=course.id, series_id=course.series_id
            )
            if progress.intro_video_unlocked:
                return CascadeOutcome.ALREADY_UNLOCKED
            progress.intro_video_unlocked = True
            db.flush()
            logger.info(f"Unlocked intro video of course {course.id} for user {user_id}")
            return CascadeOutcome.INTRO_UNLOCKED

        first_lesson = crud_lesson_file.get_first_in_course(db, course_id=course.id)
        if not first_lesson:
            logger.warning(f"Course {course.id} has no lessons to unlock")
            return CascadeOutcome.NO_LESSONS
        return self.unlock_lesson(db, user_id, first_lesson)

    def unlock_first_unit_of_series(self, db: Session, user_id: int, series: Series) -> CascadeOutcome:
        courses = crud_course.get_by_series(db, series_id=series.id)
        if not courses:
            logger.warning(f"Series {series.id} has no courses to unlock")
            return CascadeOutcome.NO_LESSONS

        for course in courses:
            crud_course_progress.get_or_create(
                db, user_id=user_id, course_id=course.id, series_id=series.id
            )

        return self.unlock_first_unit_of_course(db, user_id, courses[0])

    def advance(self, db: Session, user_id: int, lesson: LessonFile) -> CascadeOutcome:
        """Unlock whatever follows ``lesson``: the next lesson, or the next course's first unit."""
        next_lesson = crud_lesson_file.get_next_in_course(db, lesson)
        if next_lesson:
            return self.unlock_lesson(db, user_id, next_lesson)

        next_course = crud_course.get_next_in_series(db, lesson.course)
        if not next_course:
            logger.info(f"Series exhausted after lesson {lesson.id} for user {user_id}")
            return CascadeOutcome.SERIES_EXHAUSTED
        return self.unlock_first_unit_of_course(db, user_id, next_course)

    def advance_after_intro_completion(self, db: Session, user_id: int, course: Course) -> CascadeOutcome:
        first_lesson = crud_lesson_file.get_first_in_course(db, course_id=course.id)
        if not first_lesson:
            logger.warning(f"Course {course.id} has no lessons after its intro video")
            return CascadeOutcome.NO_LESSONS
        return self.unlock_lesson(db, user_id, first_lesson)

    def start_next_course(self, db: Session, user_id: int, course: Course) -> CascadeOutcome:
        next_course = crud_course.get_next_in_series(db, course)
        if not next_course:
            logger.info(f"No course after {course.id} for user {user_id}, series finished")
            return CascadeOutcome.SERIES_EXHAUSTED

        progress, created = crud_course_progress.get_or_create(
            db,
            user_id=user_id,
            course_id=next_course.id,
            series_id=next_course.series_id,
            status=CourseProgressStatusEnum.IN_PROGRESS,
        )
        if not created and progress.status == CourseProgressStatusEnum.PENDING.value:
            progress.status = CourseProgressStatusEnum.IN_PROGRESS.value
            db.flush()

        self.unlock_first_unit_of_course(db, user_id, next_course)
        logger.info(f"Started course {next_course.id} for user {user_id}")
        return CascadeOutcome.NEXT_COURSE_STARTED


lesson_unlock_service = LessonUnlockService()
