import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session

from app.core.constants import CourseProgressStatusEnum, EnrollmentStatusEnum
from app.crud.course_progress import course_progress as crud_course_progress
from app.crud.enrollment import enrollment as crud_enrollment
from app.crud.lesson_file import lesson_file as crud_lesson_file
from app.crud.lesson_progress import lesson_progress as crud_lesson_progress
from app.models.course import Course
from app.models.course_progress import CourseProgress
from app.models.enrollment import Enrollment

logger = logging.getLogger(__name__)


def completion_ratio(completed: int, total: int) -> int:
    return round(100 * completed / total)


class CourseProgressService:
    """Rolls completed lessons up into course and enrollment percentages."""

    def recompute_course(self, db: Session, user_id: int, course: Course) -> bool:
        """Returns True when this call moved the course into the completed state."""
        total = crud_lesson_file.count_in_course(db, course_id=course.id)
        if total == 0:
            logger.warning(f"Course {course.id} has no lessons, skipping progress recompute")
            return False

        progress, _ = crud_course_progress.get_or_create(
            db, user_id=user_id, course_id=course.id, series_id=course.series_id, for_update=True
        )

        completed = crud_lesson_progress.count_completed_in_course(db, user_id=user_id, course_id=course.id)
        percentage = completion_ratio(completed, total)
        was_completed = progress.is_completed

        progress.completion_percentage = percentage
        progress.is_completed = percentage == 100
        if progress.is_completed:
            progress.status = CourseProgressStatusEnum.COMPLETED.value
            if progress.completed_at is None:
                progress.completed_at = datetime.now(timezone.utc)
        else:
            progress.status = CourseProgressStatusEnum.IN_PROGRESS.value

        transitioned = progress.is_completed and not was_completed
        if transitioned:
            logger.info(f"Course {course.id} completed by user {user_id}")
            if course.has_end_video and not progress.end_video_unlocked:
                progress.end_video_unlocked = True
                logger.info(f"Unlocked end video of course {course.id} for user {user_id}")

        db.flush()
        return transitioned

    def recompute_enrollment(self, db: Session, user_id: int, series_id: int) -> Optional[Enrollment]:
        enrollment = crud_enrollment.get_active_paid(db, user_id=user_id, series_id=series_id, for_update=True)
        if not enrollment:
            logger.warning(f"No paid enrollment for user {user_id} in series {series_id}, skipping recompute")
            return None

        total = crud_lesson_file.count_in_series(db, series_id=series_id)
        if total == 0:
            logger.warning(f"Series {series_id} has no lessons, skipping enrollment recompute")
            return enrollment

        completed = crud_lesson_progress.count_completed_in_series(db, user_id=user_id, series_id=series_id)
        percentage = completion_ratio(completed, total)

        enrollment.progress_percentage = percentage
        if percentage == 100:
            enrollment.status = EnrollmentStatusEnum.COMPLETED
            if enrollment.completed_at is None:
                enrollment.completed_at = datetime.now(timezone.utc)
        else:
            enrollment.status = EnrollmentStatusEnum.ACTIVE
        enrollment.last_accessed_at = datetime.now(timezone.utc)
        db.flush()

        logger.info(f"Enrollment {enrollment.id} progress is now {percentage}%")
        return enrollment

    def set_course_status(
        self, db: Session, user_id: int, course: Course, status: CourseProgressStatusEnum
    ) -> CourseProgress:
        progress, _ = crud_course_progress.get_or_create(
            db, user_id=user_id, course_id=course.id, series_id=course.series_id, status=status
        )
        return crud_course_progress.update(db, db_obj=progress, obj_in={"status": status.value})

    def start_course_if_pending(self, db: Session, user_id: int, course: Course) -> CourseProgress:
        progress = crud_course_progress.get_by_user_and_course(db, user_id=user_id, course_id=course.id)
        if progress and progress.status != CourseProgressStatusEnum.PENDING.value:
            return progress
        return self.set_course_status(db, user_id, course, CourseProgressStatusEnum.IN_PROGRESS)


course_progress_service = CourseProgressService()
