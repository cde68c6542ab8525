import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import ERROR_MESSAGES, UNIT_STATE_RANK, UnitStateEnum
from app.core.exceptions import LessonNotUnlockedError, LessonNotViewedError
from app.crud.lesson_progress import lesson_progress as crud_lesson_progress
from app.models.lesson_file import LessonFile
from app.models.lesson_progress import LessonProgress
from app.schemas.progress import VideoProgressData
from app.services.course_progress import course_progress_service

logger = logging.getLogger(__name__)


@dataclass
class ProgressUpdate:
    progress: LessonProgress
    regression_prevented: bool = False
    auto_completed: bool = False


def advance_state(progress: LessonProgress, state: UnitStateEnum):
    current = UnitStateEnum(progress.state)
    if UNIT_STATE_RANK[state] > UNIT_STATE_RANK[current]:
        progress.state = state.value


def apply_playback_position(progress, data: VideoProgressData, prefix: str = ""):
    if data.time_spent is not None:
        setattr(progress, f"{prefix}time_spent", data.time_spent)
    if data.last_position is not None:
        setattr(progress, f"{prefix}last_position", data.last_position)


class LessonProgressService:

    def _get_unlocked_progress(self, db: Session, user_id: int, lesson: LessonFile, for_update: bool = False) -> LessonProgress:
        progress = crud_lesson_progress.get_by_user_and_lesson(
            db, user_id=user_id, lesson_id=lesson.id, for_update=for_update
        )
        if not progress:
            raise LessonNotUnlockedError()
        return progress

    def get_state(self, progress: Optional[LessonProgress]) -> UnitStateEnum:
        if progress is None:
            return UnitStateEnum.LOCKED
        return UnitStateEnum(progress.state)

    def mark_viewed(self, db: Session, user_id: int, lesson: LessonFile) -> LessonProgress:
        progress = self._get_unlocked_progress(db, user_id, lesson)

        progress.is_viewed = True
        progress.viewed_at = datetime.now(timezone.utc)
        advance_state(progress, UnitStateEnum.VIEWED)
        db.flush()

        course_progress_service.start_course_if_pending(db, user_id, lesson.course)
        logger.info(f"User {user_id} viewed lesson {lesson.id}")
        return progress

    def mark_completed(
        self, db: Session, user_id: int, lesson: LessonFile, data: Optional[VideoProgressData] = None
    ) -> LessonProgress:
        """Complete a lesson. Manual completion (no ``data``) requires a prior view.

        Cascades are left to the caller.
        """
        progress = self._get_unlocked_progress(db, user_id, lesson, for_update=True)
        if data is None and not progress.is_viewed:
            raise LessonNotViewedError()

        now = datetime.now(timezone.utc)
        if not progress.is_viewed:
            progress.is_viewed = True
            progress.viewed_at = now

        percentage = 100
        if data is not None:
            apply_playback_position(progress, data)
            if data.completion_percentage is not None:
                percentage = data.completion_percentage
        progress.completion_percentage = max(progress.completion_percentage or 0, percentage)

        if not progress.is_completed:
            progress.is_completed = True
            progress.completed_at = now
            logger.info(f"User {user_id} completed lesson {lesson.id}")
        advance_state(progress, UnitStateEnum.COMPLETED)
        db.flush()
        return progress

    def update_video_progress(
        self, db: Session, user_id: int, lesson: LessonFile, data: VideoProgressData
    ) -> ProgressUpdate:
        progress = self._get_unlocked_progress(db, user_id, lesson, for_update=True)
        if not progress.is_viewed:
            raise LessonNotViewedError(ERROR_MESSAGES["progress_not_viewed"])

        apply_playback_position(progress, data)

        new_percentage = data.completion_percentage
        if new_percentage is None:
            db.flush()
            return ProgressUpdate(progress=progress)

        current = progress.completion_percentage or 0
        if new_percentage < current:
            db.flush()
            logger.info(
                f"Prevented progress regression on lesson {lesson.id} for user {user_id}: "
                f"{new_percentage} < {current}"
            )
            return ProgressUpdate(progress=progress, regression_prevented=True)

        progress.completion_percentage = new_percentage
        progress.is_viewed = True
        progress.viewed_at = datetime.now(timezone.utc)
        db.flush()

        if new_percentage >= settings.LESSON_AUTO_COMPLETE_THRESHOLD and not progress.is_completed:
            progress = self.mark_completed(db, user_id, lesson, data)
            logger.info(f"Auto-completed lesson {lesson.id} for user {user_id} at {new_percentage}%")
            return ProgressUpdate(progress=progress, auto_completed=True)

        return ProgressUpdate(progress=progress)


lesson_progress_service = LessonProgressService()
