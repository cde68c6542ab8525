import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import CascadeOutcome, VideoSlotEnum
from app.core.exceptions import (
    CourseNotCompletedError,
    CourseNotEnrolledError,
    EndVideoNotUnlockedError,
    IntroVideoNotUnlockedError,
    NoVideoError,
)
from app.crud.course_progress import course_progress as crud_course_progress
from app.models.course import Course
from app.models.course_progress import CourseProgress
from app.schemas.progress import VideoProgressData
from app.services.lesson_progress import apply_playback_position
from app.services.lesson_unlock import lesson_unlock_service

logger = logging.getLogger(__name__)


@dataclass
class VideoProgressUpdate:
    progress: CourseProgress
    regression_prevented: bool = False
    auto_completed: bool = False
    cascade: List[CascadeOutcome] = field(default_factory=list)


class IntroVideoSlot:
    slot = VideoSlotEnum.INTRO

    def has_video(self, course: Course) -> bool:
        return course.has_intro_video

    def check_access(self, progress: CourseProgress):
        if not progress.intro_video_unlocked:
            raise IntroVideoNotUnlockedError()

    def on_completed(self, db: Session, user_id: int, course: Course) -> CascadeOutcome:
        return lesson_unlock_service.advance_after_intro_completion(db, user_id, course)


class EndVideoSlot:
    slot = VideoSlotEnum.END

    def has_video(self, course: Course) -> bool:
        return course.has_end_video

    def check_access(self, progress: CourseProgress):
        if not progress.is_completed:
            raise CourseNotCompletedError()
        if not progress.end_video_unlocked:
            raise EndVideoNotUnlockedError()

    def on_completed(self, db: Session, user_id: int, course: Course) -> CascadeOutcome:
        return lesson_unlock_service.start_next_course(db, user_id, course)


VIDEO_SLOTS = {
    VideoSlotEnum.INTRO: IntroVideoSlot(),
    VideoSlotEnum.END: EndVideoSlot(),
}


class VideoProgressService:
    """Progress tracking for the intro and end videos of a course.

    Both slots share the regression guard and the auto-complete threshold.
    They differ in who may watch (``check_access``) and what completing the
    video unlocks (``on_completed``).
    """

    def _get_accessible_progress(
        self, db: Session, user_id: int, course: Course, slot: VideoSlotEnum
    ) -> CourseProgress:
        strategy = VIDEO_SLOTS[slot]
        if not strategy.has_video(course):
            raise NoVideoError(slot.value)

        progress = crud_course_progress.get_by_user_and_course(
            db, user_id=user_id, course_id=course.id, for_update=True
        )
        if not progress:
            raise CourseNotEnrolledError()

        strategy.check_access(progress)
        return progress

    def on_completed(self, db: Session, user_id: int, course: Course, slot: VideoSlotEnum) -> CascadeOutcome:
        return VIDEO_SLOTS[slot].on_completed(db, user_id, course)

    def mark_completed(
        self,
        db: Session,
        user_id: int,
        course: Course,
        slot: VideoSlotEnum,
        data: Optional[VideoProgressData] = None,
    ) -> CourseProgress:
        progress = self._get_accessible_progress(db, user_id, course, slot)

        percentage = 100
        if data is not None:
            apply_playback_position(progress, data, prefix=f"{slot.value}_video_")
            if data.completion_percentage is not None:
                percentage = data.completion_percentage

        current = progress.video_field(slot, "completion_percentage") or 0
        progress.set_video_field(slot, "completion_percentage", max(current, percentage))
        progress.set_video_field(slot, "viewed", True)
        if not progress.video_field(slot, "completed"):
            progress.set_video_field(slot, "completed", True)
            logger.info(f"User {user_id} completed {slot.value} video of course {course.id}")
        db.flush()
        return progress

    def update_progress(
        self, db: Session, user_id: int, course: Course, slot: VideoSlotEnum, data: VideoProgressData
    ) -> VideoProgressUpdate:
        progress = self._get_accessible_progress(db, user_id, course, slot)
        apply_playback_position(progress, data, prefix=f"{slot.value}_video_")

        new_percentage = data.completion_percentage
        if new_percentage is None:
            db.flush()
            return VideoProgressUpdate(progress=progress)

        current = progress.video_field(slot, "completion_percentage") or 0
        if new_percentage < current:
            db.flush()
            logger.info(
                f"Prevented {slot.value} video regression on course {course.id} for user {user_id}: "
                f"{new_percentage} < {current}"
            )
            return VideoProgressUpdate(progress=progress, regression_prevented=True)

        progress.set_video_field(slot, "completion_percentage", new_percentage)
        progress.set_video_field(slot, "viewed", True)
        if progress.started_at is None:
            progress.started_at = datetime.now(timezone.utc)
        db.flush()

        result = VideoProgressUpdate(progress=progress)
        if slot == VideoSlotEnum.INTRO and new_percentage >= settings.INTRO_UNLOCK_THRESHOLD:
            result.cascade.append(lesson_unlock_service.advance_after_intro_completion(db, user_id, course))

        if new_percentage >= settings.VIDEO_AUTO_COMPLETE_THRESHOLD and not progress.video_field(slot, "completed"):
            result.progress = self.mark_completed(db, user_id, course, slot, data)
            result.auto_completed = True
            logger.info(f"Auto-completed {slot.value} video of course {course.id} for user {user_id}")

        return result


video_progress_service = VideoProgressService()
