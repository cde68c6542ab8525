import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from app.core.constants import CascadeOutcome, VideoSlotEnum
from app.core.decorators import progress_operation
from app.core.exceptions import (
    CourseNotEnrolledError,
    CourseNotFoundError,
    LessonNotFoundError,
    NotEnrolledError,
    SeriesNotFoundError,
)
from app.crud.course import course as crud_course
from app.crud.course_progress import course_progress as crud_course_progress
from app.crud.enrollment import enrollment as crud_enrollment
from app.crud.lesson_file import lesson_file as crud_lesson_file
from app.crud.lesson_progress import lesson_progress as crud_lesson_progress
from app.crud.series import series as crud_series
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.lesson_file import LessonFile
from app.models.series import Series
from app.schemas.course_progress import CourseProgress as CourseProgressSchema
from app.schemas.enrollment import Enrollment as EnrollmentSchema
from app.schemas.lesson_progress import LastWatchedLesson, LessonProgress as LessonProgressSchema
from app.schemas.progress import (
    LessonProgressOutcome,
    OutlineCourse,
    OutlineLesson,
    OutlineVideo,
    ProgressResult,
    SeriesOutline,
    SeriesStartOutcome,
    VideoProgressData,
    VideoProgressOutcome,
)
from app.services.course_progress import course_progress_service
from app.services.lesson_progress import lesson_progress_service
from app.services.lesson_unlock import lesson_unlock_service
from app.services.storage import StorageAdapter, get_storage
from app.services.video_progress import video_progress_service

logger = logging.getLogger(__name__)


class SeriesProgressService:
    """Entry point for every progression operation.

    Sequences the lesson/video engines, the unlock propagator and the
    aggregator, and reports the result as a ``ProgressResult`` envelope.
    """

    def _get_series(self, db: Session, series_id: int) -> Series:
        series = crud_series.get(db, id=series_id)
        if not series:
            raise SeriesNotFoundError()
        return series

    def _get_course(self, db: Session, course_id: int) -> Course:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise CourseNotFoundError()
        return course

    def _get_lesson(self, db: Session, lesson_id: int) -> LessonFile:
        lesson = crud_lesson_file.get_with_course(db, id=lesson_id)
        if not lesson:
            raise LessonNotFoundError()
        return lesson

    def _require_enrollment(self, db: Session, user_id: int, series_id: int) -> Enrollment:
        enrollment = crud_enrollment.get_active_paid(db, user_id=user_id, series_id=series_id)
        if not enrollment:
            raise NotEnrolledError()
        return enrollment

    def _require_course_progress(self, db: Session, user_id: int, course: Course):
        self._require_enrollment(db, user_id, course.series_id)
        progress = crud_course_progress.get_by_user_and_course(db, user_id=user_id, course_id=course.id)
        if not progress:
            raise CourseNotEnrolledError()
        return progress

    def _get_accessible_lesson(self, db: Session, user_id: int, lesson_id: int) -> LessonFile:
        lesson = self._get_lesson(db, lesson_id)
        self._require_course_progress(db, user_id, lesson.course)
        return lesson

    def _run_lesson_cascade(self, db: Session, user_id: int, lesson: LessonFile) -> List[CascadeOutcome]:
        course = lesson.course
        outcomes = [lesson_unlock_service.advance(db, user_id, lesson)]

        course_completed = course_progress_service.recompute_course(db, user_id, course)
        if course_completed and not course.has_end_video:
            outcomes.append(lesson_unlock_service.start_next_course(db, user_id, course))

        course_progress_service.recompute_enrollment(db, user_id, course.series_id)
        logger.info(f"Cascade after lesson {lesson.id} for user {user_id}: {[o.value for o in outcomes]}")
        return outcomes

    @progress_operation
    async def start_series(self, db: Session, user_id: int, series_id: int) -> ProgressResult:
        """Initialise course progress for every course and unlock the first unit."""
        series = self._get_series(db, series_id)
        self._require_enrollment(db, user_id, series.id)

        outcome = lesson_unlock_service.unlock_first_unit_of_series(db, user_id, series)
        rows = crud_course_progress.get_all_by_user_and_series(db, user_id=user_id, series_id=series.id)

        return ProgressResult(
            success=True,
            message="Series started successfully",
            data=SeriesStartOutcome(
                series_id=series.id,
                outcome=outcome,
                course_progress=[CourseProgressSchema.model_validate(row) for row in rows],
            ),
        )

    @progress_operation
    async def mark_lesson_viewed(self, db: Session, user_id: int, lesson_id: int) -> ProgressResult:
        lesson = self._get_accessible_lesson(db, user_id, lesson_id)
        progress = lesson_progress_service.mark_viewed(db, user_id, lesson)

        return ProgressResult(
            success=True,
            message="Lesson marked as viewed",
            data=LessonProgressOutcome(progress=LessonProgressSchema.model_validate(progress)),
        )

    @progress_operation
    async def mark_lesson_completed(
        self, db: Session, user_id: int, lesson_id: int, data: Optional[VideoProgressData] = None
    ) -> ProgressResult:
        lesson = self._get_accessible_lesson(db, user_id, lesson_id)
        progress = lesson_progress_service.mark_completed(db, user_id, lesson, data)
        cascade = self._run_lesson_cascade(db, user_id, lesson)

        return ProgressResult(
            success=True,
            message="Lesson marked as completed",
            data=LessonProgressOutcome(
                progress=LessonProgressSchema.model_validate(progress),
                cascade=cascade,
            ),
        )

    @progress_operation
    async def update_lesson_progress(
        self, db: Session, user_id: int, lesson_id: int, data: VideoProgressData
    ) -> ProgressResult:
        lesson = self._get_accessible_lesson(db, user_id, lesson_id)
        update = lesson_progress_service.update_video_progress(db, user_id, lesson, data)

        cascade = []
        if update.auto_completed:
            cascade = self._run_lesson_cascade(db, user_id, lesson)
            message = "Video progress updated and lesson auto-completed"
        elif update.regression_prevented:
            message = "Video progress not updated - completion percentage cannot decrease"
        else:
            message = "Video progress updated"

        return ProgressResult(
            success=True,
            message=message,
            data=LessonProgressOutcome(
                progress=LessonProgressSchema.model_validate(update.progress),
                auto_completed=update.auto_completed,
                regression_prevented=update.regression_prevented,
                cascade=cascade,
            ),
        )

    @progress_operation
    async def update_video_progress(
        self, db: Session, user_id: int, course_id: int, slot: VideoSlotEnum, data: VideoProgressData
    ) -> ProgressResult:
        course = self._get_course(db, course_id)
        self._require_enrollment(db, user_id, course.series_id)
        update = video_progress_service.update_progress(db, user_id, course, slot, data)

        cascade = list(update.cascade)
        if update.auto_completed:
            cascade.append(video_progress_service.on_completed(db, user_id, course, slot))
            message = f"{slot.value.capitalize()} video progress updated and auto-completed"
        elif update.regression_prevented:
            message = f"{slot.value.capitalize()} video progress not updated - completion percentage cannot decrease"
        else:
            message = f"{slot.value.capitalize()} video progress updated"

        return ProgressResult(
            success=True,
            message=message,
            data=VideoProgressOutcome(
                progress=CourseProgressSchema.model_validate(update.progress),
                auto_completed=update.auto_completed,
                regression_prevented=update.regression_prevented,
                cascade=cascade,
            ),
        )

    @progress_operation
    async def mark_video_completed(
        self,
        db: Session,
        user_id: int,
        course_id: int,
        slot: VideoSlotEnum,
        data: Optional[VideoProgressData] = None,
    ) -> ProgressResult:
        course = self._get_course(db, course_id)
        self._require_enrollment(db, user_id, course.series_id)
        progress = video_progress_service.mark_completed(db, user_id, course, slot, data)
        outcome = video_progress_service.on_completed(db, user_id, course, slot)

        return ProgressResult(
            success=True,
            message=f"{slot.value.capitalize()} video marked as completed",
            data=VideoProgressOutcome(
                progress=CourseProgressSchema.model_validate(progress),
                cascade=[outcome],
            ),
        )

    @progress_operation
    def get_lesson_progress(self, db: Session, user_id: int, lesson_id: int) -> ProgressResult:
        lesson = self._get_accessible_lesson(db, user_id, lesson_id)
        progress = crud_lesson_progress.get_by_user_and_lesson(db, user_id=user_id, lesson_id=lesson.id)

        return ProgressResult(
            success=True,
            message="Lesson progress retrieved",
            data=LessonProgressSchema.model_validate(progress) if progress else None,
        )

    @progress_operation
    def get_course_progress(self, db: Session, user_id: int, course_id: int) -> ProgressResult:
        course = self._get_course(db, course_id)
        progress = self._require_course_progress(db, user_id, course)

        return ProgressResult(
            success=True,
            message="Course progress retrieved",
            data=CourseProgressSchema.model_validate(progress),
        )

    @progress_operation
    def get_all_course_progress(self, db: Session, user_id: int, series_id: int) -> ProgressResult:
        series = self._get_series(db, series_id)
        self._require_enrollment(db, user_id, series.id)
        rows = crud_course_progress.get_all_by_user_and_series(db, user_id=user_id, series_id=series.id)

        return ProgressResult(
            success=True,
            message="Course progress retrieved",
            data=[CourseProgressSchema.model_validate(row) for row in rows],
        )

    @progress_operation
    def get_enrollment_progress(self, db: Session, user_id: int, series_id: int) -> ProgressResult:
        series = self._get_series(db, series_id)
        enrollment = self._require_enrollment(db, user_id, series.id)

        return ProgressResult(
            success=True,
            message="Enrollment progress retrieved",
            data=EnrollmentSchema.model_validate(enrollment),
        )

    @progress_operation
    def get_series_outline(
        self, db: Session, user_id: int, series_id: int, storage: StorageAdapter = None
    ) -> ProgressResult:
        series = self._get_series(db, series_id)
        enrollment = self._require_enrollment(db, user_id, series.id)
        storage = storage or get_storage()

        course_rows = {
            row.course_id: row
            for row in crud_course_progress.get_all_by_user_and_series(db, user_id=user_id, series_id=series.id)
        }
        lesson_rows = {
            row.lesson_id: row
            for row in crud_lesson_progress.get_all_by_user_and_series(db, user_id=user_id, series_id=series.id)
        }

        courses = []
        for course in crud_course.get_by_series(db, series_id=series.id):
            course_row = course_rows.get(course.id)
            outline = OutlineCourse(
                id=course.id,
                title=course.title,
                sequence_index=course.sequence_index,
                status=course_row.status if course_row else None,
                completion_percentage=course_row.completion_percentage if course_row else 0,
            )
            for slot, has_video, key in (
                (VideoSlotEnum.INTRO, course.has_intro_video, course.intro_video_url),
                (VideoSlotEnum.END, course.has_end_video, course.end_video_url),
            ):
                if not has_video:
                    continue
                video = OutlineVideo(
                    url=storage.resolve(key),
                    state=course_row.video_state(slot) if course_row else lesson_progress_service.get_state(None),
                    completion_percentage=course_row.video_field(slot, "completion_percentage") if course_row else 0,
                )
                setattr(outline, f"{slot.value}_video", video)

            for lesson in crud_lesson_file.get_by_course(db, course_id=course.id):
                lesson_row = lesson_rows.get(lesson.id)
                outline.lessons.append(OutlineLesson(
                    id=lesson.id,
                    title=lesson.title,
                    kind=lesson.kind,
                    sequence_index=lesson.sequence_index,
                    url=storage.resolve(lesson.file_key),
                    state=lesson_progress_service.get_state(lesson_row),
                    completion_percentage=lesson_row.completion_percentage if lesson_row else 0,
                ))
            courses.append(outline)

        return ProgressResult(
            success=True,
            message="Series outline retrieved",
            data=SeriesOutline(
                series_id=series.id,
                title=series.title,
                progress_percentage=enrollment.progress_percentage,
                courses=courses,
            ),
        )

    @progress_operation
    def get_last_watched_lesson(self, db: Session, user_id: int) -> ProgressResult:
        progress = crud_lesson_progress.get_last_viewed_by_user(db, user_id=user_id)
        if not progress:
            return ProgressResult(success=True, message="No lesson watched yet", data=None)

        return ProgressResult(
            success=True,
            message="Last watched lesson retrieved",
            data=LastWatchedLesson(
                lesson_id=progress.lesson_id,
                course_id=progress.course_id,
                series_id=progress.series_id,
                title=progress.lesson.title if progress.lesson else None,
                last_position=progress.last_position,
                completion_percentage=progress.completion_percentage,
                viewed_at=progress.viewed_at,
            ),
        )


series_progress_service = SeriesProgressService()
