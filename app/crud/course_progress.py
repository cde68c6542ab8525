from datetime import datetime, timezone
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud.base import CRUDBase
from app.core.constants import CourseProgressStatusEnum
from app.models.course import Course
from app.models.course_progress import CourseProgress
from app.schemas.course_progress import CourseProgressCreate, CourseProgressUpdate


class CRUDCourseProgress(CRUDBase[CourseProgress, CourseProgressCreate, CourseProgressUpdate]):

    def get_by_user_and_course(
        self, db: Session, user_id: int, course_id: int, for_update: bool = False
    ) -> Optional[CourseProgress]:
        query = (
            self._query_active(db)
            .filter(CourseProgress.user_id == user_id)
            .filter(CourseProgress.course_id == course_id)
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_all_by_user_and_series(self, db: Session, user_id: int, series_id: int) -> List[CourseProgress]:
        return (
            self._query_active(db)
            .join(Course, Course.id == CourseProgress.course_id)
            .filter(CourseProgress.user_id == user_id)
            .filter(CourseProgress.series_id == series_id)
            .filter(Course.deleted_at.is_(None))
            .order_by(Course.sequence_index.asc(), Course.id.asc())
            .all()
        )

    def get_or_create(
        self,
        db: Session,
        *,
        user_id: int,
        course_id: int,
        series_id: int,
        status: CourseProgressStatusEnum = CourseProgressStatusEnum.PENDING,
        for_update: bool = False,
    ) -> tuple[CourseProgress, bool]:
        existing = self.get_by_user_and_course(db, user_id=user_id, course_id=course_id, for_update=for_update)
        if existing:
            return existing, False

        progress = self.create(db, obj_in={
            "user_id": user_id,
            "course_id": course_id,
            "series_id": series_id,
            "status": status.value,
            "completion_percentage": 0,
            "is_completed": False,
            "started_at": datetime.now(timezone.utc),
        })
        return progress, True


course_progress = CRUDCourseProgress(CourseProgress)
