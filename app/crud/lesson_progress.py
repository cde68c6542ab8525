from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud.base import CRUDBase
from app.core.constants import UnitStateEnum
from app.models.course import Course
from app.models.lesson_file import LessonFile
from app.models.lesson_progress import LessonProgress
from app.schemas.lesson_progress import LessonProgressCreate, LessonProgressUpdate


class CRUDLessonProgress(CRUDBase[LessonProgress, LessonProgressCreate, LessonProgressUpdate]):

    def get_by_user_and_lesson(
        self, db: Session, user_id: int, lesson_id: int, for_update: bool = False
    ) -> Optional[LessonProgress]:
        query = (
            self._query_active(db)
            .filter(LessonProgress.user_id == user_id)
            .filter(LessonProgress.lesson_id == lesson_id)
        )
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_all_by_user_and_series(self, db: Session, user_id: int, series_id: int) -> List[LessonProgress]:
        return (
            self._query_active(db)
            .filter(LessonProgress.user_id == user_id)
            .filter(LessonProgress.series_id == series_id)
            .all()
        )

    def get_last_viewed_by_user(self, db: Session, user_id: int) -> Optional[LessonProgress]:
        return (
            self._query_active(db)
            .filter(LessonProgress.user_id == user_id)
            .filter(LessonProgress.is_viewed.is_(True))
            .order_by(LessonProgress.viewed_at.desc(), LessonProgress.id.desc())
            .first()
        )

    def _query_live_completed(self, db: Session, user_id: int):
        return (
            self._query_active(db)
            .join(LessonFile, LessonFile.id == LessonProgress.lesson_id)
            .join(Course, Course.id == LessonFile.course_id)
            .filter(LessonFile.deleted_at.is_(None))
            .filter(Course.deleted_at.is_(None))
            .filter(LessonProgress.user_id == user_id)
            .filter(LessonProgress.is_completed.is_(True))
        )

    def count_completed_in_course(self, db: Session, user_id: int, course_id: int) -> int:
        return (
            self._query_live_completed(db, user_id)
            .filter(LessonProgress.course_id == course_id)
            .count()
        )

    def count_completed_in_series(self, db: Session, user_id: int, series_id: int) -> int:
        return (
            self._query_live_completed(db, user_id)
            .filter(LessonProgress.series_id == series_id)
            .count()
        )

    def unlock(self, db: Session, *, user_id: int, lesson_id: int, course_id: int, series_id: int) -> tuple[LessonProgress, bool]:
        """Ensure the progress row exists. Returns (row, created)."""
        existing = self.get_by_user_and_lesson(db, user_id=user_id, lesson_id=lesson_id)
        if existing:
            return existing, False

        progress = self.create(db, obj_in={
            "user_id": user_id,
            "lesson_id": lesson_id,
            "course_id": course_id,
            "series_id": series_id,
            "state": UnitStateEnum.UNLOCKED.value,
            "is_viewed": False,
            "is_completed": False,
            "completion_percentage": 0,
        })
        return progress, True


lesson_progress = CRUDLessonProgress(LessonProgress)
