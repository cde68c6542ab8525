from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud.base import CRUDBase
from app.models.course import Course
from app.models.lesson_file import LessonFile
from app.schemas.content import LessonFileCreate, LessonFileUpdate


class CRUDLessonFile(CRUDBase[LessonFile, LessonFileCreate, LessonFileUpdate]):

    def _ordered(self, query):
        return query.order_by(LessonFile.sequence_index.asc(), LessonFile.id.asc())

    def create(self, db: Session, *, obj_in) -> LessonFile:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        data = dict(data)
        if data.get("sequence_index") is None:
            data["sequence_index"] = self._next_sequence_index(db, course_id=data["course_id"])
        return super().create(db, obj_in=data)

    def _next_sequence_index(self, db: Session, course_id: int) -> int:
        current = (
            db.query(func.max(LessonFile.sequence_index))
            .filter(LessonFile.course_id == course_id)
            .scalar()
        )
        return 0 if current is None else current + 1

    def get_with_course(self, db: Session, id: int) -> Optional[LessonFile]:
        return (
            self._query_active(db)
            .join(Course, Course.id == LessonFile.course_id)
            .filter(Course.deleted_at.is_(None))
            .filter(LessonFile.id == id)
            .first()
        )

    def get_by_course(self, db: Session, course_id: int) -> List[LessonFile]:
        return self._ordered(
            self._query_active(db).filter(LessonFile.course_id == course_id)
        ).all()

    def get_first_in_course(self, db: Session, course_id: int) -> Optional[LessonFile]:
        return self._ordered(
            self._query_active(db).filter(LessonFile.course_id == course_id)
        ).first()

    def get_next_in_course(self, db: Session, lesson: LessonFile) -> Optional[LessonFile]:
        return self._ordered(
            self._query_active(db)
            .filter(LessonFile.course_id == lesson.course_id)
            .filter(
                (LessonFile.sequence_index > lesson.sequence_index)
                | ((LessonFile.sequence_index == lesson.sequence_index) & (LessonFile.id > lesson.id))
            )
        ).first()

    def count_in_course(self, db: Session, course_id: int) -> int:
        return self._query_active(db).filter(LessonFile.course_id == course_id).count()

    def count_in_series(self, db: Session, series_id: int) -> int:
        return (
            self._query_active(db)
            .join(Course, Course.id == LessonFile.course_id)
            .filter(Course.series_id == series_id)
            .filter(Course.deleted_at.is_(None))
            .count()
        )


lesson_file = CRUDLessonFile(LessonFile)
