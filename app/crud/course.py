from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional

from app.crud.base import CRUDBase
from app.models.course import Course
from app.schemas.content import CourseCreate, CourseUpdate


class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def _ordered(self, query):
        return query.order_by(Course.sequence_index.asc(), Course.id.asc())

    def create(self, db: Session, *, obj_in) -> Course:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        data = dict(data)
        if data.get("sequence_index") is None:
            data["sequence_index"] = self._next_sequence_index(db, series_id=data["series_id"])
        return super().create(db, obj_in=data)

    def _next_sequence_index(self, db: Session, series_id: int) -> int:
        current = (
            db.query(func.max(Course.sequence_index))
            .filter(Course.series_id == series_id)
            .scalar()
        )
        return 0 if current is None else current + 1

    def get_by_series(self, db: Session, series_id: int) -> List[Course]:
        return self._ordered(
            self._query_active(db).filter(Course.series_id == series_id)
        ).all()

    def get_next_in_series(self, db: Session, course: Course) -> Optional[Course]:
        """Course immediately after ``course`` in its series, or None when it is the last."""
        return self._ordered(
            self._query_active(db)
            .filter(Course.series_id == course.series_id)
            .filter(
                (Course.sequence_index > course.sequence_index)
                | ((Course.sequence_index == course.sequence_index) & (Course.id > course.id))
            )
        ).first()


course = CRUDCourse(Course)
