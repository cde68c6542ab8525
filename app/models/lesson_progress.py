from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, Boolean, String, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import UnitStateEnum


class LessonProgress(Base):
    """Per (user, lesson) record. A row only exists once the lesson is unlocked."""

    __tablename__ = "lesson_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_lesson_progress_user_lesson"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    lesson_id = Column(Integer, ForeignKey("lesson_files.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    series_id = Column(Integer, ForeignKey("series.id"), nullable=False, index=True)
    state = Column(String, nullable=False, default=UnitStateEnum.UNLOCKED.value)
    is_viewed = Column(Boolean, nullable=False, default=False)
    viewed_at = Column(DateTime(timezone=True), nullable=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    time_spent = Column(Integer, nullable=True)
    last_position = Column(Integer, nullable=True)
    completion_percentage = Column(Float, nullable=False, default=0)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    lesson = relationship("LessonFile")
