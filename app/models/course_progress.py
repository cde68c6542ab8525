from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, Boolean, String, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import CourseProgressStatusEnum, UnitStateEnum, VideoSlotEnum


class CourseProgress(Base):
    __tablename__ = "course_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_progress_user_course"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    series_id = Column(Integer, ForeignKey("series.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default=CourseProgressStatusEnum.PENDING.value)
    completion_percentage = Column(Integer, nullable=False, default=0)
    is_completed = Column(Boolean, nullable=False, default=False)
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    intro_video_unlocked = Column(Boolean, nullable=False, default=False)
    intro_video_viewed = Column(Boolean, nullable=False, default=False)
    intro_video_completed = Column(Boolean, nullable=False, default=False)
    intro_video_time_spent = Column(Integer, nullable=True)
    intro_video_last_position = Column(Integer, nullable=True)
    intro_video_completion_percentage = Column(Float, nullable=False, default=0)

    end_video_unlocked = Column(Boolean, nullable=False, default=False)
    end_video_viewed = Column(Boolean, nullable=False, default=False)
    end_video_completed = Column(Boolean, nullable=False, default=False)
    end_video_time_spent = Column(Integer, nullable=True)
    end_video_last_position = Column(Integer, nullable=True)
    end_video_completion_percentage = Column(Float, nullable=False, default=0)

    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    course = relationship("Course")
    series = relationship("Series")

    def video_field(self, slot: VideoSlotEnum, name: str):
        return getattr(self, f"{slot.value}_video_{name}")

    def set_video_field(self, slot: VideoSlotEnum, name: str, value):
        setattr(self, f"{slot.value}_video_{name}", value)

    def video_state(self, slot: VideoSlotEnum) -> UnitStateEnum:
        if self.video_field(slot, "completed"):
            return UnitStateEnum.COMPLETED
        if self.video_field(slot, "viewed"):
            return UnitStateEnum.VIEWED
        if self.video_field(slot, "unlocked"):
            return UnitStateEnum.UNLOCKED
        return UnitStateEnum.LOCKED
