from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    series_id = Column(Integer, ForeignKey("series.id"), nullable=False, index=True)
    title = Column(String, index=True, nullable=False)
    sequence_index = Column(Integer, nullable=False, default=0)
    # Storage keys, resolved to URLs by the storage adapter
    intro_video_url = Column(String, nullable=True)
    end_video_url = Column(String, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    series = relationship("Series")
    lesson_files = relationship(
        "LessonFile",
        primaryjoin="and_(Course.id == LessonFile.course_id, LessonFile.deleted_at == None)",
        order_by="[LessonFile.sequence_index, LessonFile.id]",
        viewonly=True
    )

    @property
    def has_intro_video(self) -> bool:
        return bool(self.intro_video_url)

    @property
    def has_end_video(self) -> bool:
        return bool(self.end_video_url)
