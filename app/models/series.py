from sqlalchemy import Column, Integer, String, DateTime, Numeric, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import SeriesVisibilityEnum

class Series(Base):
    __tablename__ = "series"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=True)
    summary = Column(String, nullable=True)
    visibility = Column(Enum(SeriesVisibilityEnum), nullable=False, default=SeriesVisibilityEnum.DRAFT)
    price = Column(Numeric(12, 2), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    courses = relationship(
        "Course",
        primaryjoin="and_(Series.id == Course.series_id, Course.deleted_at == None)",
        order_by="[Course.sequence_index, Course.id]",
        viewonly=True
    )
    enrollments = relationship("Enrollment", back_populates="series")
