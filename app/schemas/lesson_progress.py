from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from app.core.constants import UnitStateEnum


class LessonProgressBase(BaseModel):
    user_id: int
    lesson_id: int
    course_id: int
    series_id: int


class LessonProgressCreate(LessonProgressBase):
    state: UnitStateEnum = UnitStateEnum.UNLOCKED


class LessonProgressUpdate(BaseModel):
    is_viewed: Optional[bool] = None
    is_completed: Optional[bool] = None
    time_spent: Optional[int] = None
    last_position: Optional[int] = None
    completion_percentage: Optional[float] = None


class LessonProgress(LessonProgressBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    state: UnitStateEnum
    is_viewed: bool
    viewed_at: Optional[datetime] = None
    is_completed: bool
    completed_at: Optional[datetime] = None
    time_spent: Optional[int] = None
    last_position: Optional[int] = None
    completion_percentage: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LastWatchedLesson(BaseModel):
    lesson_id: int
    course_id: int
    series_id: int
    title: Optional[str] = None
    last_position: Optional[int] = None
    completion_percentage: float
    viewed_at: Optional[datetime] = None
