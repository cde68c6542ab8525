from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from app.core.constants import CourseProgressStatusEnum


class CourseProgressCreate(BaseModel):
    user_id: int
    course_id: int
    series_id: int
    status: CourseProgressStatusEnum = CourseProgressStatusEnum.PENDING


class CourseProgressUpdate(BaseModel):
    status: Optional[CourseProgressStatusEnum] = None
    completion_percentage: Optional[int] = None
    is_completed: Optional[bool] = None
    completed_at: Optional[datetime] = None


class CourseProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    course_id: int
    series_id: int
    status: str
    completion_percentage: int
    is_completed: bool
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    intro_video_unlocked: bool
    intro_video_viewed: bool
    intro_video_completed: bool
    intro_video_time_spent: Optional[int] = None
    intro_video_last_position: Optional[int] = None
    intro_video_completion_percentage: float

    end_video_unlocked: bool
    end_video_viewed: bool
    end_video_completed: bool
    end_video_time_spent: Optional[int] = None
    end_video_last_position: Optional[int] = None
    end_video_completion_percentage: float
