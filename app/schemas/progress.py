from pydantic import BaseModel, Field, field_validator
from typing import Any, Generic, List, Optional, TypeVar
from app.core.constants import CascadeOutcome, LessonKindEnum, UnitStateEnum
from app.schemas.course_progress import CourseProgress
from app.schemas.lesson_progress import LessonProgress

DataType = TypeVar("DataType")


class VideoProgressData(BaseModel):
    """Playback report sent by the player. Every field is optional."""
    time_spent: Optional[int] = Field(default=None, ge=0)
    last_position: Optional[int] = Field(default=None, ge=0)
    completion_percentage: Optional[float] = Field(default=None, ge=0, le=100)

    @field_validator("time_spent", "last_position", mode="before")
    @classmethod
    def truncate_seconds(cls, value: Any):
        if isinstance(value, float):
            return int(value)
        return value


class ProgressResult(BaseModel, Generic[DataType]):
    """Envelope returned by every progression operation."""
    success: bool
    message: str
    data: Optional[DataType] = None
    error: Optional[str] = None
    status_code: int = Field(default=200, exclude=True)


class LessonProgressOutcome(BaseModel):
    progress: LessonProgress
    auto_completed: bool = False
    regression_prevented: bool = False
    cascade: List[CascadeOutcome] = Field(default_factory=list)


class VideoProgressOutcome(BaseModel):
    progress: CourseProgress
    auto_completed: bool = False
    regression_prevented: bool = False
    cascade: List[CascadeOutcome] = Field(default_factory=list)


class SeriesStartOutcome(BaseModel):
    series_id: int
    outcome: CascadeOutcome
    course_progress: List[CourseProgress] = Field(default_factory=list)


class OutlineVideo(BaseModel):
    url: Optional[str] = None
    state: UnitStateEnum
    completion_percentage: float = 0


class OutlineLesson(BaseModel):
    id: int
    title: Optional[str] = None
    kind: LessonKindEnum
    sequence_index: int
    url: Optional[str] = None
    state: UnitStateEnum
    completion_percentage: float = 0


class OutlineCourse(BaseModel):
    id: int
    title: str
    sequence_index: int
    status: Optional[str] = None
    completion_percentage: int = 0
    intro_video: Optional[OutlineVideo] = None
    end_video: Optional[OutlineVideo] = None
    lessons: List[OutlineLesson] = Field(default_factory=list)


class SeriesOutline(BaseModel):
    series_id: int
    title: str
    progress_percentage: int = 0
    courses: List[OutlineCourse] = Field(default_factory=list)
