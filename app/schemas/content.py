from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from app.core.constants import SeriesVisibilityEnum, LessonKindEnum


class SeriesBase(BaseModel):
    title: str
    slug: Optional[str] = None
    summary: Optional[str] = None
    visibility: SeriesVisibilityEnum = SeriesVisibilityEnum.DRAFT
    price: Optional[Decimal] = None


class SeriesCreate(SeriesBase):
    pass


class SeriesUpdate(BaseModel):
    title: Optional[str] = None
    summary: Optional[str] = None
    visibility: Optional[SeriesVisibilityEnum] = None
    price: Optional[Decimal] = None


class CourseBase(BaseModel):
    title: str
    intro_video_url: Optional[str] = None
    end_video_url: Optional[str] = None


class CourseCreate(CourseBase):
    series_id: int
    sequence_index: Optional[int] = Field(default=None, ge=0)


class CourseUpdate(BaseModel):
    title: Optional[str] = None
    intro_video_url: Optional[str] = None
    end_video_url: Optional[str] = None


class LessonFileBase(BaseModel):
    title: Optional[str] = None
    kind: LessonKindEnum = LessonKindEnum.VIDEO
    file_key: Optional[str] = None


class LessonFileCreate(LessonFileBase):
    course_id: int
    sequence_index: Optional[int] = Field(default=None, ge=0)


class LessonFileUpdate(BaseModel):
    title: Optional[str] = None
    kind: Optional[LessonKindEnum] = None
    file_key: Optional[str] = None

