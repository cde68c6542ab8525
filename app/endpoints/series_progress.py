from typing import List, Optional
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.utils import deps
from app.core.constants import VideoSlotEnum
from app.models.user import User
from app.schemas.course_progress import CourseProgress
from app.schemas.enrollment import Enrollment
from app.schemas.lesson_progress import LastWatchedLesson, LessonProgress
from app.schemas.progress import (
    LessonProgressOutcome,
    ProgressResult,
    SeriesOutline,
    SeriesStartOutcome,
    VideoProgressData,
    VideoProgressOutcome,
)
from app.services.series_progress import series_progress_service

router = APIRouter()


def _respond(result: ProgressResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.model_dump(mode="json"))


@router.post("/series/{series_id}/start", response_model=ProgressResult[SeriesStartOutcome])
async def start_series(
    *,
    db: Session = Depends(deps.get_transactional_db),
    series_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    result = await series_progress_service.start_series(db, user_id=current_user.id, series_id=series_id)
    return _respond(result)


@router.get("/series/{series_id}/outline", response_model=ProgressResult[SeriesOutline])
def get_series_outline(
    *,
    db: Session = Depends(deps.get_db),
    series_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    return _respond(series_progress_service.get_series_outline(db, user_id=current_user.id, series_id=series_id))


@router.get("/series/{series_id}/course-progress", response_model=ProgressResult[List[CourseProgress]])
def get_all_course_progress(
    *,
    db: Session = Depends(deps.get_db),
    series_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    return _respond(series_progress_service.get_all_course_progress(db, user_id=current_user.id, series_id=series_id))


@router.get("/series/{series_id}/enrollment", response_model=ProgressResult[Enrollment])
def get_enrollment_progress(
    *,
    db: Session = Depends(deps.get_db),
    series_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    return _respond(series_progress_service.get_enrollment_progress(db, user_id=current_user.id, series_id=series_id))


@router.get("/courses/{course_id}/progress", response_model=ProgressResult[CourseProgress])
def get_course_progress(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    return _respond(series_progress_service.get_course_progress(db, user_id=current_user.id, course_id=course_id))


@router.post("/courses/{course_id}/videos/{slot}/progress", response_model=ProgressResult[VideoProgressOutcome])
async def update_video_progress(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    slot: VideoSlotEnum,
    data: VideoProgressData,
    current_user: User = Depends(deps.get_current_user)
):
    result = await series_progress_service.update_video_progress(
        db, user_id=current_user.id, course_id=course_id, slot=slot, data=data
    )
    return _respond(result)


@router.post("/courses/{course_id}/videos/{slot}/complete", response_model=ProgressResult[VideoProgressOutcome])
async def mark_video_completed(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    slot: VideoSlotEnum,
    data: Optional[VideoProgressData] = Body(None),
    current_user: User = Depends(deps.get_current_user)
):
    result = await series_progress_service.mark_video_completed(
        db, user_id=current_user.id, course_id=course_id, slot=slot, data=data
    )
    return _respond(result)


@router.get("/lessons/last-watched", response_model=ProgressResult[LastWatchedLesson])
def get_last_watched_lesson(
    *,
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(deps.get_current_user)
):
    return _respond(series_progress_service.get_last_watched_lesson(db, user_id=current_user.id))


@router.post("/lessons/{lesson_id}/view", response_model=ProgressResult[LessonProgressOutcome])
async def mark_lesson_viewed(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    result = await series_progress_service.mark_lesson_viewed(db, user_id=current_user.id, lesson_id=lesson_id)
    return _respond(result)


@router.post("/lessons/{lesson_id}/progress", response_model=ProgressResult[LessonProgressOutcome])
async def update_lesson_progress(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int,
    data: VideoProgressData,
    current_user: User = Depends(deps.get_current_user)
):
    result = await series_progress_service.update_lesson_progress(
        db, user_id=current_user.id, lesson_id=lesson_id, data=data
    )
    return _respond(result)


@router.post("/lessons/{lesson_id}/complete", response_model=ProgressResult[LessonProgressOutcome])
async def mark_lesson_completed(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int,
    data: Optional[VideoProgressData] = Body(None),
    current_user: User = Depends(deps.get_current_user)
):
    result = await series_progress_service.mark_lesson_completed(
        db, user_id=current_user.id, lesson_id=lesson_id, data=data
    )
    return _respond(result)


@router.get("/lessons/{lesson_id}/progress", response_model=ProgressResult[LessonProgress])
def get_lesson_progress(
    *,
    db: Session = Depends(deps.get_db),
    lesson_id: int,
    current_user: User = Depends(deps.get_current_user)
):
    return _respond(series_progress_service.get_lesson_progress(db, user_id=current_user.id, lesson_id=lesson_id))
