from fastapi import status

from app.core.constants import ERROR_MESSAGES


class ProgressError(Exception):
    """Base class for recoverable, user-facing progression failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "PROGRESS_ERROR"

    def __init__(self, message: str = None):
        self.message = message or ERROR_MESSAGES.get(self.code.lower(), "Progress update failed")
        super().__init__(self.message)


class LessonNotFoundError(ProgressError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "LESSON_NOT_FOUND"


class CourseNotFoundError(ProgressError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "COURSE_NOT_FOUND"


class SeriesNotFoundError(ProgressError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "SERIES_NOT_FOUND"


class NotEnrolledError(ProgressError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "SERIES_NOT_ENROLLED"


class CourseNotEnrolledError(NotEnrolledError):
    code = "COURSE_NOT_ENROLLED"


class LessonNotUnlockedError(ProgressError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "LESSON_NOT_UNLOCKED"


class LessonNotViewedError(ProgressError):
    status_code = status.HTTP_409_CONFLICT
    code = "LESSON_NOT_VIEWED"


class IntroVideoNotUnlockedError(ProgressError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "INTRO_NOT_UNLOCKED"


class EndVideoNotUnlockedError(ProgressError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "END_NOT_UNLOCKED"


class CourseNotCompletedError(ProgressError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "COURSE_NOT_COMPLETED"


class NoVideoError(ProgressError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NO_VIDEO"

    def __init__(self, slot: str):
        super().__init__(ERROR_MESSAGES["no_video"].format(slot=slot))
