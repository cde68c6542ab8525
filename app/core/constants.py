from enum import Enum


class SeriesVisibilityEnum(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"

class LessonKindEnum(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    PDF = "pdf"
    SLIDES = "slides"
    OTHER = "other"

class EnrollmentStatusEnum(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

class PaymentStatusEnum(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

class CourseProgressStatusEnum(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

class UnitStateEnum(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    VIEWED = "viewed"
    COMPLETED = "completed"

class VideoSlotEnum(str, Enum):
    INTRO = "intro"
    END = "end"

class CascadeOutcome(str, Enum):
    LESSON_UNLOCKED = "lesson_unlocked"
    ALREADY_UNLOCKED = "already_unlocked"
    INTRO_UNLOCKED = "intro_unlocked"
    NEXT_COURSE_STARTED = "next_course_started"
    SERIES_EXHAUSTED = "series_exhausted"
    NO_LESSONS = "no_lessons"
    SKIPPED = "skipped"


# Enrollment statuses that grant access to series content
ACCESS_ENROLLMENT_STATUSES = (EnrollmentStatusEnum.ACTIVE, EnrollmentStatusEnum.COMPLETED)

UNIT_STATE_RANK = {
    UnitStateEnum.LOCKED: 0,
    UnitStateEnum.UNLOCKED: 1,
    UnitStateEnum.VIEWED: 2,
    UnitStateEnum.COMPLETED: 3,
}

ERROR_MESSAGES = {
    "lesson_not_found": "Lesson not found",
    "course_not_found": "Course not found",
    "series_not_found": "Series not found",
    "course_not_enrolled": "You must be enrolled in this course",
    "series_not_enrolled": "You must be enrolled in this series",
    "lesson_not_unlocked": "This lesson is not unlocked yet",
    "lesson_not_viewed": "You must view the lesson before marking it as completed",
    "progress_not_viewed": "You must view this lesson before tracking video progress",
    "intro_not_unlocked": "Intro video is not unlocked yet",
    "end_not_unlocked": "End video is not unlocked yet",
    "course_not_completed": "You must complete the course before accessing the end video",
    "no_video": "This course has no {slot} video",
}
