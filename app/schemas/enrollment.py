from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
from app.core.constants import EnrollmentStatusEnum, PaymentStatusEnum


class EnrollmentCreate(BaseModel):
    user_id: int
    series_id: int
    status: EnrollmentStatusEnum = EnrollmentStatusEnum.ACTIVE
    payment_status: str = PaymentStatusEnum.PENDING.value


class EnrollmentUpdate(BaseModel):
    status: Optional[EnrollmentStatusEnum] = None
    payment_status: Optional[str] = None
    progress_percentage: Optional[int] = None
    last_accessed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class Enrollment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    series_id: int
    status: EnrollmentStatusEnum
    payment_status: str
    progress_percentage: int
    enrolled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    last_accessed_at: Optional[datetime] = None
