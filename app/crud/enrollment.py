from sqlalchemy.orm import Session
from typing import Optional

from app.crud.base import CRUDBase
from app.core.constants import ACCESS_ENROLLMENT_STATUSES, PaymentStatusEnum
from app.models.enrollment import Enrollment
from app.schemas.enrollment import EnrollmentCreate, EnrollmentUpdate


class CRUDEnrollment(CRUDBase[Enrollment, EnrollmentCreate, EnrollmentUpdate]):

    def get_active_paid(self, db: Session, user_id: int, series_id: int, for_update: bool = False) -> Optional[Enrollment]:
        """Enrollment that grants access: ACTIVE/COMPLETED and paid."""
        query = (
            self._query_active(db)
            .filter(Enrollment.user_id == user_id)
            .filter(Enrollment.series_id == series_id)
            .filter(Enrollment.status.in_(ACCESS_ENROLLMENT_STATUSES))
            .filter(Enrollment.payment_status == PaymentStatusEnum.COMPLETED.value)
        )
        if for_update:
            query = query.with_for_update()
        return query.first()


enrollment = CRUDEnrollment(Enrollment)
