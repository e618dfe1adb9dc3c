import calendar
import uuid
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from core.config import DEFAULT_CLASSES_PER_MONTH
from core.exceptions import AccessDenied, NoActiveSubscription
from models.enums import ClassStatus
from repositories.billing_repo import BillingRepository
from repositories.class_repo import ClassRepository
from repositories.teacher_repo import TeacherRepository
from schemas.class_schema import SessionLimit


def month_window(now: datetime) -> Tuple[datetime, datetime]:
    """First and last instant of the calendar month containing ``now``."""
    start = datetime(now.year, now.month, 1)
    days_in_month = calendar.monthrange(now.year, now.month)[1]
    end = start + timedelta(days=days_in_month) - timedelta(microseconds=1)
    return start, end


class EntitlementService:
    """Remaining monthly class allowance. Read only."""

    def __init__(self, db: Session):
        self.billing_repo = BillingRepository(db)
        self.class_repo = ClassRepository(db)
        self.teacher_repo = TeacherRepository(db)

    def check_session_limit(
        self, student_id: uuid.UUID, teacher_id: uuid.UUID, now: Optional[datetime] = None
    ) -> SessionLimit:
        if not self.teacher_repo.get_active_link(teacher_id, student_id):
            raise AccessDenied("You do not have access to this student")

        subscription = self.billing_repo.get_active_subscription(student_id)
        if not subscription:
            raise NoActiveSubscription()

        now = now or datetime.now()
        allowance = subscription.package.classes_per_month or DEFAULT_CLASSES_PER_MONTH
        start, end = month_window(now)

        completed = self.class_repo.count_sessions(student_id, teacher_id, ClassStatus.COMPLETED, start, end)
        scheduled = self.class_repo.count_sessions(student_id, teacher_id, ClassStatus.SCHEDULED, start, end)
        remaining = allowance - (completed + scheduled)
        can_start = remaining > 0

        return SessionLimit(
            can_start_session=can_start,
            reason=None if can_start else "Monthly session limit reached",
            sessions_used=completed,
            sessions_scheduled=scheduled,
            sessions_total=allowance,
            remaining_sessions=remaining,
            package_title=subscription.package.title,
            subscription_end_date=subscription.end_date,
            next_month_start=end + timedelta(microseconds=1),
            all_time_completed_sessions=self.class_repo.count_sessions(
                student_id, teacher_id, ClassStatus.COMPLETED
            ),
        )
