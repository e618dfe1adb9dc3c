import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from core.config import DEFAULT_CLASSES_PER_MONTH
from core.exceptions import NotFound
from models.classes import ClassSession
from models.enums import ClassStatus
from repositories.billing_repo import BillingRepository
from repositories.class_repo import ClassRepository
from repositories.teacher_repo import TeacherRepository
from repositories.user_repo import UserRepository
from schemas.billing_schema import SubscriptionResponse
from schemas.student_schema import MonthlyProgress, StudentClass, StudentDashboard, StudentTeachers
from services.entitlement_service import month_window
from services.user_service import to_brief, to_linked_teacher


def _to_student_class(class_session: ClassSession) -> StudentClass:
    return StudentClass(
        id=class_session.id,
        teacher_name=class_session.teacher.display_name if class_session.teacher else "Teacher",
        start_time=class_session.start_time,
        end_time=class_session.end_time,
        duration=class_session.duration,
        status=class_session.status,
        meeting_link=class_session.meeting_link,
    )


class StudentService:
    """Read-only views of a student's own classes and teachers."""

    def __init__(self, db: Session):
        self.billing_repo = BillingRepository(db)
        self.class_repo = ClassRepository(db)
        self.teacher_repo = TeacherRepository(db)
        self.user_repo = UserRepository(db)

    def get_dashboard(self, student_id: uuid.UUID, now: Optional[datetime] = None) -> StudentDashboard:
        now = now or datetime.now()
        subscription = self.billing_repo.get_active_subscription(student_id)
        start, end = month_window(now)

        used = self.class_repo.count_sessions(student_id, None, ClassStatus.COMPLETED, start, end)
        scheduled = self.class_repo.count_sessions(student_id, None, ClassStatus.SCHEDULED, start, end)
        allowance = None
        if subscription:
            allowance = subscription.package.classes_per_month or DEFAULT_CLASSES_PER_MONTH

        return StudentDashboard(
            active_subscription=SubscriptionResponse.model_validate(subscription) if subscription else None,
            completed_classes=self.class_repo.count_sessions(student_id, None, ClassStatus.COMPLETED),
            monthly_progress=MonthlyProgress(
                month_start=start,
                next_month_start=end + timedelta(microseconds=1),
                sessions_used=used,
                sessions_scheduled=scheduled,
                sessions_total=allowance,
                remaining_sessions=allowance - (used + scheduled) if allowance is not None else None,
            ),
            upcoming_classes=[_to_student_class(c) for c in self.class_repo.upcoming_for_student(student_id, now)],
            recent_classes=[_to_student_class(c) for c in self.class_repo.recent_completed_for_student(student_id)],
        )

    def get_teachers(self, student_id: uuid.UUID) -> StudentTeachers:
        student = self.user_repo.get_by_id(student_id)
        if not student:
            raise NotFound("Student not found")

        primary = student.assigned_teacher
        return StudentTeachers(
            primary_teacher=to_brief(primary) if primary else None,
            additional_teachers=[
                to_linked_teacher(link)
                for link in self.teacher_repo.get_active_links_for_student(student_id)
                if link.teacher_id != student.assigned_teacher_id
            ],
        )
