import logging
import secrets
import uuid
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy.orm import Session

from core.config import DEFAULT_CLASS_DURATION, TEACHER_HOURLY_RATE
from core.exceptions import AccessDenied, NoActiveSubscription, NotFound
from models.billing import Subscription
from models.classes import ClassSession, TeacherEarnings
from models.enums import ClassStatus
from repositories.billing_repo import BillingRepository
from repositories.class_repo import ClassRepository
from repositories.teacher_repo import TeacherRepository
from schemas.class_schema import ClassNotesUpdate, TeacherStudentSummary
from services.entitlement_service import EntitlementService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def calculate_earning(minutes: int) -> Decimal:
    """Teacher pay for ``minutes`` of class at the flat hourly rate."""
    return (Decimal(minutes) * TEACHER_HOURLY_RATE / Decimal(60)).quantize(CENTS, rounding=ROUND_HALF_UP)


class ClassService:
    def __init__(self, db: Session):
        self.db = db
        self.class_repo = ClassRepository(db)
        self.billing_repo = BillingRepository(db)
        self.teacher_repo = TeacherRepository(db)

    def start_class(self, teacher_id: uuid.UUID, student_id: uuid.UUID, now: Optional[datetime] = None) -> ClassSession:
        """Open an IN_PROGRESS class for the pair.

        The monthly allowance is not checked here; callers ask
        EntitlementService first.
        """
        if not self.teacher_repo.get_active_link(teacher_id, student_id):
            raise NotFound("Student not found or not assigned to you")

        subscription = self.billing_repo.get_active_subscription(student_id)
        if not subscription:
            raise NoActiveSubscription("Student has no active subscription")

        duration = subscription.package.class_duration or DEFAULT_CLASS_DURATION
        class_session = ClassSession(
            student_id=student_id,
            teacher_id=teacher_id,
            subscription_id=subscription.id,
            start_time=now or datetime.now(),
            duration=duration,
            status=ClassStatus.IN_PROGRESS,
            teacher_earning=calculate_earning(duration),
            meeting_link=f"https://meet.jit.si/qodwa-{secrets.token_urlsafe(9)}",
        )
        try:
            self.class_repo.add(class_session)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(class_session)

        logger.info("Class %s started by teacher %s for student %s", class_session.id, teacher_id, student_id)
        return class_session

    def end_class(self, teacher_id: uuid.UUID, student_id: uuid.UUID, now: Optional[datetime] = None):
        """Complete the pair's IN_PROGRESS class and book the teacher's earnings.

        Session, subscription counter and monthly earnings are committed together.
        """
        class_session = self.class_repo.get_in_progress(student_id, teacher_id)
        if not class_session:
            raise NotFound("No active class session found")

        now = now or datetime.now()
        elapsed = (now - class_session.start_time).total_seconds()
        minutes = max(int(elapsed / 60 + 0.5), 0)
        earning = calculate_earning(minutes)

        try:
            class_session.end_time = now
            class_session.status = ClassStatus.COMPLETED
            class_session.duration = minutes
            class_session.teacher_earning = earning

            self.db.query(Subscription).filter(Subscription.id == class_session.subscription_id).update(
                {Subscription.classes_completed: Subscription.classes_completed + 1},
                synchronize_session=False,
            )
            self._add_earnings(teacher_id, earning, now)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Class %s ended: %s min, earning %s for teacher %s", class_session.id, minutes, earning, teacher_id
        )
        return {"id": class_session.id, "duration": minutes, "earnings": earning}

    def _add_earnings(self, teacher_id: uuid.UUID, earning: Decimal, now: datetime):
        row = self.class_repo.get_earnings(teacher_id, now.month, now.year)
        if row is None:
            self.class_repo.add_earnings(TeacherEarnings(
                teacher_id=teacher_id,
                month=now.month,
                year=now.year,
                total_earnings=earning,
                total_classes=1,
                last_updated=now,
            ))
            return
        row.total_earnings = TeacherEarnings.total_earnings + earning
        row.total_classes = TeacherEarnings.total_classes + 1
        row.last_updated = now
        self.db.flush()

    # --- Teacher workspace ---

    def list_students(self, teacher_id: uuid.UUID, now: Optional[datetime] = None) -> list[TeacherStudentSummary]:
        entitlements = EntitlementService(self.db)
        results = []
        for student in self.teacher_repo.get_linked_students(teacher_id):
            try:
                limit = entitlements.check_session_limit(student.id, teacher_id, now)
            except NoActiveSubscription:
                limit = None
            results.append(TeacherStudentSummary(
                id=student.id,
                username=student.username,
                full_name=student.display_name,
                email=student.email,
                is_primary=(student.assigned_teacher_id == teacher_id),
                session_limit=limit,
            ))
        return results

    def _require_link(self, teacher_id: uuid.UUID, student_id: uuid.UUID):
        if not self.teacher_repo.get_active_link(teacher_id, student_id):
            raise AccessDenied("You do not have access to this student")

    def get_student_notes(self, teacher_id: uuid.UUID, student_id: uuid.UUID):
        self._require_link(teacher_id, student_id)
        return self.class_repo.list_for_pair(student_id, teacher_id)

    def update_class_notes(
        self, teacher_id: uuid.UUID, student_id: uuid.UUID, class_id: uuid.UUID, data: ClassNotesUpdate
    ) -> ClassSession:
        self._require_link(teacher_id, student_id)
        class_session = self.class_repo.get_for_pair(class_id, student_id, teacher_id)
        if not class_session:
            raise NotFound("Class session not found")

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(class_session, field, value)
        self.db.commit()
        self.db.refresh(class_session)
        return class_session
