import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from repositories.class_repo import ClassRepository
from schemas.class_schema import EarningsSummary, PeriodEarnings, RecentClass, TotalEarnings


class EarningsService:
    def __init__(self, db: Session):
        self.repo = ClassRepository(db)

    def get_summary(self, teacher_id: uuid.UUID, now: Optional[datetime] = None) -> EarningsSummary:
        now = now or datetime.now()
        current = self.repo.get_earnings(teacher_id, now.month, now.year)
        history = self.repo.list_earnings(teacher_id)

        breakdown = [
            PeriodEarnings(month=row.month, year=row.year, earnings=row.total_earnings, classes=row.total_classes)
            for row in history
        ]
        recent = [
            RecentClass(
                id=cls.id,
                student_name=cls.student.display_name,
                date=cls.end_time,
                duration=cls.duration,
                earning=cls.teacher_earning or Decimal("0.00"),
            )
            for cls in self.repo.recent_completed(teacher_id)
        ]

        return EarningsSummary(
            current_month=PeriodEarnings(
                month=now.month,
                year=now.year,
                earnings=current.total_earnings if current else Decimal("0.00"),
                classes=current.total_classes if current else 0,
            ),
            all_time=TotalEarnings(
                earnings=sum((p.earnings for p in breakdown), Decimal("0.00")),
                classes=sum(p.classes for p in breakdown),
            ),
            monthly_breakdown=breakdown,
            recent_classes=recent,
        )
