from sqlalchemy.orm import Session, joinedload
from sqlalchemy import desc
from datetime import datetime
from typing import Optional
import uuid

from models.classes import ClassSession, TeacherEarnings
from models.enums import ClassStatus

class ClassRepository:
    """Session ledger and earnings queries.

    Writes only flush; the calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def count_sessions(
        self,
        student_id: uuid.UUID,
        teacher_id: Optional[uuid.UUID],
        status: ClassStatus,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        """Sessions in ``status`` whose start falls in [start, end]. A None
        ``teacher_id`` counts the student's classes with every teacher."""
        query = self.db.query(ClassSession).filter(
            ClassSession.student_id == student_id,
            ClassSession.status == status
        )
        if teacher_id is not None:
            query = query.filter(ClassSession.teacher_id == teacher_id)
        if start is not None:
            query = query.filter(ClassSession.start_time >= start)
        if end is not None:
            query = query.filter(ClassSession.start_time <= end)
        return query.count()

    def get_in_progress(self, student_id: uuid.UUID, teacher_id: uuid.UUID):
        return self.db.query(ClassSession).filter(
            ClassSession.student_id == student_id,
            ClassSession.teacher_id == teacher_id,
            ClassSession.status == ClassStatus.IN_PROGRESS
        ).order_by(desc(ClassSession.start_time)).first()

    def add(self, class_session: ClassSession) -> ClassSession:
        self.db.add(class_session)
        self.db.flush()
        return class_session

    def get_for_pair(self, class_id: uuid.UUID, student_id: uuid.UUID, teacher_id: uuid.UUID):
        return self.db.query(ClassSession).filter(
            ClassSession.id == class_id,
            ClassSession.student_id == student_id,
            ClassSession.teacher_id == teacher_id
        ).first()

    def list_for_pair(self, student_id: uuid.UUID, teacher_id: uuid.UUID):
        return self.db.query(ClassSession).filter(
            ClassSession.student_id == student_id,
            ClassSession.teacher_id == teacher_id
        ).order_by(desc(ClassSession.start_time)).all()

    def recent_completed(self, teacher_id: uuid.UUID, limit: int = 10):
        return self.db.query(ClassSession).options(joinedload(ClassSession.student)).filter(
            ClassSession.teacher_id == teacher_id,
            ClassSession.status == ClassStatus.COMPLETED
        ).order_by(desc(ClassSession.end_time)).limit(limit).all()

    def upcoming_for_student(self, student_id: uuid.UUID, now: datetime, limit: int = 5):
        return self.db.query(ClassSession).options(joinedload(ClassSession.teacher)).filter(
            ClassSession.student_id == student_id,
            ClassSession.status == ClassStatus.SCHEDULED,
            ClassSession.start_time >= now
        ).order_by(ClassSession.start_time).limit(limit).all()

    def recent_completed_for_student(self, student_id: uuid.UUID, limit: int = 3):
        return self.db.query(ClassSession).options(joinedload(ClassSession.teacher)).filter(
            ClassSession.student_id == student_id,
            ClassSession.status == ClassStatus.COMPLETED
        ).order_by(desc(ClassSession.end_time)).limit(limit).all()

    # --- Teacher earnings ---

    def get_earnings(self, teacher_id: uuid.UUID, month: int, year: int):
        return self.db.query(TeacherEarnings).filter(
            TeacherEarnings.teacher_id == teacher_id,
            TeacherEarnings.month == month,
            TeacherEarnings.year == year
        ).first()

    def list_earnings(self, teacher_id: uuid.UUID):
        return self.db.query(TeacherEarnings).filter(
            TeacherEarnings.teacher_id == teacher_id
        ).order_by(desc(TeacherEarnings.year), desc(TeacherEarnings.month)).all()

    def add_earnings(self, earnings: TeacherEarnings) -> TeacherEarnings:
        self.db.add(earnings)
        self.db.flush()
        return earnings
