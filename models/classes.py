from sqlalchemy import Column, String, Integer, ForeignKey, DateTime, Numeric, Text, Enum, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from datetime import datetime
from decimal import Decimal
import uuid
from .base import Base
from .enums import ClassStatus

class ClassSession(Base):
    __tablename__ = "class_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    teacher_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    subscription_id = Column(UUID(as_uuid=True), ForeignKey("subscriptions.id"), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    status = Column(
        Enum(ClassStatus, values_callable=lambda x: [e.value for e in x]),
        default=ClassStatus.SCHEDULED,
        nullable=False,
    )
    teacher_earning = Column(Numeric(10, 2), default=Decimal("0.00"))
    meeting_link = Column(String(500))

    # Pedagogical notes written by the teacher
    notes = Column(Text)
    daily_assignment = Column(Text)
    review = Column(Text)
    memorization = Column(Text)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    student = relationship("User", foreign_keys=[student_id])
    teacher = relationship("User", foreign_keys=[teacher_id])
    subscription = relationship("Subscription", back_populates="class_sessions")

class TeacherEarnings(Base):
    __tablename__ = "teacher_earnings"
    __table_args__ = (UniqueConstraint("teacher_id", "month", "year", name="uq_teacher_earnings_period"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    teacher_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    total_earnings = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    total_classes = Column(Integer, default=0, nullable=False)
    last_updated = Column(DateTime, default=datetime.now)

    teacher = relationship("User")
