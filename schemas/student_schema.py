from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime
from models.enums import ClassStatus
from schemas.billing_schema import SubscriptionResponse
from schemas.user_schema import LinkedTeacher, UserBrief

class StudentClass(BaseModel):
    id: UUID
    teacher_name: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: int
    status: ClassStatus
    meeting_link: Optional[str] = None

class MonthlyProgress(BaseModel):
    """This month's classes with every teacher, against the package allowance."""
    month_start: datetime
    next_month_start: datetime
    sessions_used: int
    sessions_scheduled: int
    sessions_total: Optional[int] = None  # None without an active subscription
    remaining_sessions: Optional[int] = None

class StudentDashboard(BaseModel):
    active_subscription: Optional[SubscriptionResponse] = None
    completed_classes: int
    monthly_progress: MonthlyProgress
    upcoming_classes: List[StudentClass]
    recent_classes: List[StudentClass]

class StudentTeachers(BaseModel):
    primary_teacher: Optional[UserBrief] = None
    additional_teachers: List[LinkedTeacher]
