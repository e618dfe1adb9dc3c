from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal
from models.enums import ClassStatus

class SessionLimit(BaseModel):
    """Remaining monthly class allowance for one student/teacher pair."""
    can_start_session: bool
    reason: Optional[str] = None
    sessions_used: int
    sessions_scheduled: int
    sessions_total: int
    remaining_sessions: int
    package_title: Optional[str] = None
    subscription_end_date: Optional[datetime] = None
    next_month_start: datetime
    all_time_completed_sessions: int

class ClassActionRequest(BaseModel):
    student_id: UUID

class StartedClass(BaseModel):
    id: UUID
    start_time: datetime
    duration: int
    meeting_link: Optional[str] = None

    class Config:
        from_attributes = True

class EndedClass(BaseModel):
    id: UUID
    duration: int
    earnings: Decimal

class ClassNotesUpdate(BaseModel):
    notes: Optional[str] = None
    daily_assignment: Optional[str] = None
    review: Optional[str] = None
    memorization: Optional[str] = None

class ClassSessionResponse(BaseModel):
    id: UUID
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: int
    status: ClassStatus
    notes: Optional[str] = None
    daily_assignment: Optional[str] = None
    review: Optional[str] = None
    memorization: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TeacherStudentSummary(BaseModel):
    id: UUID
    username: str
    full_name: str
    email: str
    is_primary: bool
    session_limit: Optional[SessionLimit] = None

# --- Earnings ---
class PeriodEarnings(BaseModel):
    month: int
    year: int
    earnings: Decimal
    classes: int

class TotalEarnings(BaseModel):
    earnings: Decimal
    classes: int

class RecentClass(BaseModel):
    id: UUID
    student_name: str
    date: Optional[datetime] = None
    duration: int
    earning: Decimal

class EarningsSummary(BaseModel):
    current_month: PeriodEarnings
    all_time: TotalEarnings
    monthly_breakdown: List[PeriodEarnings]
    recent_classes: List[RecentClass]
