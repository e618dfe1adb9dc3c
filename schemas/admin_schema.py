from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from schemas.user_schema import LinkedTeacher, UserBrief

class AssignTeacherRequest(BaseModel):
    teacher_id: UUID
    student_id: UUID
    is_primary: bool = False
    notes: Optional[str] = None

class AssignTeacherResponse(BaseModel):
    message: str
    teacher_id: UUID
    student_id: UUID
    is_primary: bool

class UnassignTeacherResponse(BaseModel):
    message: str
    teacher_id: UUID
    student_id: UUID
    primary_removed: bool

# --- Assignments overview ---
class TeacherAssignmentSummary(UserBrief):
    primary_student_count: int
    total_connection_count: int

class StudentAssignmentSummary(UserBrief):
    assigned_teacher: Optional[UserBrief] = None
    additional_teachers: List[LinkedTeacher] = []

class AssignmentStats(BaseModel):
    total_teachers: int
    total_students: int
    unassigned_students: int

class AssignmentsOverview(BaseModel):
    teachers: List[TeacherAssignmentSummary]
    students: List[StudentAssignmentSummary]
    unassigned_students: List[UserBrief]
    stats: AssignmentStats
