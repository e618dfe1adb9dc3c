from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from core.database import get_db
from core.exceptions import ServiceError
from core.security import require_roles
from services.admin_service import AdminService
from services.billing_service import BillingService
from services.email_service import EmailService
from services.user_service import UserService
from schemas.admin_schema import (
    AssignmentsOverview,
    AssignTeacherRequest,
    AssignTeacherResponse,
    UnassignTeacherResponse,
)
from schemas.billing_schema import PackageCreate, PackageResponse, SubscriptionResponse
from schemas.user_schema import UserResponse
from models.users import User
from models.enums import UserRole, SubscriptionStatus

# Mounted under /api/v1/admin in main.py
router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)

@router.get("/users", response_model=list[UserResponse])
def get_all_users(current_user: User = Depends(admin_only), db: Session = Depends(get_db)):
    return UserService(db).get_all_users()

@router.get("/subscriptions", response_model=list[SubscriptionResponse])
def get_all_subscriptions(
    status_filter: Optional[SubscriptionStatus] = None,
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    return BillingService(db).list_all_subscriptions(status=status_filter)

@router.post("/packages", response_model=PackageResponse, status_code=status.HTTP_201_CREATED)
def create_package(data: PackageCreate, current_user: User = Depends(admin_only), db: Session = Depends(get_db)):
    return BillingService(db).create_package(data)

@router.post("/assign-teacher", response_model=AssignTeacherResponse)
def assign_teacher(
    req: AssignTeacherRequest,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    try:
        teacher, student = AdminService(db).assign_teacher(req.teacher_id, req.student_id, req.is_primary, req.notes)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    background_tasks.add_task(
        EmailService().send_teacher_assignment,
        student.email, student.display_name, teacher.email, teacher.display_name,
    )
    return {
        "message": f"Assigned {teacher.display_name} to {student.display_name}",
        "teacher_id": teacher.id,
        "student_id": student.id,
        "is_primary": req.is_primary,
    }

@router.delete("/assign-teacher", response_model=UnassignTeacherResponse)
def unassign_teacher(
    teacher_id: UUID,
    student_id: UUID,
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db)
):
    """Deactivate a teacher/student link; the teacher loses access to the student."""
    try:
        primary_removed = AdminService(db).unassign_teacher(teacher_id, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {
        "message": "Teacher-student relationship removed successfully",
        "teacher_id": teacher_id,
        "student_id": student_id,
        "primary_removed": primary_removed,
    }

@router.get("/assignments", response_model=AssignmentsOverview)
def list_assignments(current_user: User = Depends(admin_only), db: Session = Depends(get_db)):
    return AdminService(db).list_assignments()
