from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from uuid import UUID

from core.database import get_db
from core.exceptions import ServiceError
from core.security import require_roles
from models.users import User
from models.enums import UserRole
from services.class_service import ClassService
from services.earnings_service import EarningsService
from services.entitlement_service import EntitlementService
from schemas.class_schema import (
    ClassActionRequest,
    ClassNotesUpdate,
    ClassSessionResponse,
    EarningsSummary,
    EndedClass,
    SessionLimit,
    StartedClass,
    TeacherStudentSummary,
)

router = APIRouter()

teacher_only = require_roles(UserRole.TEACHER)

@router.get("/students", response_model=list[TeacherStudentSummary])
def my_students(db: Session = Depends(get_db), current_user: User = Depends(teacher_only)):
    return ClassService(db).list_students(current_user.id)

@router.get("/students/{student_id}/session-limit", response_model=SessionLimit)
def session_limit(student_id: UUID, db: Session = Depends(get_db), current_user: User = Depends(teacher_only)):
    """Can this student start another class this month?"""
    try:
        return EntitlementService(db).check_session_limit(student_id, current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.post("/classes/start", response_model=StartedClass)
def start_class(req: ClassActionRequest, db: Session = Depends(get_db), current_user: User = Depends(teacher_only)):
    try:
        return ClassService(db).start_class(current_user.id, req.student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.post("/classes/end", response_model=EndedClass)
def end_class(req: ClassActionRequest, db: Session = Depends(get_db), current_user: User = Depends(teacher_only)):
    try:
        return ClassService(db).end_class(current_user.id, req.student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.get("/students/{student_id}/notes", response_model=list[ClassSessionResponse])
def student_notes(student_id: UUID, db: Session = Depends(get_db), current_user: User = Depends(teacher_only)):
    try:
        return ClassService(db).get_student_notes(current_user.id, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.put("/students/{student_id}/notes/{class_id}", response_model=ClassSessionResponse)
def update_notes(
    student_id: UUID,
    class_id: UUID,
    data: ClassNotesUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(teacher_only),
):
    try:
        return ClassService(db).update_class_notes(current_user.id, student_id, class_id, data)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.get("/earnings", response_model=EarningsSummary)
def my_earnings(db: Session = Depends(get_db), current_user: User = Depends(teacher_only)):
    return EarningsService(db).get_summary(current_user.id)
