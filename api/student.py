from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import ServiceError
from core.security import require_roles
from models.users import User
from models.enums import UserRole
from services.student_service import StudentService
from schemas.student_schema import StudentDashboard, StudentTeachers

router = APIRouter()

student_only = require_roles(UserRole.STUDENT)

@router.get("/dashboard", response_model=StudentDashboard)
def dashboard(db: Session = Depends(get_db), current_user: User = Depends(student_only)):
    """Active subscription, this month's usage, upcoming and recent classes."""
    return StudentService(db).get_dashboard(current_user.id)

@router.get("/teachers", response_model=StudentTeachers)
def my_teachers(db: Session = Depends(get_db), current_user: User = Depends(student_only)):
    try:
        return StudentService(db).get_teachers(current_user.id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
