from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from core.database import get_db
from core.exceptions import ServiceError
from core.security import get_current_active_user
from services.user_service import UserService
from schemas.user_schema import UserResponse, UserProfileUpdate
from models.users import User

router = APIRouter()

@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_active_user)):
    return current_user

@router.put("/me", response_model=UserResponse)
def update_my_profile(
    update_data: UserProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return UserService(db).update_user_profile(user_id=current_user.id, update_data=update_data)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
