from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from datetime import timedelta

from core.database import get_db
from core.exceptions import ServiceError
from core.security import create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES
from services.email_service import EmailService
from services.user_service import UserService
from schemas.user_schema import UserCreate, UserResponse, TokenResponse

router = APIRouter()

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    try:
        user = UserService(db).register_user(user_in)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    # Registration succeeds even if these emails fail
    mailer = EmailService()
    background_tasks.add_task(mailer.send_welcome, user.email, user.display_name)
    background_tasks.add_task(mailer.notify_admin_new_student, user.display_name, user.email, user.created_at)
    return user

@router.post("/login", response_model=TokenResponse)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    # form_data.username may hold the username or the email
    user = UserService(db).authenticate_user(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": str(user.id), "role": user.role.value},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return {"access_token": access_token, "token_type": "bearer", "role": user.role}
