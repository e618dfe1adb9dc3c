import logging
import uuid
from sqlalchemy.orm import Session
from repositories.user_repo import UserRepository
from models.users import Profile, TeacherStudent, User
from schemas.user_schema import LinkedTeacher, UserBrief, UserCreate, UserProfileUpdate
from core.security import get_password_hash, verify_password
from core.exceptions import BadRequest, NotFound

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def to_brief(user: User) -> UserBrief:
    return UserBrief(id=user.id, username=user.username, full_name=user.display_name, email=user.email)


def to_linked_teacher(link: TeacherStudent) -> LinkedTeacher:
    teacher = link.teacher
    return LinkedTeacher(
        id=teacher.id,
        username=teacher.username,
        full_name=teacher.display_name,
        email=teacher.email,
        notes=link.notes,
        assigned_at=link.created_at,
    )


class UserService:
    def __init__(self, db: Session):
        self.user_repo = UserRepository(db)
        self.db = db

    def register_user(self, user_data: UserCreate):
        if len(user_data.password) < MIN_PASSWORD_LENGTH:
            raise BadRequest(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        if user_data.password != user_data.retype_password:
            raise BadRequest("Passwords do not match")

        if self.user_repo.get_by_username(user_data.username):
            raise BadRequest("Username is already taken")
        if self.user_repo.get_by_email(user_data.email):
            raise BadRequest("Email is already registered")

        hashed_pwd = get_password_hash(user_data.password)
        user = self.user_repo.create_user(user_data, hashed_pwd)
        logger.info("Registered student %s (%s)", user.id, user.email)
        return user

    def authenticate_user(self, username_or_email: str, password: str):
        # Login accepts either the username or the email
        user = self.user_repo.get_by_username(username_or_email)
        if not user:
            user = self.user_repo.get_by_email(username_or_email)

        if not user or not verify_password(password, user.password_hash):
            return None
        return user

    def get_user_by_id(self, user_id: uuid.UUID):
        return self.user_repo.get_by_id(user_id)

    def update_user_profile(self, user_id: uuid.UUID, update_data: UserProfileUpdate):
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFound("User not found")

        if update_data.email and update_data.email != user.email:
            if self.user_repo.get_by_email(update_data.email):
                raise BadRequest("Email is already registered")
            user.email = update_data.email

        profile = user.profile
        if not profile:
            profile = Profile(user_id=user.id)
            self.db.add(profile)
            user.profile = profile

        changes = update_data.model_dump(exclude_unset=True, exclude={"email"})
        for field, value in changes.items():
            setattr(profile, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def get_all_users(self):
        return self.user_repo.get_all_users()
