from sqlalchemy.orm import Session
from models.users import User, Profile
from models.enums import UserRole, UserStatus
from schemas.user_schema import UserCreate
import uuid

class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str):
        return self.db.query(User).filter(User.email == email).first()

    def get_by_username(self, username: str):
        return self.db.query(User).filter(User.username == username).first()

    def get_by_id(self, user_id: uuid.UUID):
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_role(self, role: UserRole):
        return self.db.query(User).filter(User.role == role).all()

    def create_user(self, user_data: UserCreate, hashed_password: str, role: UserRole = UserRole.STUDENT):
        try:
            new_user = User(
                username=user_data.username,
                email=user_data.email,
                password_hash=hashed_password,
                role=role,
                status=UserStatus.ACTIVE
            )
            self.db.add(new_user)
            self.db.flush()

            new_profile = Profile(
                user_id=new_user.id,
                full_name=user_data.full_name,
                phone=user_data.phone,
                gender=user_data.gender,
                birth_date=user_data.birth_date,
                referral_source=user_data.referral_source
            )
            self.db.add(new_profile)

            self.db.commit()
            self.db.refresh(new_user)
            return new_user
        except Exception:
            self.db.rollback()
            raise

    def get_all_users(self, skip: int = 0, limit: int = 100):
        return self.db.query(User).order_by(User.created_at.desc()).offset(skip).limit(limit).all()
