import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import get_db
from core.security import create_access_token
from main import app
from models import Base
from models.billing import Package, Subscription
from models.classes import ClassSession
from models.enums import BillingFrequency, ClassStatus, SubscriptionStatus, UserRole, UserStatus
from models.users import Profile, TeacherStudent, User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2025, 6, 15, 10, 0)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, username, role=UserRole.STUDENT, full_name=None):
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash="not-a-real-hash",
        role=role,
        status=UserStatus.ACTIVE,
    )
    db.add(user)
    db.flush()
    db.add(Profile(user_id=user.id, full_name=full_name or username.title()))
    db.commit()
    db.refresh(user)
    return user


def make_package(db, classes_per_month=8, class_duration=30, frequency=BillingFrequency.MONTHLY, title="Standard"):
    package = Package(
        title=title,
        current_price=Decimal("49.00"),
        currency="USD",
        subscription_frequency=frequency,
        class_duration=class_duration,
        classes_per_month=classes_per_month,
    )
    db.add(package)
    db.commit()
    db.refresh(package)
    return package


def make_subscription(db, user, package, start=None, end=None, status=SubscriptionStatus.ACTIVE, auto_renew=False):
    start = start or datetime(2025, 6, 1)
    subscription = Subscription(
        user_id=user.id,
        package_id=package.id,
        status=status,
        start_date=start,
        end_date=end if end is not None else start + timedelta(days=30),
        classes_completed=0,
        auto_renew=auto_renew,
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    return subscription


def link(db, teacher, student, primary=True, active=True):
    db.add(TeacherStudent(teacher_id=teacher.id, student_id=student.id, is_active=active))
    if primary:
        student.assigned_teacher_id = teacher.id
    db.commit()


def add_class(db, student, teacher, subscription, start_time, status=ClassStatus.COMPLETED, duration=30):
    class_session = ClassSession(
        student_id=student.id,
        teacher_id=teacher.id,
        subscription_id=subscription.id,
        start_time=start_time,
        end_time=start_time + timedelta(minutes=duration) if status == ClassStatus.COMPLETED else None,
        duration=duration,
        status=status,
        teacher_earning=Decimal("2.00"),
    )
    db.add(class_session)
    db.commit()
    return class_session


def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def enrolled(db):
    """A teacher linked to a student on an 8-classes-a-month package."""
    teacher = make_user(db, "teacher1", UserRole.TEACHER, "Ustadh Ali")
    student = make_user(db, "student1", UserRole.STUDENT, "Maryam")
    package = make_package(db)
    subscription = make_subscription(db, student, package)
    link(db, teacher, student)
    return teacher, student, package, subscription
