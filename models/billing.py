from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, Numeric, Text, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from .base import Base
from .enums import BillingFrequency, SubscriptionStatus

class Package(Base):
    __tablename__ = "packages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(150), nullable=False)
    description = Column(Text)
    current_price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2))
    discount = Column(Numeric(5, 2))
    currency = Column(String(3), default="USD")
    subscription_frequency = Column(
        Enum(BillingFrequency, values_callable=lambda x: [e.value for e in x]),
        default=BillingFrequency.MONTHLY,
        nullable=False,
    )
    class_duration = Column(Integer)  # minutes
    classes_per_month = Column(Integer)  # monthly allowance, NULL means the default
    package_type = Column(String(50))
    is_popular = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    subscriptions = relationship("Subscription", back_populates="package")

class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)
    package_id = Column(UUID(as_uuid=True), ForeignKey("packages.id"), nullable=False)
    status = Column(
        Enum(SubscriptionStatus, values_callable=lambda x: [e.value for e in x]),
        default=SubscriptionStatus.PENDING,
        nullable=False,
    )
    start_date = Column(DateTime, nullable=False, default=datetime.now)
    end_date = Column(DateTime, nullable=True)
    classes_completed = Column(Integer, default=0, nullable=False)
    auto_renew = Column(Boolean, default=False, nullable=False)
    notes = Column(Text)
    stripe_session_id = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    user = relationship("User", back_populates="subscriptions")
    package = relationship("Package", back_populates="subscriptions")
    class_sessions = relationship("ClassSession", back_populates="subscription")
