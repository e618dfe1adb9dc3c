from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime
from decimal import Decimal
from models.enums import BillingFrequency, SubscriptionStatus

# --- Packages ---
class PackageBase(BaseModel):
    title: str
    description: Optional[str] = None
    current_price: Decimal
    original_price: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    currency: str = "USD"
    subscription_frequency: BillingFrequency = BillingFrequency.MONTHLY
    class_duration: Optional[int] = None
    classes_per_month: Optional[int] = None
    package_type: Optional[str] = None
    is_popular: bool = False

class PackageCreate(PackageBase):
    pass

class PackageResponse(PackageBase):
    id: UUID
    is_active: bool

    class Config:
        from_attributes = True

class GroupedPackagesResponse(BaseModel):
    monthly: List[PackageResponse] = []
    quarterly: List[PackageResponse] = []
    half_year: List[PackageResponse] = []
    yearly: List[PackageResponse] = []

# --- Subscriptions ---
class SubscriptionResponse(BaseModel):
    id: UUID
    user_id: UUID
    package_id: UUID
    status: SubscriptionStatus
    start_date: datetime
    end_date: Optional[datetime] = None
    classes_completed: int
    auto_renew: bool
    notes: Optional[str] = None
    package: Optional[PackageResponse] = None

    class Config:
        from_attributes = True

class CheckoutRequest(BaseModel):
    package_id: UUID

class CheckoutResponse(BaseModel):
    session_id: str
    url: Optional[str] = None

class AutoRenewalRequest(BaseModel):
    enabled: bool

class RenewalResponse(BaseModel):
    message: str
    new_subscription: SubscriptionResponse
