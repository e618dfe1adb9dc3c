from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from core.database import get_db
from core.exceptions import ServiceError
from core.security import get_current_active_user
from services.billing_service import BillingService
from services.payment_service import PaymentService
from schemas.billing_schema import (
    AutoRenewalRequest,
    CheckoutRequest,
    CheckoutResponse,
    GroupedPackagesResponse,
    PackageResponse,
    RenewalResponse,
    SubscriptionResponse,
)
from models.users import User

router = APIRouter()

@router.get("/packages", response_model=GroupedPackagesResponse)
def list_packages(db: Session = Depends(get_db)):
    return BillingService(db).list_packages_grouped()

@router.get("/packages/{package_id}", response_model=PackageResponse)
def get_package(package_id: UUID, db: Session = Depends(get_db)):
    try:
        return BillingService(db).get_package(package_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.post("/checkout", response_model=CheckoutResponse)
def create_checkout(
    req: CheckoutRequest,
    accept_language: Optional[str] = Header(default=None),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    locale = (accept_language or "en").split(",")[0].split("-")[0] or "en"
    try:
        return PaymentService(db).create_checkout_session(current_user, req.package_id, locale)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.get("/subscriptions", response_model=list[SubscriptionResponse])
def my_subscriptions(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return BillingService(db).list_user_subscriptions(current_user.id)

@router.post("/subscriptions/{subscription_id}/renew", response_model=RenewalResponse)
def renew_subscription(
    subscription_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        renewed = BillingService(db).renew_subscription(current_user.id, subscription_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"message": "Subscription renewed successfully", "new_subscription": renewed}

@router.patch("/subscriptions/{subscription_id}/auto-renewal", response_model=SubscriptionResponse)
def set_auto_renewal(
    subscription_id: UUID,
    req: AutoRenewalRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return BillingService(db).set_auto_renew(current_user.id, subscription_id, req.enabled)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

@router.post("/subscriptions/{subscription_id}/cancel", response_model=SubscriptionResponse)
def cancel_subscription(
    subscription_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return BillingService(db).cancel_subscription(current_user.id, subscription_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
