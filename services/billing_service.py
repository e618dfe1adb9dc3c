import calendar
import logging
import math
import uuid
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from core.config import MANUAL_RENEWAL_DAYS, RENEWAL_WINDOW_DAYS
from core.exceptions import BadRequest, NotFound, RenewalTooEarly
from models.billing import Subscription
from models.enums import BillingFrequency, SubscriptionStatus
from repositories.billing_repo import BillingRepository
from repositories.user_repo import UserRepository
from schemas.billing_schema import GroupedPackagesResponse, PackageCreate, PackageResponse

logger = logging.getLogger(__name__)


def add_months(moment: datetime, months: int) -> datetime:
    """Same day ``months`` later, clamped to the end of shorter months."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class BillingService:
    def __init__(self, db: Session):
        self.db = db
        self.billing_repo = BillingRepository(db)
        self.user_repo = UserRepository(db)

    # --- Packages ---

    def list_packages_grouped(self) -> GroupedPackagesResponse:
        grouped = GroupedPackagesResponse()
        buckets = {
            BillingFrequency.MONTHLY: grouped.monthly,
            BillingFrequency.QUARTERLY: grouped.quarterly,
            BillingFrequency.HALF_YEAR: grouped.half_year,
            BillingFrequency.YEARLY: grouped.yearly,
        }
        for package in self.billing_repo.get_all_packages():
            buckets[package.subscription_frequency].append(PackageResponse.model_validate(package))
        return grouped

    def get_package(self, package_id: uuid.UUID):
        package = self.billing_repo.get_package(package_id)
        if not package:
            raise NotFound("Package not found")
        return package

    def create_package(self, data: PackageCreate):
        package = self.billing_repo.create_package(**data.model_dump())
        logger.info("Package %s (%s) created", package.id, package.title)
        return package

    # --- Subscriptions ---

    def list_user_subscriptions(self, user_id: uuid.UUID):
        return self.billing_repo.list_user_subscriptions(user_id)

    def list_all_subscriptions(self, status: Optional[SubscriptionStatus] = None):
        return self.billing_repo.list_all_subscriptions(status=status)

    def activate_from_checkout(
        self,
        user_id: uuid.UUID,
        package_id: uuid.UUID,
        stripe_session_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[Subscription, bool]:
        """Create the ACTIVE subscription paid for by a completed checkout.

        Any other ACTIVE subscription of the user is expired first. Returns
        ``(subscription, created)``; ``created`` is False when the checkout
        was already processed.
        """
        if stripe_session_id:
            existing = self.db.query(Subscription).filter(
                Subscription.stripe_session_id == stripe_session_id
            ).first()
            if existing:
                logger.info("Checkout %s already processed", stripe_session_id)
                return existing, False

        if not self.user_repo.get_by_id(user_id):
            raise NotFound("User not found")
        package = self.get_package(package_id)

        now = now or datetime.now()
        try:
            expired = self.billing_repo.expire_active_subscriptions(user_id, "Superseded by a new checkout")
            subscription = self.billing_repo.add_subscription(Subscription(
                user_id=user_id,
                package_id=package.id,
                status=SubscriptionStatus.ACTIVE,
                start_date=now,
                end_date=add_months(now, package.subscription_frequency.months),
                classes_completed=0,
                auto_renew=False,
                stripe_session_id=stripe_session_id,
                notes="Created from checkout",
            ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(subscription)

        logger.info(
            "Subscription %s activated for user %s on package %s (%d superseded)",
            subscription.id, user_id, package.id, expired,
        )
        return subscription, True

    def renew_subscription(
        self, user_id: uuid.UUID, subscription_id: uuid.UUID, now: Optional[datetime] = None
    ) -> Subscription:
        """Manual renewal, allowed within RENEWAL_WINDOW_DAYS of the end date.

        The new period is always MANUAL_RENEWAL_DAYS long; the package's
        billing frequency is not consulted.
        """
        current = self.billing_repo.get_user_subscription(subscription_id, user_id, SubscriptionStatus.ACTIVE)
        if not current:
            raise NotFound("Subscription not found or already expired")
        if current.end_date is None:
            raise BadRequest("Subscription has no end date to renew from")

        now = now or datetime.now()
        days_until_expiry = math.ceil((current.end_date - now).total_seconds() / 86400)
        if days_until_expiry > RENEWAL_WINDOW_DAYS:
            raise RenewalTooEarly(days_until_expiry, RENEWAL_WINDOW_DAYS)

        new_start = current.end_date + timedelta(days=1)
        try:
            current.status = SubscriptionStatus.EXPIRED
            current.notes = "Manually renewed by user"
            renewed = self.billing_repo.add_subscription(Subscription(
                user_id=user_id,
                package_id=current.package_id,
                status=SubscriptionStatus.ACTIVE,
                start_date=new_start,
                end_date=new_start + timedelta(days=MANUAL_RENEWAL_DAYS),
                classes_completed=0,
                auto_renew=current.auto_renew,
                notes="Manual renewal",
            ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(renewed)

        logger.info("Subscription %s renewed as %s for user %s", subscription_id, renewed.id, user_id)
        return renewed

    def set_auto_renew(self, user_id: uuid.UUID, subscription_id: uuid.UUID, enabled: bool) -> Subscription:
        subscription = self.billing_repo.get_user_subscription(subscription_id, user_id)
        if not subscription:
            raise NotFound("Subscription not found")
        subscription.auto_renew = enabled
        self.db.commit()
        self.db.refresh(subscription)
        return subscription

    def cancel_subscription(self, user_id: uuid.UUID, subscription_id: uuid.UUID) -> Subscription:
        subscription = self.billing_repo.get_user_subscription(subscription_id, user_id, SubscriptionStatus.ACTIVE)
        if not subscription:
            raise NotFound("Subscription not found or not active")
        subscription.status = SubscriptionStatus.CANCELLED
        subscription.auto_renew = False
        subscription.notes = "Cancelled by user"
        self.db.commit()
        self.db.refresh(subscription)
        logger.info("Subscription %s cancelled by user %s", subscription_id, user_id)
        return subscription
