from sqlalchemy.orm import Session, joinedload
from models.billing import Package, Subscription
from models.enums import SubscriptionStatus
from uuid import UUID
from datetime import datetime
from typing import Optional

class BillingRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all_packages(self, active_only: bool = True):
        query = self.db.query(Package)
        if active_only:
            query = query.filter(Package.is_active == True)
        return query.order_by(Package.current_price).all()

    def get_package(self, package_id: UUID):
        return self.db.query(Package).filter(Package.id == package_id).first()

    def create_package(self, **fields) -> Package:
        package = Package(**fields)
        self.db.add(package)
        self.db.commit()
        self.db.refresh(package)
        return package

    def get_active_subscription(self, user_id: UUID):
        # Application-level invariant: at most one ACTIVE row per user
        return self.db.query(Subscription).options(joinedload(Subscription.package)).filter(
            Subscription.user_id == user_id,
            Subscription.status == SubscriptionStatus.ACTIVE
        ).order_by(Subscription.start_date.desc()).first()

    def get_user_subscription(self, subscription_id: UUID, user_id: UUID, status: Optional[SubscriptionStatus] = None):
        query = self.db.query(Subscription).filter(
            Subscription.id == subscription_id,
            Subscription.user_id == user_id
        )
        if status is not None:
            query = query.filter(Subscription.status == status)
        return query.first()

    def list_user_subscriptions(self, user_id: UUID):
        return self.db.query(Subscription).options(joinedload(Subscription.package)).filter(
            Subscription.user_id == user_id
        ).order_by(Subscription.start_date.desc()).all()

    def list_all_subscriptions(self, status: Optional[SubscriptionStatus] = None, limit: Optional[int] = None):
        query = self.db.query(Subscription).options(
            joinedload(Subscription.package), joinedload(Subscription.user)
        )
        if status is not None:
            query = query.filter(Subscription.status == status)
        query = query.order_by(Subscription.start_date.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def expire_active_subscriptions(self, user_id: UUID, note: str) -> int:
        rows = self.db.query(Subscription).filter(
            Subscription.user_id == user_id,
            Subscription.status == SubscriptionStatus.ACTIVE
        ).all()
        for sub in rows:
            sub.status = SubscriptionStatus.EXPIRED
            sub.notes = note
        self.db.flush()
        return len(rows)

    def add_subscription(self, subscription: Subscription) -> Subscription:
        self.db.add(subscription)
        self.db.flush()
        return subscription

    def count_auto_renew_ending_before(self, until: datetime) -> int:
        return self.db.query(Subscription).filter(
            Subscription.status == SubscriptionStatus.ACTIVE,
            Subscription.auto_renew == True,
            Subscription.end_date != None,
            Subscription.end_date <= until
        ).count()
