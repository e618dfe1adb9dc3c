import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from core.config import RENEWAL_WINDOW_DAYS
from models.enums import SubscriptionStatus
from repositories.billing_repo import BillingRepository

logger = logging.getLogger(__name__)


class RenewalService:
    """Daily renewal pass.

    For now it only reports ACTIVE subscriptions; charging saved payment
    methods and rolling the period over is not wired in yet.
    """

    def __init__(self, db: Session):
        self.repo = BillingRepository(db)

    def run(self, now: Optional[datetime] = None, limit: Optional[int] = None) -> dict:
        now = now or datetime.now()
        logger.info("Starting subscription renewal pass at %s", now.isoformat())

        active = self.repo.list_all_subscriptions(status=SubscriptionStatus.ACTIVE, limit=limit)
        summaries = []
        for sub in active:
            summary = {
                "subscription_id": str(sub.id),
                "user_email": sub.user.email,
                "package": sub.package.title,
                "price": str(sub.package.current_price),
                "frequency": sub.package.subscription_frequency.value,
                "end_date": sub.end_date.isoformat() if sub.end_date else None,
                "auto_renew": sub.auto_renew,
                "due": sub.end_date is not None and sub.end_date <= now,
            }
            logger.info(
                "Subscription %s (%s, %s) ends %s, auto_renew=%s",
                summary["subscription_id"], summary["user_email"], summary["package"],
                summary["end_date"], summary["auto_renew"],
            )
            summaries.append(summary)

        report = {
            "processed": len(summaries),
            "due": sum(1 for s in summaries if s["due"]),
            "renewed": 0,
            "subscriptions": summaries,
        }
        logger.info("Renewal pass finished: %d active, %d due, no charges made", report["processed"], report["due"])
        return report

    def health(self, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now()
        return {
            "status": "healthy",
            "upcoming_renewals": self.repo.count_auto_renew_ending_before(now + timedelta(days=RENEWAL_WINDOW_DAYS)),
            "timestamp": now.isoformat(),
        }
