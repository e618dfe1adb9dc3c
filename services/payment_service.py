import json
import logging
import uuid
from decimal import Decimal
from typing import Optional

import stripe
from sqlalchemy.orm import Session

from core.config import FRONTEND_URL, STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET
from core.exceptions import BadRequest, PaymentError
from models.billing import Subscription
from models.users import User
from services.billing_service import BillingService

logger = logging.getLogger(__name__)

stripe.api_key = STRIPE_SECRET_KEY

# Events acknowledged without any database change
LOGGED_ONLY_EVENTS = {
    "checkout.session.expired",
    "payment_intent.succeeded",
    "payment_intent.payment_failed",
}


class PaymentService:
    def __init__(self, db: Session):
        self.billing = BillingService(db)

    def create_checkout_session(self, user: User, package_id: uuid.UUID, locale: str = "en") -> dict:
        package = self.billing.get_package(package_id)
        unit_amount = int((Decimal(package.current_price) * 100).to_integral_value())
        try:
            session = stripe.checkout.Session.create(
                payment_method_types=["card"],
                mode="payment",
                customer_email=user.email,
                line_items=[{
                    "price_data": {
                        "currency": (package.currency or "USD").lower(),
                        "product_data": {"name": package.title},
                        "unit_amount": unit_amount,
                    },
                    "quantity": 1,
                }],
                success_url=f"{FRONTEND_URL}/{locale}/success",
                cancel_url=f"{FRONTEND_URL}/{locale}/cancel",
                metadata={"user_id": str(user.id), "package_id": str(package.id)},
            )
        except stripe.StripeError as e:
            logger.exception("Stripe checkout creation failed for user %s", user.id)
            raise PaymentError(f"Could not create checkout session: {e.user_message or 'payment provider error'}")

        logger.info("Checkout session %s created for user %s, package %s", session.id, user.id, package.id)
        return {"session_id": session.id, "url": session.url}

    @staticmethod
    def construct_event(payload: bytes, signature: Optional[str]) -> dict:
        """Verify the signature header and return the event as plain JSON."""
        if not signature:
            raise BadRequest("No signature found")
        try:
            stripe.Webhook.construct_event(payload, signature, STRIPE_WEBHOOK_SECRET)
        except ValueError:
            raise BadRequest("Invalid payload")
        except stripe.SignatureVerificationError:
            logger.warning("Stripe webhook signature verification failed")
            raise BadRequest("Webhook signature verification failed")
        return json.loads(payload)

    def handle_event(self, event: dict) -> Optional[Subscription]:
        """Apply a verified webhook event.

        Returns the subscription only when this delivery created it, so a
        redelivered event does not trigger a second confirmation.
        """
        event_type = event["type"]
        data = event["data"]["object"]

        if event_type == "checkout.session.completed":
            metadata = data.get("metadata") or {}
            user_id = metadata.get("user_id")
            package_id = metadata.get("package_id")
            if not user_id or not package_id:
                logger.warning("Checkout %s has no user_id/package_id metadata", data.get("id"))
                return None
            subscription, created = self.billing.activate_from_checkout(
                user_id=uuid.UUID(user_id),
                package_id=uuid.UUID(package_id),
                stripe_session_id=data.get("id"),
            )
            return subscription if created else None

        if event_type in LOGGED_ONLY_EVENTS:
            logger.info("Stripe event %s for %s", event_type, data.get("id"))
        else:
            logger.info("Unhandled Stripe event type %s", event_type)
        return None
