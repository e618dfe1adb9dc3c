import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import ServiceError
from services.email_service import EmailService
from services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/stripe")
async def stripe_webhook(request: Request, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    payload = await request.body()
    service = PaymentService(db)
    try:
        event = service.construct_event(payload, request.headers.get("stripe-signature"))
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    logger.info("Stripe webhook received: %s", event.get("type"))
    # Once verified, always acknowledge so the processor does not retry
    try:
        subscription = service.handle_event(event)
    except Exception:
        logger.exception("Error processing Stripe event %s", event.get("id"))
        return {"received": True, "processed": False}

    if subscription is not None:
        user = subscription.user
        background_tasks.add_task(
            EmailService().send_subscription_confirmed,
            user.email, user.display_name, subscription.package.title, subscription.end_date,
        )
    return {"received": True, "processed": True}
