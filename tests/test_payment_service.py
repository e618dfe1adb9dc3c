import json
import uuid
from unittest.mock import Mock, patch

import pytest
import stripe

from core.exceptions import BadRequest, PaymentError
from models.billing import Subscription
from models.enums import SubscriptionStatus
from services.payment_service import PaymentService
from tests.conftest import make_package, make_user


def checkout_completed(user_id, package_id, session_id="cs_test_abc"):
    return {
        "id": "evt_1",
        "type": "checkout.session.completed",
        "data": {"object": {
            "id": session_id,
            "metadata": {"user_id": str(user_id), "package_id": str(package_id)},
        }},
    }


def test_create_checkout_session(db):
    student = make_user(db, "student1")
    package = make_package(db)
    fake_session = Mock(id="cs_test_abc", url="https://checkout.stripe.com/pay/cs_test_abc")

    with patch("stripe.checkout.Session.create", return_value=fake_session) as create:
        result = PaymentService(db).create_checkout_session(student, package.id, "ar")

    assert result == {"session_id": "cs_test_abc", "url": "https://checkout.stripe.com/pay/cs_test_abc"}
    kwargs = create.call_args.kwargs
    assert kwargs["line_items"][0]["price_data"]["unit_amount"] == 4900
    assert kwargs["metadata"] == {"user_id": str(student.id), "package_id": str(package.id)}
    assert kwargs["success_url"].endswith("/ar/success")


def test_create_checkout_session_provider_error(db):
    student = make_user(db, "student1")
    package = make_package(db)

    with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("boom")):
        with pytest.raises(PaymentError):
            PaymentService(db).create_checkout_session(student, package.id)


def test_construct_event_requires_signature():
    with pytest.raises(BadRequest, match="No signature"):
        PaymentService.construct_event(b"{}", None)


def test_construct_event_rejects_bad_signature():
    error = stripe.SignatureVerificationError("bad signature", "t=1,v1=x")
    with patch("stripe.Webhook.construct_event", side_effect=error):
        with pytest.raises(BadRequest, match="verification failed"):
            PaymentService.construct_event(b"{}", "t=1,v1=x")


def test_construct_event_returns_plain_json():
    payload = json.dumps({"id": "evt_1", "type": "ping", "data": {"object": {}}}).encode()
    with patch("stripe.Webhook.construct_event", return_value=Mock()):
        event = PaymentService.construct_event(payload, "t=1,v1=x")
    assert event["type"] == "ping"


def test_checkout_completed_activates_subscription(db):
    student = make_user(db, "student1")
    package = make_package(db)

    subscription = PaymentService(db).handle_event(checkout_completed(student.id, package.id))

    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.stripe_session_id == "cs_test_abc"
    assert subscription.user_id == student.id


def test_checkout_without_metadata_is_ignored(db):
    event = {"type": "checkout.session.completed", "data": {"object": {"id": "cs_1", "metadata": {}}}}

    assert PaymentService(db).handle_event(event) is None
    assert db.query(Subscription).count() == 0


@pytest.mark.parametrize("event_type", ["payment_intent.succeeded", "invoice.created"])
def test_other_events_change_nothing(db, event_type):
    event = {"type": event_type, "data": {"object": {"id": "pi_1"}}}

    assert PaymentService(db).handle_event(event) is None
    assert db.query(Subscription).count() == 0


def test_redelivered_checkout_returns_nothing(db):
    student = make_user(db, "student1")
    package = make_package(db)
    service = PaymentService(db)
    event = checkout_completed(student.id, package.id, session_id="cs_same")

    assert service.handle_event(event) is not None
    assert service.handle_event(event) is None
    assert db.query(Subscription).count() == 1
