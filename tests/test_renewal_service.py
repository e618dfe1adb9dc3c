from datetime import timedelta
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from api.jobs import verify_job_token
from models.enums import SubscriptionStatus
from scripts import subscription_renewal
from services.renewal_service import RenewalService
from tests.conftest import NOW, make_package, make_subscription, make_user


def test_run_reports_active_subscriptions_without_charging(db):
    alice = make_user(db, "alice")
    bob = make_user(db, "bob")
    carol = make_user(db, "carol")
    package = make_package(db)
    due = make_subscription(db, alice, package, start=NOW - timedelta(days=31), end=NOW - timedelta(days=1), auto_renew=True)
    make_subscription(db, bob, package, start=NOW, end=NOW + timedelta(days=30))
    make_subscription(db, carol, package, status=SubscriptionStatus.CANCELLED)

    report = RenewalService(db).run(now=NOW)

    assert report["processed"] == 2
    assert report["due"] == 1
    assert report["renewed"] == 0
    by_id = {s["subscription_id"]: s for s in report["subscriptions"]}
    assert by_id[str(due.id)]["due"] is True
    assert by_id[str(due.id)]["user_email"] == "alice@example.com"
    assert by_id[str(due.id)]["frequency"] == "monthly"

    db.refresh(due)
    assert due.status == SubscriptionStatus.ACTIVE
    assert due.end_date == NOW - timedelta(days=1)


def test_run_respects_limit(db):
    package = make_package(db)
    for name in ("alice", "bob", "carol"):
        make_subscription(db, make_user(db, name), package)

    assert RenewalService(db).run(now=NOW, limit=2)["processed"] == 2


def test_health_counts_upcoming_auto_renewals(db):
    package = make_package(db)
    make_subscription(db, make_user(db, "alice"), package, start=NOW, end=NOW + timedelta(days=3), auto_renew=True)
    make_subscription(db, make_user(db, "bob"), package, start=NOW, end=NOW + timedelta(days=3))
    make_subscription(db, make_user(db, "carol"), package, start=NOW, end=NOW + timedelta(days=20), auto_renew=True)

    health = RenewalService(db).health(now=NOW)

    assert health["status"] == "healthy"
    assert health["upcoming_renewals"] == 1
    assert health["timestamp"] == NOW.isoformat()


def test_cli_prints_summary(db, capsys):
    make_subscription(db, make_user(db, "alice"), make_package(db))
    with patch.object(subscription_renewal, "SessionLocal", return_value=db):
        assert subscription_renewal.main(["--limit", "5"]) == 0

    out = capsys.readouterr().out
    assert '"processed": 1' in out


def test_job_token_check_handles_non_ascii(monkeypatch):
    monkeypatch.setattr("api.jobs.RENEWAL_JOB_SECRET", "cron-secret")

    with pytest.raises(HTTPException) as exc_info:
        verify_job_token("Bearer café")
    assert exc_info.value.status_code == 401
    verify_job_token("Bearer cron-secret")
