import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from core.config import RENEWAL_JOB_SECRET
from core.database import get_db
from services.renewal_service import RenewalService

router = APIRouter()


def verify_job_token(authorization: Optional[str] = Header(default=None)):
    """Cron callers authenticate with ``Authorization: Bearer $RENEWAL_JOB_SECRET``."""
    expected = f"Bearer {RENEWAL_JOB_SECRET}"
    if not RENEWAL_JOB_SECRET or not authorization or not secrets.compare_digest(
        authorization.encode(), expected.encode()
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.post("/subscription-renewal", dependencies=[Depends(verify_job_token)])
def run_subscription_renewal(db: Session = Depends(get_db)):
    return RenewalService(db).run()


@router.get("/subscription-renewal")
def subscription_renewal_health(db: Session = Depends(get_db)):
    return RenewalService(db).health()
