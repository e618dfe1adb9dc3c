"""
Daily subscription renewal pass.

Run from cron or CI: ``python -m scripts.subscription_renewal [--limit N]``
"""
import argparse
import json
import logging
import sys

from core.config import LOG_LEVEL
from core.database import SessionLocal
from services.renewal_service import RenewalService

logger = logging.getLogger("qodwa.renewal")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Report ACTIVE subscriptions due for renewal")
    parser.add_argument("--limit", type=int, default=None, help="only look at the N most recent subscriptions")
    args = parser.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    db = SessionLocal()
    try:
        report = RenewalService(db).run(limit=args.limit)
    except Exception:
        logger.exception("Subscription renewal pass failed")
        return 1
    finally:
        db.close()

    print(json.dumps({k: v for k, v in report.items() if k != "subscriptions"}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
