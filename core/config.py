import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL")

# JWT
SECRET_KEY = os.getenv("SECRET_KEY", "change_me_outside_development")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30))

# Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Mail (fastapi-mail). Sending is skipped when MAIL_USERNAME is empty.
MAIL_USERNAME = os.getenv("MAIL_USERNAME", "")
MAIL_PASSWORD = os.getenv("MAIL_PASSWORD", "")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@qodwa.com")
MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Qodwa")
MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
MAIL_PORT = int(os.getenv("MAIL_PORT", 587))
ADMIN_NOTIFICATION_EMAIL = os.getenv("ADMIN_NOTIFICATION_EMAIL", "")

# Cron / batch
RENEWAL_JOB_SECRET = os.getenv("RENEWAL_JOB_SECRET", "")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# Local development only; Alembic owns the schema everywhere else
AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "false").lower() in ("1", "true", "yes")

# Business rules
DEFAULT_CLASSES_PER_MONTH = 8
DEFAULT_CLASS_DURATION = 30  # minutes
TEACHER_HOURLY_RATE = Decimal("4.00")  # USD
RENEWAL_WINDOW_DAYS = 7
# Manual renewal always extends by this many days, whatever the package frequency.
MANUAL_RENEWAL_DAYS = 30
