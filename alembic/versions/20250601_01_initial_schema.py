"""initial schema

Revision ID: 20250601_01
Revises:
Create Date: 2025-06-01 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20250601_01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)

user_role = sa.Enum("admin", "student", "teacher", name="userrole")
user_status = sa.Enum("active", "suspended", "pending", name="userstatus")
gender = sa.Enum("male", "female", name="gender")
billing_frequency = sa.Enum("monthly", "quarterly", "half-year", "yearly", name="billingfrequency")
subscription_status = sa.Enum("ACTIVE", "PENDING", "CANCELLED", "EXPIRED", name="subscriptionstatus")
class_status = sa.Enum("SCHEDULED", "IN_PROGRESS", "COMPLETED", name="classstatus")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", user_role),
        sa.Column("status", user_status),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("assigned_teacher_id", UUID, sa.ForeignKey("users.id"), nullable=True),
    )
    op.create_table(
        "profiles",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("full_name", sa.String(255)),
        sa.Column("phone", sa.String(20)),
        sa.Column("gender", gender, nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("referral_source", sa.String(100), nullable=True),
    )
    op.create_table(
        "teacher_students",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("teacher_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("student_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
        sa.UniqueConstraint("teacher_id", "student_id", name="uq_teacher_student"),
    )
    op.create_table(
        "packages",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("title", sa.String(150), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("current_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("original_price", sa.Numeric(10, 2)),
        sa.Column("discount", sa.Numeric(5, 2)),
        sa.Column("currency", sa.String(3)),
        sa.Column("subscription_frequency", billing_frequency, nullable=False),
        sa.Column("class_duration", sa.Integer()),
        sa.Column("classes_per_month", sa.Integer()),
        sa.Column("package_type", sa.String(50)),
        sa.Column("is_popular", sa.Boolean()),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_table(
        "subscriptions",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("user_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("package_id", UUID, sa.ForeignKey("packages.id"), nullable=False),
        sa.Column("status", subscription_status, nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("classes_completed", sa.Integer(), nullable=False),
        sa.Column("auto_renew", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("stripe_session_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_subscriptions_user_status", "subscriptions", ["user_id", "status"])
    op.create_table(
        "class_sessions",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("student_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("teacher_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("subscription_id", UUID, sa.ForeignKey("subscriptions.id"), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("status", class_status, nullable=False),
        sa.Column("teacher_earning", sa.Numeric(10, 2)),
        sa.Column("meeting_link", sa.String(500)),
        sa.Column("notes", sa.Text()),
        sa.Column("daily_assignment", sa.Text()),
        sa.Column("review", sa.Text()),
        sa.Column("memorization", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_class_sessions_pair_start", "class_sessions", ["student_id", "teacher_id", "start_time"])
    op.create_table(
        "teacher_earnings",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("teacher_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_earnings", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_classes", sa.Integer(), nullable=False),
        sa.Column("last_updated", sa.DateTime()),
        sa.UniqueConstraint("teacher_id", "month", "year", name="uq_teacher_earnings_period"),
    )
    op.create_table(
        "messages",
        sa.Column("id", UUID, primary_key=True),
        sa.Column("sender_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("receiver_id", UUID, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean()),
        sa.Column("created_at", sa.DateTime()),
    )


def downgrade() -> None:
    op.drop_table("messages")
    op.drop_table("teacher_earnings")
    op.drop_index("ix_class_sessions_pair_start", table_name="class_sessions")
    op.drop_table("class_sessions")
    op.drop_index("ix_subscriptions_user_status", table_name="subscriptions")
    op.drop_table("subscriptions")
    op.drop_table("packages")
    op.drop_table("teacher_students")
    op.drop_table("profiles")
    op.drop_table("users")
    bind = op.get_bind()
    for enum in (class_status, subscription_status, billing_frequency, gender, user_status, user_role):
        enum.drop(bind, checkfirst=True)
