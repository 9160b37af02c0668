"""echo_initial_schema

Tenants, users, goals, initiatives, customers, feedback, ideas,
idea/customer links and comments.

Revision ID: 7e3a1c9d2b40
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect as sa_inspect


# revision identifiers, used by Alembic.
revision = "7e3a1c9d2b40"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def _tenant_fk():
    return sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE")


def upgrade():
    bind = op.get_bind()
    existing_tables = set(sa_inspect(bind).get_table_names())

    if "tenants" not in existing_tables:
        op.create_table(
            "tenants",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=False),
            sa.Column("domain_name", sa.String(length=200), nullable=False),
            sa.Column("plan_tier", sa.String(length=20), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("domain_name"),
        )

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("email", sa.String(length=200), nullable=False),
            sa.Column("name", sa.String(length=200), nullable=True),
            sa.Column("role", sa.String(length=20), nullable=False),
            sa.Column("password_hash", sa.String(length=256), nullable=False),
            sa.Column("reset_token_hash", sa.String(length=64), nullable=True),
            sa.Column("reset_token_expires_at", sa.DateTime(), nullable=True),
            sa.Column("last_login_at", sa.DateTime(), nullable=True),
            *_timestamps(),
            _tenant_fk(),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("tenant_id", "email", name="uq_user_tenant_email"),
        )
        op.create_index("ix_users_tenant_id", "users", ["tenant_id"])
        op.create_index("ix_users_email", "users", ["email"])
        op.create_index("ix_users_reset_token_hash", "users", ["reset_token_hash"])

    if "goals" not in existing_tables:
        op.create_table(
            "goals",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False),
            sa.Column("target_date", sa.Date(), nullable=True),
            *_timestamps(),
            _tenant_fk(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_goals_tenant_id", "goals", ["tenant_id"])
        op.create_index("ix_goals_tenant_status", "goals", ["tenant_id", "status"])

    if "initiatives" not in existing_tables:
        op.create_table(
            "initiatives",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("status", sa.String(length=20), nullable=False),
            sa.Column("priority", sa.Integer(), nullable=False),
            sa.Column("goal_id", sa.Integer(), nullable=True),
            *_timestamps(),
            _tenant_fk(),
            sa.ForeignKeyConstraint(["goal_id"], ["goals.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_initiatives_tenant_id", "initiatives", ["tenant_id"])
        op.create_index("ix_initiatives_goal_id", "initiatives", ["goal_id"])
        op.create_index("ix_initiatives_tenant_status", "initiatives", ["tenant_id", "status"])

    if "customers" not in existing_tables:
        op.create_table(
            "customers",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False),
            sa.Column("revenue", sa.Numeric(precision=14, scale=2), nullable=True),
            *_timestamps(),
            _tenant_fk(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_customers_tenant_id", "customers", ["tenant_id"])
        op.create_index("ix_customers_tenant_status", "customers", ["tenant_id", "status"])

    if "feedback" not in existing_tables:
        op.create_table(
            "feedback",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=500), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("sentiment", sa.String(length=20), nullable=False),
            sa.Column("customer_id", sa.Integer(), nullable=True),
            sa.Column("initiative_id", sa.Integer(), nullable=True),
            *_timestamps(),
            _tenant_fk(),
            sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["initiative_id"], ["initiatives.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_feedback_tenant_id", "feedback", ["tenant_id"])
        op.create_index("ix_feedback_customer_id", "feedback", ["customer_id"])
        op.create_index("ix_feedback_initiative_id", "feedback", ["initiative_id"])
        op.create_index("ix_feedback_tenant_sentiment", "feedback", ["tenant_id", "sentiment"])

    if "ideas" not in existing_tables:
        op.create_table(
            "ideas",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("priority", sa.String(length=20), nullable=False),
            sa.Column("effort", sa.String(length=5), nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False),
            sa.Column("source", sa.String(length=50), nullable=False),
            sa.Column("initiative_id", sa.Integer(), nullable=True),
            *_timestamps(),
            _tenant_fk(),
            sa.ForeignKeyConstraint(["initiative_id"], ["initiatives.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_ideas_tenant_id", "ideas", ["tenant_id"])
        op.create_index("ix_ideas_initiative_id", "ideas", ["initiative_id"])
        op.create_index("ix_ideas_tenant_status", "ideas", ["tenant_id", "status"])
        op.create_index("ix_ideas_tenant_priority", "ideas", ["tenant_id", "priority"])

    if "ideas_customers" not in existing_tables:
        op.create_table(
            "ideas_customers",
            sa.Column("idea_id", sa.Integer(), nullable=False),
            sa.Column("customer_id", sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(["idea_id"], ["ideas.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("idea_id", "customer_id"),
        )

    if "comments" not in existing_tables:
        op.create_table(
            "comments",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("tenant_id", sa.Integer(), nullable=False),
            sa.Column("entity_type", sa.String(length=20), nullable=False),
            sa.Column("entity_id", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column("content", sa.Text(), nullable=False),
            *_timestamps(),
            _tenant_fk(),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_comments_tenant_id", "comments", ["tenant_id"])
        op.create_index("ix_comments_entity", "comments", ["entity_type", "entity_id"])


def downgrade():
    for table in (
        "comments", "ideas_customers", "ideas", "feedback",
        "customers", "initiatives", "goals", "users", "tenants",
    ):
        op.drop_table(table)
