"""init directory and quota tables

Revision ID: 20261019_init
Revises:
Create Date: 2026-10-19

Agencies and contacts for the directory; contact_views (append-only
daily ledger) and quota_snapshots (per-user document) for the two quota
backends.
"""
from alembic import op
import sqlalchemy as sa


revision = "20261019_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "agencies",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("state", sa.String(64)),
        sa.Column("state_code", sa.String(8)),
        sa.Column("type", sa.String(128)),
        sa.Column("population", sa.String(32)),
        sa.Column("website", sa.String(512)),
        sa.Column("total_schools", sa.String(32)),
        sa.Column("total_students", sa.String(32)),
        sa.Column("mailing_address", sa.String(512)),
        sa.Column("grade_span", sa.String(64)),
        sa.Column("locale", sa.String(128)),
        sa.Column("csa_cbsa", sa.String(255)),
        sa.Column("domain_name", sa.String(255)),
        sa.Column("physical_address", sa.String(512)),
        sa.Column("phone", sa.String(64)),
        sa.Column("status", sa.String(64)),
        sa.Column("student_teacher_ratio", sa.String(32)),
        sa.Column("supervisory_union", sa.String(255)),
        sa.Column("county", sa.String(128)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_agencies_name", "agencies", ["name"], unique=False)

    op.create_table(
        "contacts",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("agency_id", sa.String(64), sa.ForeignKey("agencies.id"), nullable=False),
        sa.Column("first_name", sa.String(128)),
        sa.Column("last_name", sa.String(128)),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(64)),
        sa.Column("title", sa.String(255)),
        sa.Column("email_type", sa.String(64)),
        sa.Column("contact_form_url", sa.String(512)),
        sa.Column("firm_id", sa.String(64)),
        sa.Column("department", sa.String(255)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_contacts_agency_id", "contacts", ["agency_id"], unique=False)
    op.create_index("ix_contacts_name", "contacts", ["last_name", "first_name"], unique=False)

    op.create_table(
        "contact_views",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("contact_id", sa.String(64), nullable=False),
        sa.Column("viewed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("view_day", sa.Date, nullable=False),
        sa.UniqueConstraint(
            "user_id", "contact_id", "view_day", name="uq_contact_views_user_contact_day"
        ),
    )
    op.create_index(
        "ix_contact_views_user_day", "contact_views", ["user_id", "view_day"], unique=False
    )

    op.create_table(
        "quota_snapshots",
        sa.Column("user_id", sa.String(255), primary_key=True),
        sa.Column("viewed_contact_ids", sa.Text, nullable=False, server_default="[]"),
        sa.Column("last_view_date", sa.Date, nullable=False),
        sa.Column("version", sa.Integer, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("quota_snapshots")
    op.drop_index("ix_contact_views_user_day", table_name="contact_views")
    op.drop_table("contact_views")
    op.drop_index("ix_contacts_name", table_name="contacts")
    op.drop_index("ix_contacts_agency_id", table_name="contacts")
    op.drop_table("contacts")
    op.drop_index("ix_agencies_name", table_name="agencies")
    op.drop_table("agencies")
