"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-06-01
"""
from typing import Sequence, Union
import uuid

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

APP_ROLE = sa.Enum("user", "admin", name="app_role")
WALK_STATUS = sa.Enum("pending", "active", "completed", "cancelled", name="walk_status")
QR_CODE_TYPE = sa.Enum("affiliation", "walk", name="qr_code_type")
REQUEST_STATUS = sa.Enum("pending", "accepted", "rejected", "cancelled", "completed", name="request_status")


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("avatar_url", sa.String(500)),
        sa.Column("fcm_token", sa.String(255)),
        sa.Column("completed_walks_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "user_roles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False, unique=True),
        sa.Column("role", APP_ROLE, nullable=False),
        sa.Column("created_at", sa.DateTime()),
    )

    op.create_table(
        "affiliations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("admin_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("affiliated_at", sa.DateTime()),
        sa.UniqueConstraint("user_id", "admin_id", name="uq_affiliations_user_admin"),
    )
    op.create_index("ix_affiliations_user_id", "affiliations", ["user_id"])
    op.create_index("ix_affiliations_admin_id", "affiliations", ["admin_id"])

    op.create_table(
        "walks",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("client_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("walker_id", sa.String(128), sa.ForeignKey("profiles.id")),
        sa.Column("dog_name", sa.String(100), nullable=False),
        sa.Column("status", WALK_STATUS, nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("start_time", sa.DateTime()),
        sa.Column("end_time", sa.DateTime()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_walks_client_id", "walks", ["client_id"])
    op.create_index("ix_walks_walker_id", "walks", ["walker_id"])

    op.create_table(
        "locations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("walk_id", sa.String(36), sa.ForeignKey("walks.id"), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("timestamp", sa.DateTime()),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_locations_walk_id", "locations", ["walk_id"])

    op.create_table(
        "admin_locations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("admin_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False, unique=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("timestamp", sa.DateTime()),
        sa.Column("created_at", sa.DateTime()),
    )

    op.create_table(
        "qr_codes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True),
        sa.Column("code_type", QR_CODE_TYPE, nullable=False),
        sa.Column("walk_id", sa.String(36), sa.ForeignKey("walks.id")),
        sa.Column("admin_id", sa.String(128), sa.ForeignKey("profiles.id")),
        sa.Column("created_by", sa.String(128), sa.ForeignKey("profiles.id")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("expires_at", sa.DateTime()),
        sa.Column("created_at", sa.DateTime()),
    )

    op.create_table(
        "admin_qr_codes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("admin_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False, unique=True),
        sa.Column("code", sa.String(64), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime()),
    )

    op.create_table(
        "walker_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False, unique=True),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("service_radius", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("hourly_rate", sa.Float()),
        sa.Column("specialties", sa.JSON()),
        sa.Column("bio", sa.Text()),
        sa.Column("city", sa.String(100)),
        sa.Column("state", sa.String(100)),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )

    op.create_table(
        "walk_requests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("client_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("walker_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("requested_date", sa.Date(), nullable=False),
        sa.Column("requested_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("number_of_dogs", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("special_notes", sa.Text()),
        sa.Column("status", REQUEST_STATUS, nullable=False),
        sa.Column("response_notes", sa.Text()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_walk_requests_client_id", "walk_requests", ["client_id"])
    op.create_index("ix_walk_requests_walker_id", "walk_requests", ["walker_id"])

    op.create_table(
        "walker_groups",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("walker_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(200)),
        sa.Column("color", sa.String(7), nullable=False, server_default="#3B82F6"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    )
    op.create_index("ix_walker_groups_walker_id", "walker_groups", ["walker_id"])

    op.create_table(
        "group_members",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("group_id", sa.String(36), sa.ForeignKey("walker_groups.id"), nullable=False),
        sa.Column("client_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("created_at", sa.DateTime()),
        sa.UniqueConstraint("group_id", "client_id", name="uq_group_members_group_client"),
    )
    op.create_index("ix_group_members_group_id", "group_members", ["group_id"])

    plans = op.create_table(
        "subscription_plans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("max_clients", sa.Integer(), nullable=False),
        sa.Column("features", sa.JSON()),
        sa.Column("price_monthly", sa.Float()),
    )

    op.create_table(
        "walker_subscriptions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("walker_id", sa.String(128), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("plan_id", sa.String(36), sa.ForeignKey("subscription_plans.id"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("started_at", sa.DateTime()),
    )
    op.create_index("ix_walker_subscriptions_walker_id", "walker_subscriptions", ["walker_id"])

    op.bulk_insert(
        plans,
        [
            {
                "id": str(uuid.uuid4()),
                "name": "free",
                "display_name": "Gratuito",
                "max_clients": 6,
                "features": ["Hasta 6 clientes", "Tracking básico", "1 grupo"],
                "price_monthly": 0,
            },
            {
                "id": str(uuid.uuid4()),
                "name": "pro",
                "display_name": "Profesional",
                "max_clients": 30,
                "features": ["Hasta 30 clientes", "Tracking en tiempo real", "Grupos ilimitados"],
                "price_monthly": 199,
            },
        ],
    )


def downgrade() -> None:
    op.drop_table("walker_subscriptions")
    op.drop_table("subscription_plans")
    op.drop_table("group_members")
    op.drop_table("walker_groups")
    op.drop_table("walk_requests")
    op.drop_table("walker_profiles")
    op.drop_table("admin_qr_codes")
    op.drop_table("qr_codes")
    op.drop_table("admin_locations")
    op.drop_table("locations")
    op.drop_table("walks")
    op.drop_table("affiliations")
    op.drop_table("user_roles")
    op.drop_table("profiles")

    for enum_type in (REQUEST_STATUS, QR_CODE_TYPE, WALK_STATUS, APP_ROLE):
        enum_type.drop(op.get_bind(), checkfirst=True)
