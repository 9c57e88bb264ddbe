"""Initial schema: tenants, dashboards, dashboard versions, connection configs

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "dashboards",
        sa.Column("tenant_id", sa.String(length=64), sa.ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("id", sa.String(length=255), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("data", sa.Text(), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("dashboards_tenant_updated_idx", "dashboards", ["tenant_id", "updated_at"])

    op.create_table(
        "dashboard_versions",
        sa.Column("version_id", sa.String(length=36), primary_key=True),
        sa.Column("tenant_id", sa.String(length=64), nullable=False),
        sa.Column("dashboard_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("data", sa.Text(), nullable=False),
        sa.Column("source_updated_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["tenant_id", "dashboard_id"],
            ["dashboards.tenant_id", "dashboards.id"],
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
    )
    op.create_index(
        "dashboard_versions_lookup_idx",
        "dashboard_versions",
        ["tenant_id", "dashboard_id", "created_at"],
    )

    op.create_table(
        "connection_configs",
        sa.Column("tenant_id", sa.String(length=64), sa.ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("url", sa.String(length=1024), nullable=False, server_default=""),
        sa.Column("fallback_url", sa.String(length=1024), nullable=False, server_default=""),
        sa.Column("auth_method", sa.String(length=16), nullable=False, server_default="oauth"),
        sa.Column("token", sa.Text(), nullable=False, server_default=""),
        sa.Column("oauth_tokens", sa.Text(), nullable=True),
        sa.Column("connections_json", sa.Text(), nullable=True),
        sa.Column("updated_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("connection_configs")
    op.drop_index("dashboard_versions_lookup_idx", table_name="dashboard_versions")
    op.drop_table("dashboard_versions")
    op.drop_index("dashboards_tenant_updated_idx", table_name="dashboards")
    op.drop_table("dashboards")
    op.drop_table("tenants")
