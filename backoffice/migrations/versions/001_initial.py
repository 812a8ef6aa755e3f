"""Initial back office schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _sync_columns() -> list[sa.Column]:
    return [
        sa.Column("control_panel_id", sa.Uuid, sa.ForeignKey("control_panel.id", ondelete="SET NULL")),
        sa.Column("external_account_id", sa.String(255)),
        sa.Column("sync_status", sa.String(20), nullable=False, server_default="NOT_SYNCED"),
        sa.Column("sync_error", sa.Text),
        sa.Column("last_synced_at", sa.DateTime(timezone=True)),
        sa.Column("sync_metadata", sa.JSON),
    ]


def upgrade() -> None:
    # Control panels and plan mappings
    op.create_table(
        "control_panel",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("type", sa.String(20), nullable=False, unique=True),
        sa.Column("name", sa.String(255)),
        sa.Column("enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("config", sa.JSON),
        *_timestamps(),
    )

    op.create_table(
        "plan_mapping",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("control_panel_id", sa.Uuid, sa.ForeignKey("control_panel.id", ondelete="CASCADE"), nullable=False),
        sa.Column("local_plan_type", sa.String(20), nullable=False),
        sa.Column("local_plan_id", sa.Uuid, nullable=False),
        sa.Column("external_plan_id", sa.String(255), nullable=False),
        sa.Column("external_plan_name", sa.String(255)),
        sa.Column("tier", sa.Integer),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("mapping_config", sa.JSON),
        *_timestamps(),
    )
    op.create_index("ix_plan_mapping_control_panel_id", "plan_mapping", ["control_panel_id"])
    op.create_index("ix_plan_mapping_external", "plan_mapping", ["control_panel_id", "external_plan_id"])
    op.create_index(
        "uq_plan_mapping_active",
        "plan_mapping",
        ["control_panel_id", "local_plan_type", "local_plan_id"],
        unique=True,
        sqlite_where=sa.text("is_active = 1"),
        postgresql_where=sa.text("is_active"),
    )

    # Customers and catalog
    op.create_table(
        "customer",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20)),
        sa.Column("company", sa.String(255)),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )
    op.create_index("ix_customer_email", "customer", ["email"], unique=True)

    op.create_table(
        "hosting_package",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("plan_name", sa.String(255), nullable=False),
        sa.Column("storage_gb", sa.Integer),
        sa.Column("bandwidth_gb", sa.Integer),
        sa.Column("price", sa.Numeric(10, 2)),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )

    op.create_table(
        "vps_package",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("plan_name", sa.String(255), nullable=False),
        sa.Column("cpu", sa.Integer),
        sa.Column("ram_gb", sa.Integer),
        sa.Column("storage_gb", sa.Integer),
        sa.Column("price", sa.Numeric(10, 2)),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )

    # Services
    op.create_table(
        "hosting",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("customer_id", sa.Uuid, sa.ForeignKey("customer.id", ondelete="CASCADE"), nullable=False),
        sa.Column("hosting_package_id", sa.Uuid, sa.ForeignKey("hosting_package.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("ip_address", sa.String(45)),
        sa.Column("expiry_date", sa.Date),
        *_sync_columns(),
        *_timestamps(),
    )
    op.create_index("ix_hosting_customer_id", "hosting", ["customer_id"])
    op.create_index("ix_hosting_hosting_package_id", "hosting", ["hosting_package_id"])
    op.create_index("ix_hosting_external_account_id", "hosting", ["external_account_id"])

    op.create_table(
        "vps",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("customer_id", sa.Uuid, sa.ForeignKey("customer.id", ondelete="CASCADE"), nullable=False),
        sa.Column("vps_package_id", sa.Uuid, sa.ForeignKey("vps_package.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("ip_address", sa.String(45)),
        sa.Column("expiry_date", sa.Date),
        *_sync_columns(),
        *_timestamps(),
    )
    op.create_index("ix_vps_customer_id", "vps", ["customer_id"])
    op.create_index("ix_vps_vps_package_id", "vps", ["vps_package_id"])
    op.create_index("ix_vps_external_account_id", "vps", ["external_account_id"])

    # Domains and websites
    op.create_table(
        "domain",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("domain_name", sa.String(255), nullable=False),
        sa.Column("customer_id", sa.Uuid, sa.ForeignKey("customer.id", ondelete="SET NULL")),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )
    op.create_index("ix_domain_domain_name", "domain", ["domain_name"])
    op.create_index("ix_domain_customer_id", "domain", ["customer_id"])

    op.create_table(
        "website",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("customer_id", sa.Uuid, sa.ForeignKey("customer.id", ondelete="CASCADE"), nullable=False),
        sa.Column("domain_id", sa.Uuid, sa.ForeignKey("domain.id", ondelete="SET NULL")),
        sa.Column("hosting_id", sa.Uuid, sa.ForeignKey("hosting.id", ondelete="SET NULL")),
        sa.Column("vps_id", sa.Uuid, sa.ForeignKey("vps.id", ondelete="SET NULL")),
        sa.Column("status", sa.String(20), nullable=False, server_default="LIVE"),
        sa.Column("description", sa.Text),
        sa.Column("notes", sa.Text),
        sa.Column("external_website_id", sa.String(255)),
        *_sync_columns(),
        *_timestamps(),
    )
    op.create_index("ix_website_customer_id", "website", ["customer_id"])
    op.create_index("ix_website_external_website_id", "website", ["external_website_id"])
    op.create_index("ix_website_external_account_id", "website", ["external_account_id"])


def downgrade() -> None:
    op.drop_table("website")
    op.drop_table("domain")
    op.drop_table("vps")
    op.drop_table("hosting")
    op.drop_table("vps_package")
    op.drop_table("hosting_package")
    op.drop_table("customer")
    op.drop_table("plan_mapping")
    op.drop_table("control_panel")
