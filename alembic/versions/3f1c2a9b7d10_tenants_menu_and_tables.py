"""tenants, menu and tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-09-02 10:14:05.118204

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d10"
down_revision = None
branch_labels = None
depends_on = None

subscription_plan = sa.Enum("free", "basic", "premium", "enterprise", name="subscription_plan")


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("slug", sa.String(128), nullable=False),
        sa.Column("owner_name", sa.String(128), nullable=True),
        sa.Column("owner_email", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("branch_name", sa.String(128), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("logo_url", sa.String(512), nullable=True),
        sa.Column("primary_color", sa.String(16), nullable=True),
        sa.Column("secondary_color", sa.String(16), nullable=True),
        sa.Column("accent_color", sa.String(16), nullable=True),
        sa.Column("currency", sa.String(8), nullable=False, server_default="SYP"),
        sa.Column("delivery_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("subscription_plan", subscription_plan, nullable=False, server_default="free"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_tenants_slug", "tenants", ["slug"], unique=True)

    op.create_table(
        "menu_categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
    )
    op.create_index("ix_menu_categories_tenant_id", "menu_categories", ["tenant_id"])

    op.create_table(
        "menu_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "category_id", sa.String(36), sa.ForeignKey("menu_categories.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("image_url", sa.String(512), nullable=True),
        sa.Column("is_available", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_featured", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("display_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_menu_items_tenant_id", "menu_items", ["tenant_id"])

    op.create_table(
        "restaurant_tables",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("table_number", sa.String(32), nullable=False),
        sa.Column("capacity", sa.Integer, nullable=False, server_default="4"),
        sa.Column("location_area", sa.String(64), nullable=True),
        sa.Column("qr_code_url", sa.String(512), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_restaurant_tables_tenant_id", "restaurant_tables", ["tenant_id"])


def downgrade() -> None:
    op.drop_table("restaurant_tables")
    op.drop_table("menu_items")
    op.drop_table("menu_categories")
    op.drop_index("ix_tenants_slug", table_name="tenants")
    op.drop_table("tenants")
    subscription_plan.drop(op.get_bind(), checkfirst=True)
