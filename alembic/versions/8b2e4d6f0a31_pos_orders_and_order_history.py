"""pos orders and order history

Revision ID: 8b2e4d6f0a31
Revises: 3f1c2a9b7d10
Create Date: 2026-09-04 18:41:52.530917

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "8b2e4d6f0a31"
down_revision = "3f1c2a9b7d10"
branch_labels = None
depends_on = None

order_status = sa.Enum(
    "pending_approval", "new", "preparing", "ready", "completed", "cancelled", name="pos_order_status"
)
order_type = sa.Enum("dine_in", "takeaway", "delivery", "table", "whatsapp", name="pos_order_type")


def upgrade() -> None:
    op.create_table(
        "pos_orders",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("order_number", sa.String(64), nullable=False, unique=True),
        sa.Column("status", order_status, nullable=False, server_default="pending_approval"),
        sa.Column("order_type", order_type, nullable=False),
        sa.Column(
            "table_id", sa.String(36), sa.ForeignKey("restaurant_tables.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("customer_info", sa.JSON, nullable=True),
        sa.Column("items", sa.JSON, nullable=False),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("delivery_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("discount_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", sa.String(64), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("approved_by", sa.String(64), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("preparation_start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ready_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completion_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_pos_orders_tenant_id", "pos_orders", ["tenant_id"])
    op.create_index("ix_pos_orders_status", "pos_orders", ["status"])

    op.create_table(
        "order_history",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("cart_id", sa.String(64), nullable=False),
        sa.Column("cart_hash", sa.String(32), nullable=False),
        sa.Column("customer_name", sa.String(128), nullable=True),
        sa.Column("customer_phone", sa.String(32), nullable=True),
        sa.Column("order_type", sa.String(32), nullable=False),
        sa.Column("order_mode", sa.String(32), nullable=False),
        sa.Column("items_count", sa.Integer, nullable=False),
        sa.Column("subtotal", sa.Numeric(10, 2), nullable=False),
        sa.Column("delivery_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("order_data", sa.JSON, nullable=True),
        sa.Column("customer_notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_order_history_tenant_id", "order_history", ["tenant_id"])


def downgrade() -> None:
    op.drop_table("order_history")
    op.drop_index("ix_pos_orders_status", table_name="pos_orders")
    op.drop_index("ix_pos_orders_tenant_id", table_name="pos_orders")
    op.drop_table("pos_orders")
    order_type.drop(op.get_bind(), checkfirst=True)
    order_status.drop(op.get_bind(), checkfirst=True)
