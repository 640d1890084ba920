"""staff, shifts, payments and feedback

Revision ID: c47a19e2d5b8
Revises: 8b2e4d6f0a31
Create Date: 2026-10-18 10:12:07.318420

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "c47a19e2d5b8"
down_revision = "8b2e4d6f0a31"
branch_labels = None
depends_on = None

staff_role = sa.Enum("cashier", "waiter", "kitchen", "manager", name="staff_role")
shift_status = sa.Enum("open", "closed", name="shift_status")
payment_method = sa.Enum("cash", "card", "digital", name="payment_method")
payment_status = sa.Enum("pending", "completed", "failed", "refunded", name="payment_status")


def upgrade() -> None:
    op.create_table(
        "staff_users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("staff_name", sa.String(128), nullable=False),
        sa.Column("role", staff_role, nullable=False),
        sa.Column("pin_code", sa.String(8), nullable=True),
        sa.Column("permissions", sa.JSON, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_staff_users_tenant_id", "staff_users", ["tenant_id"])

    op.create_table(
        "shifts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("staff_user_id", sa.String(36), sa.ForeignKey("staff_users.id"), nullable=False),
        sa.Column("status", shift_status, nullable=False, server_default="open"),
        sa.Column("shift_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("shift_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("opening_cash", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("closing_cash", sa.Numeric(10, 2), nullable=True),
        sa.Column("total_sales", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_orders", sa.Integer, nullable=False, server_default="0"),
        sa.Column("cash_payments", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("card_payments", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("digital_payments", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("discounts_given", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_shifts_tenant_id", "shifts", ["tenant_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("order_id", sa.String(36), sa.ForeignKey("pos_orders.id"), nullable=False),
        sa.Column("payment_method", payment_method, nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("received_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("change_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("processed_by", sa.String(64), nullable=True),
        sa.Column("payment_status", payment_status, nullable=False, server_default="completed"),
        sa.Column("transaction_reference", sa.String(128), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_payments_tenant_id", "payments", ["tenant_id"])
    op.create_index("ix_payments_order_id", "payments", ["order_id"])

    op.create_table(
        "feedback",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )
    op.create_index("ix_feedback_tenant_id", "feedback", ["tenant_id"])


def downgrade() -> None:
    op.drop_index("ix_feedback_tenant_id", table_name="feedback")
    op.drop_table("feedback")
    op.drop_index("ix_payments_order_id", table_name="payments")
    op.drop_index("ix_payments_tenant_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_shifts_tenant_id", table_name="shifts")
    op.drop_table("shifts")
    op.drop_index("ix_staff_users_tenant_id", table_name="staff_users")
    op.drop_table("staff_users")
    payment_status.drop(op.get_bind(), checkfirst=True)
    payment_method.drop(op.get_bind(), checkfirst=True)
    shift_status.drop(op.get_bind(), checkfirst=True)
    staff_role.drop(op.get_bind(), checkfirst=True)
