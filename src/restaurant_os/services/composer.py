"""
Turns a cart plus the customer's checkout choices into an order draft and
the chat message sent to the restaurant.

Validation happens here, before anything is written.
"""
import base64
import hashlib
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from restaurant_os.exceptions import OrderValidationError
from restaurant_os.models import OrderModeEnum, OrderStatusEnum, OrderTypeEnum, RestaurantTable, Tenant
from restaurant_os.schemas.order import CustomerInfo
from restaurant_os.services.cart import Cart, CartLine
from restaurant_os.services.identifiers import generate_cart_id, generate_order_number
from restaurant_os.services.order_status import INITIAL_STATUS
from restaurant_os.services.whatsapp import MessageLine, render_order_message, validate_phone_number

ORDER_MODE_LABELS = {
    OrderModeEnum.dine_in: "Dine-in",
    OrderModeEnum.takeaway: "Takeaway",
    OrderModeEnum.delivery: "Delivery",
}


def cart_hash(lines: list[CartLine], timestamp: str) -> str:
    """Short fingerprint of cart contents, order-independent."""
    content = "|".join(sorted(f"{l.item_id}-{l.quantity}-{l.notes or ''}" for l in lines))
    digest = hashlib.sha256(f"{content}-{timestamp}".encode()).digest()
    return base64.urlsafe_b64encode(digest).decode()[:16]


@dataclass
class OrderDraft:
    tenant_id: str
    order_number: str
    cart_id: str
    order_type: OrderTypeEnum
    order_mode: OrderModeEnum
    mode_label: str
    lines: list[CartLine]
    subtotal: Decimal
    delivery_fee: Decimal
    discount: Decimal
    total: Decimal
    customer: Optional[dict] = None
    table_id: Optional[str] = None
    table_number: Optional[str] = None
    notes: Optional[str] = None
    payment_method: Optional[str] = None
    preferred_time: Optional[str] = None
    status: OrderStatusEnum = INITIAL_STATUS
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def to_row(self) -> dict:
        """Column values for the pos_orders insert."""
        return {
            "tenant_id": self.tenant_id,
            "order_number": self.order_number,
            "status": self.status,
            "order_type": self.order_type,
            "table_id": self.table_id,
            "customer_info": self.customer,
            "items": [line.to_dict() for line in self.lines],
            "subtotal": self.subtotal,
            "delivery_fee": self.delivery_fee,
            "discount_amount": self.discount,
            "total_amount": self.total,
            "payment_method": self.payment_method,
            "notes": self.notes,
        }


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def validate_checkout(
    tenant: Tenant,
    cart: Cart,
    mode: OrderModeEnum,
    customer: Optional[CustomerInfo],
) -> None:
    errors = []

    if _blank(tenant.phone_number):
        errors.append({"field": "restaurant_phone", "message": "Restaurant phone number is not available"})
    elif not validate_phone_number(tenant.phone_number):
        errors.append({"field": "restaurant_phone", "message": "Restaurant phone number is invalid"})

    if cart.is_empty:
        errors.append({"field": "items", "message": "Cart is empty"})

    if mode == OrderModeEnum.delivery:
        for attr in ("name", "phone", "delivery_address"):
            if customer is None or _blank(getattr(customer, attr)):
                errors.append({"field": f"customer.{attr}", "message": "Required for delivery orders"})

    if customer is not None and not _blank(customer.phone) and not validate_phone_number(customer.phone):
        errors.append({"field": "customer.phone", "message": "Invalid phone number"})

    if errors:
        raise OrderValidationError(errors)


def compose_order(
    tenant: Tenant,
    cart: Cart,
    mode: OrderModeEnum,
    customer: Optional[CustomerInfo] = None,
    notes: Optional[str] = None,
    table: Optional[RestaurantTable] = None,
    payment_method: Optional[str] = None,
    preferred_time: Optional[str] = None,
) -> OrderDraft:
    """
    Builds the order draft for a checkout.
    Raises OrderValidationError when the cart or customer data can't be submitted.
    """
    validate_checkout(tenant, cart, mode, customer)

    subtotal = cart.subtotal
    delivery_fee = Decimal(str(tenant.delivery_fee or 0)) if mode == OrderModeEnum.delivery else Decimal("0")
    discount = Decimal("0")
    total = subtotal + delivery_fee - discount

    mode_label = ORDER_MODE_LABELS[mode]
    customer_data = customer.model_dump(exclude_none=True) if customer else None

    if table is not None:
        # orders placed from a table QR code
        mode_label = f"{ORDER_MODE_LABELS[OrderModeEnum.dine_in]} - Table {table.table_number}"
        customer_data = dict(customer_data or {})
        if _blank(customer_data.get("name")):
            customer_data["name"] = f"Table {table.table_number} guest"
        if _blank(customer_data.get("phone")):
            customer_data["phone"] = tenant.phone_number
        customer_data["table_number"] = table.table_number

    now_ms = int(time.time() * 1000)
    return OrderDraft(
        tenant_id=tenant.id,
        order_number=generate_order_number(now_ms),
        cart_id=generate_cart_id(now_ms),
        order_type=OrderTypeEnum.table if table is not None else OrderTypeEnum.whatsapp,
        order_mode=mode,
        mode_label=mode_label,
        lines=cart.lines,
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        discount=discount,
        total=total,
        customer=customer_data or None,
        table_id=table.id if table is not None else None,
        table_number=table.table_number if table is not None else None,
        notes=notes or None,
        payment_method=payment_method,
        preferred_time=None if _blank(preferred_time) else preferred_time.strip(),
    )


def render_draft_message(draft: OrderDraft, tenant: Tenant) -> str:
    return render_order_message(
        restaurant_name=tenant.name,
        branch_name=tenant.branch_name,
        order_mode=draft.mode_label,
        customer=draft.customer,
        lines=[MessageLine(l.name, l.quantity, l.price, l.notes) for l in draft.lines],
        subtotal=draft.subtotal,
        delivery_fee=draft.delivery_fee,
        discount=draft.discount,
        total=draft.total,
        currency=tenant.currency,
        payment_method=draft.payment_method,
        preferred_time=draft.preferred_time,
        order_notes=draft.notes,
    )
