import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence
from urllib.parse import quote

from restaurant_os.config import settings

_PHONE_PATTERNS = (
    re.compile(r"^\+\d{7,15}$"),  # international
    re.compile(r"^\d{7,15}$"),  # national
)
_NON_PHONE_CHARS = re.compile(r"[^\d+]")

DEFAULT_PAYMENT_METHOD = "Cash on delivery"


def clean_phone_number(phone: str) -> str:
    return _NON_PHONE_CHARS.sub("", phone or "")


def validate_phone_number(phone: Optional[str]) -> bool:
    """Digits optionally prefixed with '+', 7 to 15 digits after cleaning."""
    if not phone:
        return False
    cleaned = clean_phone_number(phone)
    return any(p.match(cleaned) for p in _PHONE_PATTERNS)


def normalize_phone_for_link(phone: str) -> str:
    """
    Digits-only form used in chat links.
    A national number loses its leading 0; no country code is guessed.
    """
    cleaned = clean_phone_number(phone)
    if cleaned.startswith("+"):
        return cleaned[1:]
    if cleaned.startswith("0"):
        return cleaned[1:]
    return cleaned


@dataclass(frozen=True)
class ChatLinks:
    app_url: str
    web_url: str


def build_whatsapp_links(phone: str, message: str) -> ChatLinks:
    """
    Native URI first, web fallback second.
    The device opens app_url and falls back to web_url when no handler answers.
    """
    digits = normalize_phone_for_link(phone)
    text = quote(message, safe="")
    return ChatLinks(
        app_url=f"{settings.WHATSAPP_APP_SCHEME}://send?phone={digits}&text={text}",
        web_url=f"https://{settings.WHATSAPP_WEB_HOST}/{digits}?text={text}",
    )


def format_amount(value, currency: Optional[str] = None) -> str:
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        text = f"{amount:,.0f}"
    else:
        text = f"{amount:,.2f}"
    return f"{text} {currency}" if currency else text


@dataclass
class MessageLine:
    name: str
    quantity: int
    price: Decimal
    notes: Optional[str] = None


def render_order_message(
    *,
    restaurant_name: str,
    order_mode: str,
    lines: Sequence[MessageLine],
    subtotal,
    total,
    currency: Optional[str] = None,
    branch_name: Optional[str] = None,
    customer: Optional[dict] = None,
    delivery_fee=0,
    discount=0,
    payment_method: Optional[str] = None,
    preferred_time: Optional[str] = None,
    order_notes: Optional[str] = None,
) -> str:
    """
    Multi-line order text sent to the restaurant's chat.

    Item lines read "- <name> x<qty> = <line total> (@ <unit price>)".
    Delivery fee and discount lines only appear when non-zero.
    """
    fmt = lambda v: format_amount(v, currency)  # noqa: E731

    header = f"Restaurant: {restaurant_name}"
    if branch_name:
        header += f" | Branch: {branch_name}"

    out = ["New order from the digital menu", header, f"Order type: {order_mode}"]

    if customer:
        if customer.get("name"):
            out.append(f"Customer: {customer['name']}")
        if customer.get("phone"):
            out.append(f"Phone: {customer['phone']}")
        if customer.get("table_number"):
            out.append(f"Table: {customer['table_number']}")
        if customer.get("delivery_address"):
            out.append(f"Address: {customer['delivery_address']}")

    out.append("")
    out.append("Items:")
    for line in lines:
        line_total = Decimal(str(line.price)) * line.quantity
        out.append(f"- {line.name} x{line.quantity} = {fmt(line_total)} (@ {fmt(line.price)})")
        if line.notes:
            out.append(f"  Note: {line.notes}")

    out.append("")
    out.append(f"Subtotal: {fmt(subtotal)}")
    if Decimal(str(delivery_fee)) > 0:
        out.append(f"Delivery fee: {fmt(delivery_fee)}")
    if Decimal(str(discount)) > 0:
        out.append(f"Discount: {fmt(discount)}")
    out.append(f"Total: {fmt(total)}")
    out.append("")
    out.append(f"Payment method: {payment_method or DEFAULT_PAYMENT_METHOD}")
    if preferred_time:
        out.append(f"Preferred time: {preferred_time}")
    if order_notes:
        out.append(f"Order notes: {order_notes}")

    return "\n".join(out)
