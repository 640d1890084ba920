from decimal import Decimal
from urllib.parse import unquote

import pytest

from restaurant_os.services.whatsapp import (
    MessageLine,
    build_whatsapp_links,
    format_amount,
    normalize_phone_for_link,
    render_order_message,
    validate_phone_number,
)


@pytest.mark.parametrize(
    "phone, valid",
    [
        ("+963944000111", True),
        ("+963 944 000 111", True),
        ("0944-000-111", True),
        ("(011) 555 1234", True),
        ("12345", False),
        ("+1234567890123456", False),
        ("", False),
        (None, False),
    ],
)
def test_validate_phone_number(phone, valid):
    assert validate_phone_number(phone) is valid


def test_normalize_phone_for_link():
    assert normalize_phone_for_link("+963 944 000 111") == "963944000111"
    assert normalize_phone_for_link("0944000111") == "944000111"
    assert normalize_phone_for_link("963944000111") == "963944000111"


def test_links_carry_encoded_message():
    links = build_whatsapp_links("+963944000111", "Hello & welcome\nTotal: 90 SYP")

    assert links.app_url.startswith("whatsapp://send?phone=963944000111&text=")
    assert links.web_url.startswith("https://wa.me/963944000111?text=")
    assert "\n" not in links.app_url
    assert "&welcome" not in links.web_url
    assert unquote(links.web_url.split("text=", 1)[1]) == "Hello & welcome\nTotal: 90 SYP"


def test_format_amount():
    assert format_amount(Decimal("90.00"), "SYP") == "90 SYP"
    assert format_amount(Decimal("1234567"), "SYP") == "1,234,567 SYP"
    assert format_amount("12.5", "USD") == "12.50 USD"
    assert format_amount(3) == "3"


def test_render_message_sections():
    message = render_order_message(
        restaurant_name="Al Sham Kitchen",
        branch_name="Mezzeh",
        order_mode="Delivery",
        customer={"name": "Rami", "phone": "+963955000222", "delivery_address": "Baghdad St 12"},
        lines=[
            MessageLine("Hummus", 2, Decimal("45")),
            MessageLine("Falafel", 1, Decimal("12.50"), notes="extra tahini"),
        ],
        subtotal=Decimal("102.50"),
        delivery_fee=Decimal("5000"),
        total=Decimal("5102.50"),
        currency="SYP",
        order_notes="Ring twice",
    )
    lines = message.split("\n")

    assert lines[0] == "New order from the digital menu"
    assert lines[1] == "Restaurant: Al Sham Kitchen | Branch: Mezzeh"
    assert "Order type: Delivery" in lines
    assert "Address: Baghdad St 12" in lines
    assert "- Hummus x2 = 90 SYP (@ 45 SYP)" in lines
    assert "  Note: extra tahini" in lines
    assert "Delivery fee: 5,000 SYP" in lines
    assert "Total: 5,102.50 SYP" in lines
    assert "Payment method: Cash on delivery" in lines
    assert lines[-1] == "Order notes: Ring twice"
    assert not any(line.startswith("Discount") for line in lines)


def test_preferred_time_follows_payment_method():
    message = render_order_message(
        restaurant_name="Al Sham Kitchen",
        order_mode="Takeaway",
        lines=[MessageLine("Hummus", 1, Decimal("45"))],
        subtotal=Decimal("45"),
        total=Decimal("45"),
        currency="SYP",
        payment_method="Card",
        preferred_time="19:30",
        order_notes="No onions",
    )
    lines = message.split("\n")

    assert lines[-3:] == ["Payment method: Card", "Preferred time: 19:30", "Order notes: No onions"]

    without = render_order_message(
        restaurant_name="Al Sham Kitchen",
        order_mode="Takeaway",
        lines=[MessageLine("Hummus", 1, Decimal("45"))],
        subtotal=Decimal("45"),
        total=Decimal("45"),
    )
    assert "Preferred time" not in without
