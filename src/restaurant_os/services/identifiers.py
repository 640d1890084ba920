import random
import re
import string
import time
from typing import Optional

_BASE36 = string.digits + string.ascii_lowercase
_SLUG_RE = re.compile(r"^[a-z0-9\-]+$")


def _now_ms() -> int:
    return int(time.time() * 1000)


def base36(number: int) -> str:
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def random_base36(length: int) -> str:
    return "".join(random.choices(_BASE36, k=length))


def generate_order_number(now_ms: Optional[int] = None) -> str:
    """Human-readable order number: ORD-<epoch ms>-<5 random base36 chars>."""
    return f"ORD-{now_ms if now_ms is not None else _now_ms()}-{random_base36(5)}"


def generate_cart_id(now_ms: Optional[int] = None) -> str:
    return f"CART-{now_ms if now_ms is not None else _now_ms()}-{random_base36(9)}"


def slugify_restaurant_name(name: str, now_ms: Optional[int] = None) -> str:
    """
    Lowercase name with whitespace runs turned into '-'.
    Names that don't reduce to [a-z0-9-] (Arabic, punctuation) get restaurant-<base36 time>.
    """
    slug = re.sub(r"\s+", "-", name.strip().lower())
    if not _SLUG_RE.match(slug):
        slug = f"restaurant-{base36(now_ms if now_ms is not None else _now_ms())}"
    return slug
