# app/services/order_number.py
import secrets
import string
import time
from typing import Callable, Optional

ORDER_NUMBER_PREFIX = "TP"
RANDOM_SUFFIX_LENGTH = 4

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding needs a non-negative integer")
    if value == 0:
        return "0"

    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_order_number(
    now_ms: Optional[int] = None,
    choice: Callable[[str], str] = secrets.choice,
) -> str:
    """
    TP-<epoch millis in base36>-<4 random base36 chars>, uppercase.

    No uniqueness check happens here; place_order looks the candidate up
    before using it.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000

    suffix = "".join(choice(BASE36_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
    return f"{ORDER_NUMBER_PREFIX}-{to_base36(now_ms)}-{suffix}"
