"""Record identifiers: millisecond clock plus random entropy, base36 encoded."""

import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Generate a record ID unique within one studio store.

    Time-prefixed so IDs sort roughly by creation. No cross-process
    guarantee - there is exactly one writer per store.
    """
    millis = int(time.time() * 1000)
    entropy = secrets.randbits(52)
    return _base36(millis) + _base36(entropy).rjust(11, "0")
