from __future__ import annotations
import random
import time

DEFAULT_PREFIX = "INV"


def new_invoice_number(prefix: str = DEFAULT_PREFIX) -> str:
    """
    Cosmetic invoice number: <prefix>-<6 digits of epoch ms>-<3 random digits>.
    Not guaranteed unique, safe to call every time a blank form is shown.
    """
    stamp = str(int(time.time() * 1000))[-6:]
    suffix = random.randint(0, 999)
    return f"{prefix}-{stamp}-{suffix:03d}"
