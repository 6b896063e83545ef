"""Human-readable order numbers: ``ORD-<8 timestamp digits>-<8 hex chars>``."""

import time
from uuid import uuid4


def generate_order_number(now_ms: int | None = None) -> str:
    millis = int(time.time() * 1000) if now_ms is None else now_ms
    return f"ORD-{str(millis)[-8:]}-{uuid4().hex[:8].upper()}"
