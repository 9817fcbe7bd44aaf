import secrets
import time
from datetime import datetime, timedelta

from app.core.config import settings

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def walker_code(user_id: str) -> str:
    """Reusable walker code: WALKER_<first 8 chars of uid>_<base36 epoch ms>."""
    return f"WALKER_{user_id[:8]}_{to_base36(int(time.time() * 1000))}"


def one_time_code(length: int = 13) -> str:
    """Random upper-case base36 code for one-time affiliation and walk QRs."""
    return "".join(secrets.choice(_BASE36) for _ in range(length)).upper()


def code_expiry(now: datetime = None) -> datetime:
    return (now or datetime.utcnow()) + timedelta(hours=settings.QR_EXPIRY_HOURS)
