# utils/time.py
from datetime import datetime, timezone
from typing import Union

def utc_ms() -> int:
    return int(datetime.now(tz=timezone.utc).timestamp() * 1000)

def to_ms(value: Union[datetime, int]) -> int:
    """Epoch milliseconds for a datetime (naive values are taken as UTC) or an int passthrough."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected datetime or epoch ms, got {type(value).__name__}")
    return value
