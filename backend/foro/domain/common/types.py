"""Common domain types."""
import time


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds (the store's timestamp unit)."""
    return int(time.time() * 1000)
