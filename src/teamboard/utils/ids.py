"""Timestamp-derived entity identifiers."""

import threading

from .datetime import now_ms

_lock = threading.Lock()
_last_ms = 0
_seq = 0


def generate_id(prefix: str) -> str:
    """
    Generate an id like "wi-1718031234567".

    Ids made within the same millisecond get a "-N" suffix so they stay
    unique for the life of the process.
    """
    global _last_ms, _seq

    with _lock:
        ms = now_ms()
        if ms == _last_ms:
            _seq += 1
        else:
            _last_ms = ms
            _seq = 0
        seq = _seq

    if seq:
        return f"{prefix}-{ms}-{seq}"
    return f"{prefix}-{ms}"
