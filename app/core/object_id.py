"""Server-side identifiers in the 24-hex ObjectId layout.

An id is 12 bytes: a 4-byte big-endian timestamp in seconds, 5 random bytes
chosen once per process and a 3-byte counter, hex encoded.
"""
import itertools
import os
import re
import threading
import time

OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")

_process_bytes = os.urandom(5)
_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))
_counter_lock = threading.Lock()


def new_object_id() -> str:
    with _counter_lock:
        count = next(_counter) % 0x1000000
    timestamp = int(time.time()).to_bytes(4, "big")
    return (timestamp + _process_bytes + count.to_bytes(3, "big")).hex()


def is_object_id(value) -> bool:
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None
