import random
import string
import time

_ALPHABET = string.ascii_lowercase + string.digits

def _random_suffix(length: int = 7) -> str:
    return "".join(random.choice(_ALPHABET) for _ in range(length))

def generate_bill_id() -> str:
    """bill_<epoch millis>_<7 random base36 chars>"""
    return f"bill_{int(time.time() * 1000)}_{_random_suffix()}"

def generate_subscription_id() -> str:
    """sub_<epoch millis>_<7 random base36 chars>"""
    return f"sub_{int(time.time() * 1000)}_{_random_suffix()}"

def generate_trace_id() -> str:
    return f"trace_{int(time.time() * 1000)}_{_random_suffix(10)}"
