# util/functions.py
import hashlib
from decimal import ROUND_HALF_UP, Decimal


def clamp(value: float, lo: float, hi: float) -> float:
    """Min-max a number into [lo, hi]."""
    return min(max(value, lo), hi)


def round_half_up(value: float) -> int:
    """
    - Round to the nearest integer, .5 away from zero.
    - Python's round() is banker's rounding, which would turn 2.5 into 2.
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def job_type_name(job) -> str:
    """Classes map to `module.QualName`; strings pass through unchanged."""
    if isinstance(job, str):
        return job
    return f"{job.__module__}.{job.__qualname__}"


def short_hash(value: str) -> str:
    # Bounds key length only; not used for anything security related.
    return hashlib.blake2b(value.encode("utf-8"), digest_size=8).hexdigest()
