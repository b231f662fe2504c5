"""
Utility functions for BillSplit application
"""
from __future__ import annotations
import math
import os
import uuid
from datetime import datetime
from typing import Optional


def new_id() -> str:
    """Generate a fresh entity id"""
    return str(uuid.uuid4())


def now() -> datetime:
    """Current local time, minute precision"""
    return datetime.now().replace(second=0, microsecond=0)


def format_datetime(d: datetime) -> str:
    """Format a datetime for lists and reports"""
    return d.strftime("%b %d, %Y %H:%M")


def format_money(x: float) -> str:
    """Format amount as $0.00"""
    return f"${x:.2f}"


def safe_float(x: str, default: Optional[float] = 0.0) -> Optional[float]:
    """Convert string to float safely, returning default on error"""
    try:
        v = float(x)
    except (TypeError, ValueError):
        return default
    if math.isnan(v) or math.isinf(v):
        return default
    return v


def safe_int(x: str, default: int = 0) -> int:
    """Convert string to int safely, returning default on error"""
    try:
        return int(str(x).strip())
    except (TypeError, ValueError):
        return default


def snap(value: float, lo: float, hi: float, step: float) -> float:
    """Clamp value into [lo, hi] and round it onto the step grid starting at lo"""
    value = min(max(float(value), lo), hi)
    if step <= 0:
        return value
    n = round((value - lo) / step)
    return min(lo + n * step, hi)


def app_dir() -> str:
    """
    Get application data directory: ~/Library/Application Support/BillSplit
    Creates directory if it doesn't exist.
    """
    base = os.path.expanduser("~/Library/Application Support")
    path = os.path.join(base, "BillSplit")
    os.makedirs(path, exist_ok=True)
    return path
