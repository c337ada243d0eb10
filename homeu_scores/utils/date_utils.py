"""Date manipulation utilities"""

import re
import time
from datetime import date
from typing import List, Tuple

_MONTH_PATTERN = re.compile(r"(\d{4})-(\d{2})")


def parse_month(value: str) -> Tuple[int, int]:
    """Parse "YYYY-MM" into (year, month); raises ValueError if malformed"""
    match = _MONTH_PATTERN.fullmatch(value or "")
    if not match:
        raise ValueError(f"expected YYYY-MM, got {value!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if month < 1 or month > 12:
        raise ValueError(f"month must be between 01 and 12, got {value!r}")
    return year, month


def shift_month(value: str, offset: int) -> str:
    """Move a "YYYY-MM" month forward by offset months"""
    year, month = parse_month(value)
    total = year * 12 + (month - 1) + offset
    return f"{total // 12}-{total % 12 + 1:02d}"


def month_range(start: str, count: int) -> List[str]:
    """Generate count consecutive months starting at start (inclusive)"""
    return [shift_month(start, i) for i in range(count)]


def months_until(current_month: int, target_month: int) -> int:
    """Calendar months from current_month forward to target_month (0-11)"""
    return (target_month - current_month) % 12


def now_epoch_ms() -> int:
    return int(time.time() * 1000)


def current_year() -> int:
    return date.today().year
