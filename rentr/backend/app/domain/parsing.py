# app/domain/parsing.py
from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterable

from .errors import ValidationError


def to_int(x: Any) -> int | None:
    if x is None or x == "":
        return None
    try:
        return int(float(x))
    except Exception:
        return None


def div_round_half_up(numerator: int, denominator: int) -> int:
    """Exact integer division rounded half up (non-negative numerator)."""
    return (2 * numerator + denominator) // (2 * denominator)


def normalize_tag(raw: str) -> str:
    return re.sub(r"\s+", " ", str(raw)).strip().casefold()


def parse_tags(raw: str | Iterable[str] | None) -> frozenset[str]:
    """Accept 'Parking, Gym' or ['parking', 'gym']; blanks are dropped."""
    if raw is None:
        return frozenset()
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return frozenset(t for t in (normalize_tag(i) for i in items) if t)


def parse_date(raw: str | date | None, *, field: str) -> date | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip()[:10])
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD), got {raw!r}")
