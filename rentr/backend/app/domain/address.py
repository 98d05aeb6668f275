# app/domain/address.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import ValidationError
from .parsing import normalize_tag


@dataclass(frozen=True)
class CanonicalAddress:
    address: str
    city: str
    state: str
    zip_code: str


def canonicalize_address(address: str, city: str, state: str, zip_code: str) -> CanonicalAddress:
    # Minimal canonicalization, enough to make the uniqueness key stable
    return CanonicalAddress(
        address=" ".join(address.split()).upper(),
        city=" ".join(city.split()).upper(),
        state=state.strip().upper(),
        zip_code=zip_code.strip().upper(),
    )


def same_place(a: str | None, b: str | None) -> bool:
    """Case/whitespace-insensitive comparison of city or region names."""
    if not a or not b:
        return False
    return normalize_tag(a) == normalize_tag(b)


def require_address_identity(p: dict[str, Any]) -> CanonicalAddress:
    """
    Returns the canonical address or raises ValidationError with a tiny hint.
    """
    address = (p.get("address") or "").strip()
    city = (p.get("city") or "").strip()
    state = (p.get("state") or "").strip()
    zip_code = (p.get("zip_code") or p.get("zipCode") or "").strip()

    if not (address and city and state and zip_code):
        hint = {
            "address": bool(address),
            "city": bool(city),
            "state": bool(state),
            "zipCode": bool(zip_code),
        }
        raise ValidationError(f"Missing required address fields for property. hint={hint}")

    return canonicalize_address(address, city, state, zip_code)
