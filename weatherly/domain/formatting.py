"""Display labels for place records.

The label produced here is both what the user sees and the baseline the
coordinator uses to detect manual edits of the search box, so it must stay
deterministic.
"""

from __future__ import annotations

from typing import Optional

from .models import PlaceRecord


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ""


def primary_label(place: PlaceRecord) -> str:
    """First non-empty of name, locality, admin2, admin1, admin3, admin4."""
    for candidate in (
        place.name,
        place.locality,
        place.admin2,
        place.admin1,
        place.admin3,
        place.admin4,
    ):
        cleaned = _clean(candidate)
        if cleaned:
            return cleaned
    return ""


def format_place(place: PlaceRecord) -> str:
    """Format a place as "Primary, Admin1, Country".

    ``admin1`` is skipped when it repeats the primary label.
    """
    primary = primary_label(place)
    admin1 = _clean(place.admin1)
    country = _clean(place.country)

    parts = [primary]
    if admin1 and admin1 != primary:
        parts.append(admin1)
    if country:
        parts.append(country)
    return ", ".join(part for part in parts if part)


def normalize_label(text: Optional[str]) -> str:
    """Normalize text for label comparisons (trimmed, lower-cased)."""
    return (text or "").strip().lower()
