"""
Service layer for marketplace statistics.

``AnalyticsService.dashboard`` computes every figure shown on the
administrator dashboard from full scans of ``pet:*`` and ``user:*``.
Nothing is cached; each call reflects the store at scan time.  The
scans are not a snapshot, so a listing mutated mid-scan may be counted
in either state.

Listing prices are free-form client input.  ``parse_price`` reads them
leniently: numbers are used as they are, strings contribute their
leading decimal number (``"120 ZAR"`` counts as 120) and anything else
counts as 0.
"""

from __future__ import annotations

import calendar
import logging
import re
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Optional

from pet_market_api.app.core import kv_store
from pet_market_api.app.core.auth import ROLE_ADMIN, profile_key, require_role
from pet_market_api.app.core.errors import InternalError
from pet_market_api.app.core.timeutils import OLDEST, parse_timestamp, utc_now
from pet_market_api.app.services.listing_service import (
    PET_PREFIX,
    STATUS_ACTIVE,
    STATUS_PENDING,
    STATUS_SOLD,
    sort_newest_first,
)

logger = logging.getLogger(__name__)

USER_PREFIX = "user:"
UNKNOWN = "Unknown"
MONTHS_WINDOW = 6
RECENT_LIMIT = 10
TOP_CATEGORIES_LIMIT = 5

_LEADING_NUMBER = re.compile(r"\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")


def parse_price(value: Any) -> float:
    """Return ``value`` as a number, or 0 when it has no numeric reading."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match:
            return float(match.group(0))
    return 0.0


def trailing_months(now: datetime, count: int = MONTHS_WINDOW) -> List[tuple[int, int]]:
    """Return ``(year, month)`` for ``count`` calendar months ending at ``now``, oldest first."""
    months = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    months.reverse()
    return months


def _owner_name(owner_id: Optional[str]) -> str:
    if not owner_id:
        return UNKNOWN
    try:
        owner = kv_store.get(profile_key(owner_id))
    except InternalError:
        return UNKNOWN
    return (owner or {}).get("name") or UNKNOWN


class AnalyticsService:
    """Read-only aggregation over listings and user profiles."""

    @classmethod
    async def dashboard(cls, caller: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Return the administrator dashboard payload.

        Raises ``ForbiddenError`` unless ``caller`` is an admin.
        """
        require_role(caller, ROLE_ADMIN)

        pets = kv_store.get_by_prefix(PET_PREFIX)
        total_users = len(kv_store.scan_prefix(USER_PREFIX))

        status_counts = Counter(p.get("status") for p in pets)
        sold = [p for p in pets if p.get("status") == STATUS_SOLD]
        sold_count = len(sold)
        total_revenue = sum(parse_price(p.get("price")) for p in sold)

        category_stats: Dict[str, int] = {}
        for pet in pets:
            category = pet.get("category") or UNKNOWN
            category_stats[category] = category_stats.get(category, 0) + 1

        top_categories = sorted(category_stats.items(), key=lambda item: item[1], reverse=True)

        recent = [
            {**pet, "ownerName": _owner_name(pet.get("ownerId"))}
            for pet in sort_newest_first(pets)[:RECENT_LIMIT]
        ]

        logger.debug("Computed analytics over %d listings and %d users", len(pets), total_users)
        return {
            "stats": {
                "totalListings": len(pets),
                "activeListings": status_counts[STATUS_ACTIVE],
                "soldListings": sold_count,
                "pendingListings": status_counts[STATUS_PENDING],
                "totalUsers": total_users,
                "totalRevenue": total_revenue,
                "averagePrice": total_revenue / sold_count if sold_count else 0,
            },
            "categoryStats": category_stats,
            "monthlyData": cls.monthly_data(pets),
            "recentPets": recent,
            "topCategories": [
                {"category": category, "count": count}
                for category, count in top_categories[:TOP_CATEGORIES_LIMIT]
            ],
        }

    @classmethod
    def monthly_data(cls, pets: List[Dict[str, Any]], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Bucket listings into the trailing calendar months by ``createdAt``.

        Every month of the window is present, empty months included.
        ``sales`` and ``revenue`` cover the sold listings created in
        that month.
        """
        buckets: Dict[tuple[int, int], List[Dict[str, Any]]] = {
            ym: [] for ym in trailing_months(now or utc_now())
        }
        for pet in pets:
            created = parse_timestamp(pet.get("createdAt"))
            if created == OLDEST:
                continue
            bucket = buckets.get((created.year, created.month))
            if bucket is not None:
                bucket.append(pet)

        monthly = []
        for (year, month), month_pets in buckets.items():
            sold = [p for p in month_pets if p.get("status") == STATUS_SOLD]
            monthly.append(
                {
                    "month": calendar.month_abbr[month],
                    "year": year,
                    "listings": len(month_pets),
                    "sales": len(sold),
                    "revenue": sum(parse_price(p.get("price")) for p in sold),
                }
            )
        return monthly
