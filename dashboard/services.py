"""Utilities for collecting dashboard metrics."""

from django.core.cache import cache
from django.utils import timezone

from clients.models import Client
from common.timezone_utils import month_bounds
from memberships.models import Membership
from payments.models import Payment
from payments.services.payment_service import totals_by_currency

EXPIRING_LIST_SIZE = 10
RECENT_PAYMENTS_SIZE = 5


def get_membership_summary(as_of):
    """Counts based on the effective end date, renewals included."""
    return {
        "total_clients": Client.objects.count(),
        "active_memberships": Membership.objects.effectively_active(as_of).count(),
        "expiring_soon": Membership.objects.expiring_soon(as_of).count(),
    }


def get_monthly_revenue(as_of):
    """Payments received during the month of ``as_of``, per currency."""
    start, end = month_bounds(as_of)
    return totals_by_currency(Payment.objects.between(start, end))


def get_expiring_memberships(as_of, limit=EXPIRING_LIST_SIZE):
    return list(
        Membership.objects.expiring_soon(as_of)
        .select_related("client", "plan")
        .order_by("effective_end", "id")[:limit]
    )


def get_recent_payments(limit=RECENT_PAYMENTS_SIZE):
    return list(
        Payment.objects.select_related("content_type")
        .prefetch_related("methods")
        .order_by("-payment_date", "-id")[:limit]
    )


def get_dashboard_stats(as_of=None):
    as_of = as_of or timezone.localdate()
    return {
        "as_of": as_of,
        "stats": {
            **get_membership_summary(as_of),
            "monthly_revenue": get_monthly_revenue(as_of),
        },
        "expiring_memberships": get_expiring_memberships(as_of),
        "recent_payments": get_recent_payments(),
    }


def get_cached_dashboard_stats(timeout: int = 60):
    """Return today's dashboard stats, cached briefly between page loads."""
    as_of = timezone.localdate()
    cache_key = f"dashboard:stats:{as_of.isoformat()}"
    data = cache.get(cache_key)
    if data is None:
        data = get_dashboard_stats(as_of)
        cache.set(cache_key, data, timeout)
    return data
