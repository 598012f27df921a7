from django.utils import timezone

from common.enums import RenewalBasis
from common.timezone_utils import add_days, days_between
from memberships.exceptions import InvalidRenewalPeriodError


class RenewalCalculator:
    """Expiration arithmetic for memberships.

    The effective end date is the ``new_end_date`` of the most recently
    created renewal, or the membership's own ``end_date`` when it has never
    been renewed. All values are calendar dates and "today" is resolved once
    per call.
    """

    @staticmethod
    def latest_end_date(end_date, renewals):
        """Fold a creation-ordered renewal sequence; the last entry wins."""
        effective = end_date
        for renewal in renewals:
            effective = renewal.new_end_date
        return effective

    @staticmethod
    def effective_end_date(membership):
        if membership.pk is None:
            return membership.end_date
        latest = (
            membership.renewals.order_by('-created_at', '-id')
            .values_list('new_end_date', flat=True)
            .first()
        )
        return latest or membership.end_date

    @staticmethod
    def is_expired(membership, as_of=None):
        as_of = as_of or timezone.localdate()
        return RenewalCalculator.effective_end_date(membership) < as_of

    @staticmethod
    def renewal_period(plan) -> int:
        period = plan.renewal_period_days
        if isinstance(period, bool) or not isinstance(period, int) or period < 1:
            raise InvalidRenewalPeriodError(period)
        return period

    @staticmethod
    def end_date_from(plan, start_date):
        return add_days(start_date, RenewalCalculator.renewal_period(plan))

    @staticmethod
    def renewal_info(plan, membership, as_of=None) -> dict:
        as_of = as_of or timezone.localdate()
        period = RenewalCalculator.renewal_period(plan)
        effective = RenewalCalculator.effective_end_date(membership)
        expired = effective < as_of

        if expired:
            basis = RenewalBasis.FROM_TODAY
            new_end_date = add_days(as_of, period)
        else:
            basis = RenewalBasis.FROM_EFFECTIVE_END_DATE
            new_end_date = add_days(effective, period)

        return {
            'is_expired': expired,
            'calculation_basis': basis,
            'current_end_date': effective,
            'days_added': period,
            'new_end_date': new_end_date,
            'days_until_expiration': days_between(as_of, effective),
        }
