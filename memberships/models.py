from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.contrib.contenttypes.fields import GenericRelation
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, OuterRef, Q, Subquery, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from common.enums import Currency, MembershipStatus
from core.models import BaseModel
from memberships.services.renewal_calculator import RenewalCalculator


class MembershipQuerySet(models.QuerySet):
    def with_effective_end_date(self):
        """Annotate ``effective_end`` with the latest renewal end date or the nominal one."""
        latest_renewal = (
            MembershipRenewal.objects.filter(membership=OuterRef('pk'))
            .order_by('-created_at', '-id')
            .values('new_end_date')[:1]
        )
        return self.annotate(
            effective_end=Coalesce(
                Subquery(latest_renewal, output_field=models.DateField()),
                F('end_date'),
                output_field=models.DateField(),
            )
        )

    def effectively_active(self, as_of=None):
        as_of = as_of or timezone.localdate()
        return self.with_effective_end_date().filter(
            status=MembershipStatus.ACTIVE, effective_end__gte=as_of,
        )

    def expired(self, as_of=None):
        as_of = as_of or timezone.localdate()
        return self.with_effective_end_date().filter(
            Q(status=MembershipStatus.EXPIRED)
            | Q(status=MembershipStatus.ACTIVE, effective_end__lt=as_of)
        )

    def expiring_soon(self, as_of=None, days=None):
        as_of = as_of or timezone.localdate()
        if days is None:
            days = settings.MEMBERSHIP_EXPIRING_SOON_DAYS
        return self.with_effective_end_date().filter(
            status=MembershipStatus.ACTIVE,
            effective_end__gte=as_of,
            effective_end__lte=as_of + timedelta(days=days),
        )


class Membership(BaseModel):
    client = models.ForeignKey('clients.Client', on_delete=models.CASCADE, related_name='memberships')
    plan = models.ForeignKey('plans.Plan', on_delete=models.PROTECT, related_name='memberships')
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=20, choices=MembershipStatus.choices, default=MembershipStatus.ACTIVE)
    amount_paid = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    currency = models.CharField(max_length=10, choices=Currency.choices, default=Currency.LOCAL)
    plan_price_paid = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    subscription_price_paid = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    registered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='registered_memberships',
    )
    notes = models.TextField(blank=True)
    payments = GenericRelation('payments.Payment', related_query_name='membership')

    objects = MembershipQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__gte=F('start_date')),
                name='membership_end_after_start',
            )
        ]

    def __str__(self):
        return f"{self.client} - {self.plan} ({self.start_date} to {self.end_date})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'End date cannot be before the start date'})

    @property
    def effective_end_date(self):
        annotated = getattr(self, 'effective_end', None)
        if annotated is not None:
            return annotated
        return RenewalCalculator.effective_end_date(self)

    def is_expired(self, as_of=None):
        return RenewalCalculator.is_expired(self, as_of=as_of)

    def days_until_expiration(self, as_of=None):
        as_of = as_of or timezone.localdate()
        return (self.effective_end_date - as_of).days

    def all_payments(self):
        """Registration payments plus the payments of every renewal."""
        from payments.models import Payment

        return Payment.objects.filter(Q(membership=self) | Q(renewal__membership=self)).distinct()

    def sum_payments(self, currency):
        return self.all_payments().filter(currency=currency).aggregate(
            total=Coalesce(Sum('amount'), Decimal('0.00'), output_field=models.DecimalField())
        )['total']

    @property
    def sum_local_payments(self):
        return self.sum_payments(Currency.LOCAL)

    @property
    def sum_usd_payments(self):
        return self.sum_payments(Currency.USD)


class MembershipRenewal(BaseModel):
    """Append-only ledger entry extending a membership's effective end date."""

    membership = models.ForeignKey(Membership, on_delete=models.CASCADE, related_name='renewals')
    plan = models.ForeignKey(
        'plans.Plan', null=True, blank=True, on_delete=models.PROTECT, related_name='renewals',
        help_text="Plan the renewal was sold under; the membership keeps its original plan",
    )
    previous_end_date = models.DateField()
    new_end_date = models.DateField()
    amount_paid = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    currency = models.CharField(max_length=10, choices=Currency.choices, default=Currency.LOCAL)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='processed_renewals',
    )
    notes = models.TextField(blank=True)
    payments = GenericRelation('payments.Payment', related_query_name='renewal')

    class Meta:
        ordering = ['created_at', 'id']
        constraints = [
            models.CheckConstraint(
                condition=Q(new_end_date__gt=F('previous_end_date')),
                name='renewal_extends_end_date',
            )
        ]

    def __str__(self):
        return f"Renewal of membership {self.membership_id}: {self.previous_end_date} -> {self.new_end_date}"

    @property
    def payment(self):
        return self.payments.first()
