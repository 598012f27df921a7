from decimal import Decimal

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey, GenericRelation
from django.contrib.contenttypes.models import ContentType
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from common.enums import Currency, PayableKind, PaymentMethodType
from core.models import BaseModel
from payments import currency as money
from payments.exceptions import DanglingPayableError

PAYABLE_APP_LABEL = 'memberships'
PAYABLE_LIMIT = models.Q(app_label=PAYABLE_APP_LABEL, model__in=PayableKind.values)


class PaymentQuerySet(models.QuerySet):
    def registrations(self):
        return self.filter(content_type__model=PayableKind.MEMBERSHIP)

    def renewals(self):
        return self.filter(content_type__model=PayableKind.RENEWAL)

    def between(self, start_date=None, end_date=None):
        qs = self
        if start_date:
            qs = qs.filter(payment_date__gte=start_date)
        if end_date:
            qs = qs.filter(payment_date__lte=end_date)
        return qs


class Payment(BaseModel):
    """Money received for a membership registration or a renewal.

    ``content_type``/``object_id`` form the payable discriminant; only
    ``memberships.Membership`` and ``memberships.MembershipRenewal`` are
    accepted and the target must exist when the row is saved.
    """

    SPLIT_METHOD = 'split'

    content_type = models.ForeignKey(
        ContentType, on_delete=models.PROTECT, limit_choices_to=PAYABLE_LIMIT,
    )
    object_id = models.PositiveBigIntegerField()
    payable = GenericForeignKey('content_type', 'object_id')

    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    currency = models.CharField(max_length=10, choices=Currency.choices, default=Currency.LOCAL)
    exchange_rate = models.DecimalField(
        max_digits=18, decimal_places=6, default=Decimal('1'),
        help_text="Local currency units per 1 USD",
    )
    selected_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    selected_currency = models.CharField(max_length=10, choices=Currency.choices, blank=True)
    payment_date = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=20, blank=True)
    reference = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    registered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='registered_payments',
    )
    evidences = GenericRelation('attachments.Attachment', related_query_name='payment')

    objects = PaymentQuerySet.as_manager()

    class Meta:
        ordering = ['-payment_date', '-id']
        indexes = [
            models.Index(fields=['content_type', 'object_id'], name='payments_pa_content_7f1c2e_idx'),
            models.Index(fields=['payment_date'], name='payments_pa_payment_3b9d41_idx'),
        ]

    def __str__(self):
        return f"Payment {self.id} {self.amount} {self.currency}"

    @property
    def payable_kind(self):
        if self.content_type_id is None:
            return None
        return PayableKind(self.content_type.model)

    def ensure_payable(self):
        """Raise DanglingPayableError unless the payable link is well formed."""
        if self.content_type_id is None or self.object_id is None:
            raise DanglingPayableError(f"Payment {self.pk} has no payable target")
        content_type = self.content_type
        if content_type.app_label != PAYABLE_APP_LABEL or content_type.model not in PayableKind.values:
            raise DanglingPayableError(
                f"Payment {self.pk} points at unsupported type {content_type.app_label}.{content_type.model}"
            )
        if self.payable is None:
            raise DanglingPayableError(
                f"Payment {self.pk} points at missing {content_type.model} {self.object_id}"
            )
        return self.payable

    def save(self, *args, **kwargs):
        self.ensure_payable()
        super().save(*args, **kwargs)

    def resolve_membership(self):
        """Membership this payment ultimately belongs to."""
        payable = self.ensure_payable()
        if self.payable_kind == PayableKind.RENEWAL:
            return payable.membership
        return payable

    def methods_total(self):
        """Sum of the method rows normalized into the payment currency."""
        total = Decimal('0')
        for method in self.methods.all():
            total += method.normalized_amount(self.currency, self.exchange_rate)
        return total

    def is_balanced(self):
        return money.amounts_match(self.amount, self.methods_total())


class PaymentMethod(models.Model):
    payment = models.ForeignKey(Payment, on_delete=models.CASCADE, related_name='methods')
    method = models.CharField(max_length=20, choices=PaymentMethodType.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=10, choices=Currency.choices)
    exchange_rate = models.DecimalField(
        max_digits=18, decimal_places=6, null=True, blank=True,
        help_text="Local currency units per 1 USD, set when the method currency differs from the payment",
    )
    reference = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    position = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['position', 'id']

    def __str__(self):
        return f"{self.get_method_display()} {self.amount}"

    def normalized_amount(self, target_currency, fallback_rate=None):
        rate = self.exchange_rate or fallback_rate
        return money.convert(self.amount, self.currency, target_currency, rate)
