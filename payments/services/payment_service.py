import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Sum

from common.enums import Currency, PayableKind
from payments.models import Payment
from payments.services.allocation_service import PaymentAllocator

logger = logging.getLogger(__name__)


class PaymentService:
    @staticmethod
    @transaction.atomic
    def record_membership_payment(*, membership, amount, currency, payment_methods, exchange_rate=None,
                                  payment_date=None, reference='', notes='', registered_by=None) -> Payment:
        """Record an extra payment (e.g. settling a balance) against a membership."""
        from memberships.models import Membership

        membership = Membership.objects.select_for_update().get(pk=membership.pk)
        payment = PaymentAllocator.allocate(
            target_amount=amount,
            target_currency=currency,
            entries=payment_methods,
            exchange_rate=exchange_rate,
            payable=membership,
            payment_date=payment_date,
            reference=reference,
            notes=notes,
            registered_by=registered_by,
            selected_currency=currency,
        )
        logger.info(
            "Membership payment recorded",
            extra={'membership_id': membership.id, 'payment_id': payment.id},
        )
        return payment

    @staticmethod
    def update_details(payment: Payment, *, reference=None, notes=None, payment_date=None) -> Payment:
        """Administrative correction; amounts and methods stay immutable."""
        fields = []
        if reference is not None:
            payment.reference = reference
            fields.append('reference')
        if notes is not None:
            payment.notes = notes
            fields.append('notes')
        if payment_date is not None:
            payment.payment_date = payment_date
            fields.append('payment_date')
        if not fields:
            raise ValidationError({'detail': 'Only reference, notes and payment_date can be changed'})
        payment.save(update_fields=fields + ['updated_at'])
        return payment


def totals_by_currency(queryset) -> dict:
    totals = {currency: Decimal('0.00') for currency in Currency.values}
    for row in queryset.order_by().values('currency').annotate(total=Sum('amount')):
        totals[row['currency']] = row['total'] or Decimal('0.00')
    return totals


def get_payment_stats(start_date=None, end_date=None) -> dict:
    """Totals split by currency and by what was paid for."""
    payments = Payment.objects.between(start_date, end_date)
    by_kind = {}
    for kind, kind_qs in ((PayableKind.MEMBERSHIP, payments.registrations()),
                          (PayableKind.RENEWAL, payments.renewals())):
        by_kind[kind] = {
            'count': kind_qs.count(),
            'totals': totals_by_currency(kind_qs),
        }
    methods = (
        payments.order_by()
        .values('methods__method', 'methods__currency')
        .annotate(total=Sum('methods__amount'), count=Count('methods__id'))
        .filter(count__gt=0)
    )
    return {
        'start_date': start_date,
        'end_date': end_date,
        'total_payments': payments.count(),
        'totals': totals_by_currency(payments),
        'by_kind': by_kind,
        'by_method': [
            {
                'method': row['methods__method'],
                'currency': row['methods__currency'],
                'count': row['count'],
                'total': row['total'],
            }
            for row in methods
        ],
    }
