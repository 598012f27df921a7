import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from common.enums import Currency, PaymentMethodType
from payments import currency as money
from payments.exceptions import (
    AmountMismatchError,
    EmptyPaymentMethodsError,
    InvalidExchangeRateError,
    InvalidPaymentEntryError,
    MissingExchangeRateError,
)
from payments.models import Payment, PaymentMethod

logger = logging.getLogger(__name__)


class PaymentAllocator:
    """Reconcile split, multi-currency payment entries into one Payment.

    Entries are dicts with ``method`` and ``amount`` plus optional
    ``currency`` (required for crypto/other), ``exchange_rate``,
    ``reference`` and ``notes``. An entry's own rate wins over the
    payment-level rate.
    """

    @staticmethod
    def plan(*, target_amount, target_currency, entries, exchange_rate=None) -> dict:
        """Validate entries against the target without touching the database."""
        if not entries:
            raise EmptyPaymentMethodsError()

        if not Currency.has_value(target_currency):
            raise ValidationError({'currency': f'Unsupported currency "{target_currency}"'})
        target_currency = Currency(target_currency)

        try:
            target_amount = money.to_decimal(target_amount)
        except ValueError:
            raise ValidationError({'amount': 'Amount due must be a number'}) from None
        if target_amount < 0 or money.decimal_places(target_amount) > money.AMOUNT_PLACES:
            raise ValidationError({'amount': 'Amount due must be a non-negative value with at most two decimals'})

        try:
            payment_rate = money.to_rate(exchange_rate)
        except ValueError as exc:
            raise InvalidExchangeRateError(str(exc)) from None
        if payment_rate is not None and money.decimal_places(payment_rate) > money.RATE_PLACES:
            raise InvalidExchangeRateError(f"Exchange rate allows at most {money.RATE_PLACES} decimals")

        lines = [
            PaymentAllocator._normalize_entry(index, entry, target_currency, payment_rate)
            for index, entry in enumerate(entries)
        ]
        computed = sum((line['normalized_amount'] for line in lines), Decimal('0'))

        if not money.amounts_match(target_amount, computed):
            raise AmountMismatchError(expected=target_amount, computed=money.quantize(computed))

        return {
            'amount': target_amount,
            'currency': target_currency,
            'exchange_rate': payment_rate,
            'computed_total': computed,
            'lines': lines,
        }

    @staticmethod
    def _normalize_entry(index, entry, target_currency, payment_rate):
        method = entry.get('method')
        if not PaymentMethodType.has_value(method):
            raise InvalidPaymentEntryError(index, f'unknown method "{method}"')

        try:
            amount = money.to_decimal(entry.get('amount'))
        except ValueError:
            raise InvalidPaymentEntryError(index, 'amount must be a number') from None
        if amount <= 0:
            raise InvalidPaymentEntryError(index, 'amount must be greater than zero')
        if money.decimal_places(amount) > money.AMOUNT_PLACES:
            raise InvalidPaymentEntryError(index, 'amount allows at most two decimals')

        currency = money.currency_for_method(method, entry.get('currency'))
        if currency is None:
            raise InvalidPaymentEntryError(index, f'a currency is required for {method} payments')

        try:
            entry_rate = money.to_rate(entry.get('exchange_rate'))
        except ValueError as exc:
            raise InvalidPaymentEntryError(index, str(exc)) from None
        if entry_rate is not None and money.decimal_places(entry_rate) > money.RATE_PLACES:
            raise InvalidPaymentEntryError(index, f'exchange rate allows at most {money.RATE_PLACES} decimals')

        applied_rate = None
        if currency == target_currency:
            normalized = amount
        else:
            applied_rate = entry_rate or payment_rate
            if applied_rate is None:
                raise MissingExchangeRateError(index, currency, target_currency)
            normalized = money.convert(amount, currency, target_currency, applied_rate)

        return {
            'position': index,
            'method': PaymentMethodType(method),
            'amount': amount,
            'currency': currency,
            'exchange_rate': applied_rate,
            'normalized_amount': normalized,
            'reference': entry.get('reference') or '',
            'notes': entry.get('notes') or '',
        }

    @staticmethod
    @transaction.atomic
    def persist(allocation, *, payable, payment_date=None, reference='', notes='',
                registered_by=None, selected_price=None, selected_currency=None) -> Payment:
        """Write a planned allocation as one Payment plus its method rows."""
        lines = allocation['lines']
        if selected_price is None:
            selected_price = allocation['amount']
        else:
            try:
                selected_price = money.quantize(money.to_decimal(selected_price))
            except ValueError:
                raise ValidationError({'selected_price': 'Selected price must be a number'}) from None
        payment = Payment.objects.create(
            payable=payable,
            amount=allocation['amount'],
            currency=allocation['currency'],
            exchange_rate=allocation['exchange_rate'] or Decimal('1'),
            selected_price=selected_price,
            selected_currency=selected_currency or allocation['currency'],
            payment_date=payment_date or timezone.localdate(),
            payment_method=lines[0]['method'] if len(lines) == 1 else Payment.SPLIT_METHOD,
            reference=reference or '',
            notes=notes or '',
            registered_by=registered_by,
        )
        PaymentMethod.objects.bulk_create([
            PaymentMethod(
                payment=payment,
                method=line['method'],
                amount=line['amount'],
                currency=line['currency'],
                exchange_rate=line['exchange_rate'],
                reference=line['reference'],
                notes=line['notes'],
                position=line['position'],
            )
            for line in lines
        ])
        logger.info(
            "Payment %s recorded", payment.id,
            extra={
                'payment_id': payment.id,
                'payable_type': payment.content_type.model,
                'payable_id': payment.object_id,
                'amount': str(payment.amount),
                'currency': payment.currency,
                'methods': len(lines),
            },
        )
        return payment

    @staticmethod
    @transaction.atomic
    def allocate(*, target_amount, target_currency, entries, payable, exchange_rate=None, **payment_fields) -> Payment:
        allocation = PaymentAllocator.plan(
            target_amount=target_amount,
            target_currency=target_currency,
            entries=entries,
            exchange_rate=exchange_rate,
        )
        return PaymentAllocator.persist(allocation, payable=payable, **payment_fields)
