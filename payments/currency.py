"""Currency arithmetic shared by the payment allocator and reporting.

Exchange rates are always expressed as local currency units per 1 USD:
usd -> local multiplies by the rate, local -> usd divides by it.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.conf import settings

from common.enums import Currency, PaymentMethodType

CENT = Decimal('0.01')
AMOUNT_PLACES = 2
RATE_PLACES = 6

METHOD_CURRENCIES = {
    PaymentMethodType.CASH_USD: Currency.USD,
    PaymentMethodType.CARD_USD: Currency.USD,
    PaymentMethodType.TRANSFER_USD: Currency.USD,
    PaymentMethodType.CASH_LOCAL: Currency.LOCAL,
    PaymentMethodType.CARD_LOCAL: Currency.LOCAL,
    PaymentMethodType.TRANSFER_LOCAL: Currency.LOCAL,
}


def to_decimal(value) -> Decimal:
    """Coerce user input into a Decimal without passing through float."""
    if isinstance(value, Decimal):
        result = value
    elif value is None or isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def to_rate(value) -> Decimal | None:
    """Parse an optional exchange rate; blank means no rate supplied."""
    if value is None or value == '':
        return None
    rate = to_decimal(value)
    if rate <= 0:
        raise ValueError("Exchange rate must be greater than zero")
    return rate


def quantize(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def currency_for_method(method, explicit=None):
    """Currency implied by a method's suffix, else the explicit one (crypto/other)."""
    derived = METHOD_CURRENCIES.get(method)
    if derived is not None:
        return derived
    if Currency.has_value(explicit):
        return Currency(explicit)
    return None


def convert(amount: Decimal, from_currency, to_currency, rate: Decimal) -> Decimal:
    if from_currency == to_currency:
        return amount
    if rate is None or rate <= 0:
        raise ValueError("A positive exchange rate is required to convert between currencies")
    if from_currency == Currency.USD and to_currency == Currency.LOCAL:
        return amount * rate
    if from_currency == Currency.LOCAL and to_currency == Currency.USD:
        return amount / rate
    raise ValueError(f"Unsupported conversion {from_currency} -> {to_currency}")


def amount_tolerance() -> Decimal:
    return to_decimal(getattr(settings, 'PAYMENT_AMOUNT_TOLERANCE', '0.01'))


def amounts_match(expected: Decimal, computed: Decimal, tolerance: Decimal | None = None) -> bool:
    if tolerance is None:
        tolerance = amount_tolerance()
    return abs(expected - computed) <= tolerance


def decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    return -exponent if exponent < 0 else 0
