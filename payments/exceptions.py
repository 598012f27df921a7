from django.core.exceptions import ValidationError


class PaymentValidationError(ValidationError):
    """Validation failure raised while allocating a payment.

    Carries a field keyed message so API callers receive
    ``{"payment_methods": [...]}`` and ``code`` identifies the failure.
    """

    code = 'invalid'
    field = 'payment_methods'

    def __init__(self, message, params=None):
        super().__init__({self.field: ValidationError(message, code=self.code, params=params)})


class EmptyPaymentMethodsError(PaymentValidationError):
    code = 'empty_methods'

    def __init__(self):
        super().__init__("At least one payment method is required")


class MissingExchangeRateError(PaymentValidationError):
    code = 'missing_exchange_rate'

    def __init__(self, index, currency, target_currency):
        self.index = index
        super().__init__(
            "Payment method #%(position)s is in %(currency)s but no exchange rate to "
            "%(target_currency)s was provided",
            params={'position': index + 1, 'currency': currency, 'target_currency': target_currency},
        )


class AmountMismatchError(PaymentValidationError):
    code = 'amount_mismatch'

    def __init__(self, expected, computed):
        self.expected = expected
        self.computed = computed
        super().__init__(
            "Payment methods add up to %(computed)s but %(expected)s is due",
            params={'expected': expected, 'computed': computed},
        )


class InvalidPaymentEntryError(PaymentValidationError):
    code = 'invalid_entry'

    def __init__(self, index, reason):
        self.index = index
        super().__init__(
            "Payment method #%(position)s is invalid: %(reason)s",
            params={'position': index + 1, 'reason': reason},
        )


class InvalidExchangeRateError(PaymentValidationError):
    code = 'invalid_exchange_rate'
    field = 'exchange_rate'

    def __init__(self, reason):
        super().__init__("%(reason)s", params={'reason': reason})


class ConsistencyError(Exception):
    """Integrity fault in persisted payment data; indicates a bug, not bad input."""


class DanglingPayableError(ConsistencyError):
    pass
