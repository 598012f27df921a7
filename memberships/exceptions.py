from django.core.exceptions import ValidationError


class InvalidRenewalPeriodError(ValidationError):
    code = 'invalid_renewal_period'

    def __init__(self, value):
        self.value = value
        super().__init__({
            'renewal_period_days': ValidationError(
                "Renewal period must be a positive number of days, got %(value)s",
                code=self.code,
                params={'value': value},
            )
        })
