from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from common.enums import ActiveStatus, Currency
from core.models import BaseModel


class PlanQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=ActiveStatus.ACTIVE)


class Plan(BaseModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))],
        help_text="Plan price in local currency",
    )
    price_usd = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(Decimal('0'))],
    )
    renewal_period_days = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    subscription_price_local = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(Decimal('0'))],
    )
    subscription_price_usd = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(Decimal('0'))],
    )
    status = models.CharField(max_length=20, choices=ActiveStatus.choices, default=ActiveStatus.ACTIVE)
    features = models.JSONField(default=list, blank=True)

    objects = PlanQuerySet.as_manager()

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def is_active(self):
        return self.status == ActiveStatus.ACTIVE

    def price_in(self, currency):
        return self.price_usd if currency == Currency.USD else self.price

    def subscription_price_in(self, currency):
        return self.subscription_price_usd if currency == Currency.USD else self.subscription_price_local

    def total_price(self, currency):
        """Registration price: plan price plus subscription fee."""
        return self.price_in(currency) + self.subscription_price_in(currency)

    def renewal_price(self, currency):
        return self.price_in(currency)
