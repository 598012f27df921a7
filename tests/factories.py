# tests/factories.py
from datetime import timedelta
from decimal import Decimal

import factory
from django.utils import timezone
from factory.django import DjangoModelFactory

from clients.models import Client, Pathology
from common.enums import ActiveStatus, Currency, MembershipStatus
from documents.models import DocumentTemplate
from memberships.models import Membership, MembershipRenewal
from plans.models import Plan
from users.models import User


class UserFactory(DjangoModelFactory):
    class Meta:
        model = User
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    role = User.Role.STAFF

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        obj.set_password(extracted or 'testpass123')
        if create:
            obj.save(update_fields=['password'])


class PlanFactory(DjangoModelFactory):
    class Meta:
        model = Plan

    name = factory.Sequence(lambda n: f"Plan {n}")
    price = Decimal('100.00')
    price_usd = Decimal('25.00')
    renewal_period_days = 30
    subscription_price_local = Decimal('20.00')
    subscription_price_usd = Decimal('5.00')
    status = ActiveStatus.ACTIVE


class PathologyFactory(DjangoModelFactory):
    class Meta:
        model = Pathology

    name = factory.Sequence(lambda n: f"Pathology {n}")


class ClientFactory(DjangoModelFactory):
    class Meta:
        model = Client

    name = factory.Sequence(lambda n: f"Client {n}")
    email = factory.Sequence(lambda n: f"client{n}@example.com")
    phone = factory.Sequence(lambda n: f"555-{n:04d}")
    identification_number = factory.Sequence(lambda n: f"V{10000000 + n}")


class MembershipFactory(DjangoModelFactory):
    """A membership that started today and runs for the plan's period."""

    class Meta:
        model = Membership

    client = factory.SubFactory(ClientFactory)
    plan = factory.SubFactory(PlanFactory)
    start_date = factory.LazyFunction(timezone.localdate)
    end_date = factory.LazyAttribute(lambda o: o.start_date + timedelta(days=o.plan.renewal_period_days))
    status = MembershipStatus.ACTIVE
    amount_paid = Decimal('120.00')
    currency = Currency.LOCAL
    plan_price_paid = Decimal('100.00')
    subscription_price_paid = Decimal('20.00')


class MembershipRenewalFactory(DjangoModelFactory):
    class Meta:
        model = MembershipRenewal

    membership = factory.SubFactory(MembershipFactory)
    plan = factory.LazyAttribute(lambda o: o.membership.plan)
    previous_end_date = factory.LazyAttribute(lambda o: o.membership.end_date)
    new_end_date = factory.LazyAttribute(lambda o: o.previous_end_date + timedelta(days=30))
    amount_paid = Decimal('100.00')
    currency = Currency.LOCAL


class DocumentTemplateFactory(DjangoModelFactory):
    class Meta:
        model = DocumentTemplate

    name = factory.Sequence(lambda n: f"Template {n}")
    content = "<p>Hello [[CLIENT_NAME]]</p>"
    status = ActiveStatus.ACTIVE
