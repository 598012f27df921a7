from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from clients.models import Client
from common.enums import ActiveStatus, Currency, MembershipStatus, PayableKind
from memberships.models import Membership, MembershipRenewal
from memberships.services.membership_service import MembershipService
from payments.exceptions import AmountMismatchError, MissingExchangeRateError
from payments.models import Payment, PaymentMethod
from tests.factories import ClientFactory, MembershipFactory, PlanFactory, UserFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def plan():
    return PlanFactory(
        renewal_period_days=30,
        price=Decimal('100.00'),
        price_usd=Decimal('25.00'),
        subscription_price_local=Decimal('20.00'),
        subscription_price_usd=Decimal('5.00'),
    )


class TestRegister:
    def test_register_creates_membership_and_payment(self, plan, today):
        client = ClientFactory()
        user = UserFactory()
        membership = MembershipService.register(
            client=client,
            plan=plan,
            currency=Currency.USD,
            exchange_rate='40',
            payment_methods=[
                {'method': 'cash_usd', 'amount': '10.00'},
                {'method': 'cash_local', 'amount': '800.00'},
            ],
            registered_by=user,
        )

        assert membership.start_date == today
        assert membership.end_date == today + timedelta(days=30)
        assert membership.amount_paid == Decimal('30.00')
        assert membership.plan_price_paid == Decimal('25.00')
        assert membership.subscription_price_paid == Decimal('5.00')
        assert membership.registered_by == user

        payment = membership.payments.get()
        assert payment.payable_kind == PayableKind.MEMBERSHIP
        assert payment.amount == Decimal('30.00')
        assert payment.currency == Currency.USD
        assert payment.payment_method == Payment.SPLIT_METHOD
        assert [m.method for m in payment.methods.all()] == ['cash_usd', 'cash_local']
        assert payment.is_balanced()

    def test_register_with_custom_start_date(self, plan, today):
        start = today - timedelta(days=3)
        membership = MembershipService.register(
            client=ClientFactory(), plan=plan, currency=Currency.LOCAL, start_date=start,
            payment_methods=[{'method': 'card_local', 'amount': '120.00'}],
        )
        assert membership.end_date == start + timedelta(days=30)
        assert membership.payments.get().payment_method == 'card_local'

    def test_failed_payment_leaves_no_rows(self, plan):
        client = ClientFactory()
        with pytest.raises(AmountMismatchError):
            MembershipService.register(
                client=client, plan=plan, currency=Currency.LOCAL,
                payment_methods=[{'method': 'cash_local', 'amount': '50.00'}],
            )
        assert not Membership.objects.filter(client=client).exists()
        assert Payment.objects.count() == 0
        assert PaymentMethod.objects.count() == 0

    def test_rejects_inactive_plan(self):
        plan = PlanFactory(status=ActiveStatus.INACTIVE)
        with pytest.raises(ValidationError) as excinfo:
            MembershipService.register(
                client=ClientFactory(), plan=plan, currency=Currency.LOCAL,
                payment_methods=[{'method': 'cash_local', 'amount': '120.00'}],
            )
        assert 'plan' in excinfo.value.message_dict

    def test_rejects_client_with_active_membership(self, plan):
        existing = MembershipFactory(plan=plan)
        with pytest.raises(ValidationError) as excinfo:
            MembershipService.register(
                client=existing.client, plan=plan, currency=Currency.LOCAL,
                payment_methods=[{'method': 'cash_local', 'amount': '120.00'}],
            )
        assert 'client' in excinfo.value.message_dict
        assert Membership.objects.filter(client=existing.client).count() == 1

    def test_rejects_unknown_currency(self, plan):
        with pytest.raises(ValidationError) as excinfo:
            MembershipService.register(
                client=ClientFactory(), plan=plan, currency='eur',
                payment_methods=[{'method': 'cash_local', 'amount': '120.00'}],
            )
        assert 'currency' in excinfo.value.message_dict


    def test_register_creates_client_inline(self, plan):
        membership = MembershipService.register(
            new_client={'name': 'Walk-in Member', 'phone': '555-0101'},
            plan=plan, currency=Currency.LOCAL,
            payment_methods=[{'method': 'cash_local', 'amount': '120.00'}],
        )
        client = Client.objects.get(name='Walk-in Member')
        assert membership.client == client
        assert client.phone == '555-0101'

    def test_failed_payment_rolls_back_inline_client(self, plan):
        with pytest.raises(AmountMismatchError):
            MembershipService.register(
                new_client={'name': 'Walk-in Member'},
                plan=plan, currency=Currency.LOCAL,
                payment_methods=[{'method': 'cash_local', 'amount': '10.00'}],
            )
        assert not Client.objects.filter(name='Walk-in Member').exists()
        assert Membership.objects.count() == 0
        assert Payment.objects.count() == 0

    def test_register_requires_a_client(self, plan):
        with pytest.raises(ValidationError) as excinfo:
            MembershipService.register(
                plan=plan, currency=Currency.LOCAL,
                payment_methods=[{'method': 'cash_local', 'amount': '120.00'}],
            )
        assert 'client' in excinfo.value.message_dict


class TestRenew:
    def test_renew_active_membership_extends_from_end_date(self, plan, today):
        membership = MembershipFactory(plan=plan, start_date=today - timedelta(days=20),
                                       end_date=today + timedelta(days=10))
        user = UserFactory()
        renewal = MembershipService.renew(
            membership=membership,
            currency=Currency.LOCAL,
            payment_methods=[{'method': 'transfer_local', 'amount': '100.00', 'reference': 'TX-1'}],
            processed_by=user,
            as_of=today,
        )

        assert renewal.previous_end_date == today + timedelta(days=10)
        assert renewal.new_end_date == today + timedelta(days=40)
        assert renewal.amount_paid == Decimal('100.00')
        assert renewal.processed_by == user
        payment = renewal.payment
        assert payment.payable_kind == PayableKind.RENEWAL
        assert payment.resolve_membership() == membership
        assert payment.methods.get().reference == 'TX-1'
        membership.refresh_from_db()
        assert membership.effective_end_date == today + timedelta(days=40)
        assert membership.end_date == today + timedelta(days=10)

    def test_renew_expired_membership_starts_today_and_reactivates(self, plan, today):
        membership = MembershipFactory(plan=plan, start_date=today - timedelta(days=40),
                                       end_date=today - timedelta(days=10), status=MembershipStatus.EXPIRED)
        renewal = MembershipService.renew(
            membership=membership, currency=Currency.USD,
            payment_methods=[{'method': 'card_usd', 'amount': '25.00'}],
            as_of=today,
        )
        assert renewal.previous_end_date == today - timedelta(days=10)
        assert renewal.new_end_date == today + timedelta(days=30)
        membership.refresh_from_db()
        assert membership.status == MembershipStatus.ACTIVE

    def test_chained_renewals(self, plan, today):
        membership = MembershipFactory(plan=plan, start_date=today, end_date=today + timedelta(days=30))
        for _ in range(3):
            MembershipService.renew(
                membership=membership, currency=Currency.LOCAL,
                payment_methods=[{'method': 'cash_local', 'amount': '100.00'}], as_of=today,
            )
        renewals = list(membership.renewals.all())
        assert [r.new_end_date for r in renewals] == [
            today + timedelta(days=60), today + timedelta(days=90), today + timedelta(days=120),
        ]
        for previous, current in zip(renewals, renewals[1:]):
            assert current.previous_end_date == previous.new_end_date
        assert membership.all_payments().count() == 3
        assert membership.sum_local_payments == Decimal('300.00')

    def test_failed_renewal_leaves_no_rows(self, plan, today):
        membership = MembershipFactory(plan=plan)
        with pytest.raises(MissingExchangeRateError) as excinfo:
            MembershipService.renew(
                membership=membership, currency=Currency.LOCAL,
                payment_methods=[
                    {'method': 'cash_local', 'amount': '60.00'},
                    {'method': 'cash_usd', 'amount': '1.00'},
                ],
                as_of=today,
            )
        assert excinfo.value.index == 1
        assert MembershipRenewal.objects.count() == 0
        assert Payment.objects.count() == 0


    def test_renew_under_a_different_plan(self, plan, today):
        membership = MembershipFactory(plan=plan, start_date=today - timedelta(days=20),
                                       end_date=today + timedelta(days=10))
        quarterly = PlanFactory(renewal_period_days=90, price=Decimal('250.00'), price_usd=Decimal('60.00'))
        renewal = MembershipService.renew(
            membership=membership, plan=quarterly, currency=Currency.USD,
            payment_methods=[{'method': 'card_usd', 'amount': '60.00'}],
            as_of=today,
        )
        assert renewal.plan == quarterly
        assert renewal.new_end_date == today + timedelta(days=100)
        assert renewal.amount_paid == Decimal('60.00')
        assert renewal.payment.amount == Decimal('60.00')
        membership.refresh_from_db()
        assert membership.plan == plan
        assert membership.effective_end_date == today + timedelta(days=100)

    def test_renew_defaults_to_membership_plan(self, plan, today):
        membership = MembershipFactory(plan=plan)
        renewal = MembershipService.renew(
            membership=membership, currency=Currency.LOCAL,
            payment_methods=[{'method': 'cash_local', 'amount': '100.00'}],
            as_of=today,
        )
        assert renewal.plan == plan

    def test_renew_rejects_inactive_plan(self, plan, today):
        membership = MembershipFactory(plan=plan)
        retired = PlanFactory(status=ActiveStatus.INACTIVE)
        with pytest.raises(ValidationError) as excinfo:
            MembershipService.renew(
                membership=membership, plan=retired, currency=Currency.LOCAL,
                payment_methods=[{'method': 'cash_local', 'amount': '100.00'}],
                as_of=today,
            )
        assert 'plan' in excinfo.value.message_dict
        assert MembershipRenewal.objects.count() == 0


class TestUpdate:
    def test_update_status_and_notes(self, plan):
        membership = MembershipFactory(plan=plan)
        MembershipService.update(membership, status=MembershipStatus.SUSPENDED, notes='Injury leave')
        membership.refresh_from_db()
        assert membership.status == MembershipStatus.SUSPENDED
        assert membership.notes == 'Injury leave'

    def test_update_rejects_unknown_status(self, plan):
        with pytest.raises(ValidationError):
            MembershipService.update(MembershipFactory(plan=plan), status='frozen')
