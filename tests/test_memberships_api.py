# tests/test_memberships_api.py
from datetime import timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone

from clients.models import Client
from common.enums import MembershipStatus
from memberships.models import Membership, MembershipRenewal
from payments.models import Payment
from tests.factories import ClientFactory, MembershipFactory, PathologyFactory, PlanFactory


@pytest.fixture
def plan():
    return PlanFactory(renewal_period_days=30, price=Decimal('100.00'), subscription_price_local=Decimal('20.00'),
                       price_usd=Decimal('25.00'), subscription_price_usd=Decimal('5.00'))


class TestQuickRegister:
    def test_quick_register(self, api_client, staff_user, plan):
        client = ClientFactory()
        response = api_client.post(reverse('memberships-quick-register'), {
            "client": client.id,
            "plan": plan.id,
            "currency": "usd",
            "exchange_rate": "40",
            "payment_methods": [
                {"method": "cash_usd", "amount": "20.00"},
                {"method": "transfer_local", "amount": "400.00", "reference": "BNK-1"},
            ],
        }, format='json')
        assert response.status_code == 201, response.data
        membership = Membership.objects.get(client=client)
        assert membership.registered_by == staff_user
        assert response.data["amount_paid"] == "30.00"
        assert response.data["end_date"] == (timezone.localdate() + timedelta(days=30)).isoformat()
        assert len(response.data["payments"]) == 1
        assert len(response.data["payments"][0]["methods"]) == 2

    def test_quick_register_amount_mismatch(self, api_client, plan):
        client = ClientFactory()
        response = api_client.post(reverse('memberships-quick-register'), {
            "client": client.id,
            "plan": plan.id,
            "currency": "local",
            "payment_methods": [{"method": "cash_local", "amount": "100.00"}],
        }, format='json')
        assert response.status_code == 400
        assert "payment_methods" in response.data["errors"]
        assert not Membership.objects.filter(client=client).exists()
        assert Payment.objects.count() == 0

    def test_quick_register_missing_rate(self, api_client, plan):
        response = api_client.post(reverse('memberships-quick-register'), {
            "client": ClientFactory().id,
            "plan": plan.id,
            "currency": "local",
            "payment_methods": [{"method": "cash_usd", "amount": "3.00"}],
        }, format='json')
        assert response.status_code == 400
        assert "#1" in response.data["errors"]["payment_methods"][0]

    def test_quick_register_requires_methods(self, api_client, plan):
        response = api_client.post(reverse('memberships-quick-register'), {
            "client": ClientFactory().id, "plan": plan.id, "currency": "local", "payment_methods": [],
        }, format='json')
        assert response.status_code == 400
        assert "payment_methods" in response.data["errors"]

    def test_post_to_collection_registers(self, api_client, plan):
        response = api_client.post(reverse('memberships-list'), {
            "client": ClientFactory().id, "plan": plan.id, "currency": "local",
            "payment_methods": [{"method": "card_local", "amount": "120.00"}],
        }, format='json')
        assert response.status_code == 201


    def test_quick_register_with_new_client(self, api_client, plan):
        pathology = PathologyFactory()
        response = api_client.post(reverse('memberships-quick-register'), {
            "new_client": {
                "name": "Walk-in Member",
                "email": "walkin@example.com",
                "pathologies": [{"pathology": pathology.id, "notes": "left knee"}],
            },
            "plan": plan.id,
            "currency": "local",
            "payment_methods": [{"method": "cash_local", "amount": "120.00"}],
        }, format='json')
        assert response.status_code == 201, response.data
        client = Client.objects.get(email="walkin@example.com")
        assert response.data["client"]["id"] == client.id
        assert client.client_pathologies.get().notes == "left knee"

    def test_quick_register_new_client_rolled_back_on_payment_error(self, api_client, plan):
        response = api_client.post(reverse('memberships-quick-register'), {
            "new_client": {"name": "Walk-in Member", "email": "walkin@example.com"},
            "plan": plan.id,
            "currency": "local",
            "payment_methods": [{"method": "cash_local", "amount": "20.00"}],
        }, format='json')
        assert response.status_code == 400
        assert not Client.objects.filter(email="walkin@example.com").exists()
        assert Membership.objects.count() == 0

    def test_quick_register_rejects_client_and_new_client(self, api_client, plan):
        response = api_client.post(reverse('memberships-quick-register'), {
            "client": ClientFactory().id,
            "new_client": {"name": "Someone Else"},
            "plan": plan.id,
            "currency": "local",
            "payment_methods": [{"method": "cash_local", "amount": "120.00"}],
        }, format='json')
        assert response.status_code == 400
        assert "client" in response.data["errors"]
        assert not Client.objects.filter(name="Someone Else").exists()


class TestQuickRenew:
    def test_renewal_info(self, api_client, plan):
        today = timezone.localdate()
        membership = MembershipFactory(plan=plan, start_date=today - timedelta(days=35),
                                       end_date=today - timedelta(days=5))
        response = api_client.get(reverse('memberships-renewal-info', args=[membership.id]),
                                  {"as_of": today.isoformat()})
        assert response.status_code == 200
        assert response.data["is_expired"] is True
        assert response.data["calculation_basis"] == "from today"
        assert response.data["new_end_date"] == (today + timedelta(days=30)).isoformat()

    def test_quick_renew(self, api_client, staff_user, plan):
        today = timezone.localdate()
        membership = MembershipFactory(plan=plan, start_date=today - timedelta(days=20),
                                       end_date=today + timedelta(days=10))
        response = api_client.post(reverse('memberships-quick-renew', args=[membership.id]), {
            "currency": "local",
            "payment_methods": [{"method": "cash_local", "amount": "100.00"}],
        }, format='json')
        assert response.status_code == 201, response.data
        renewal = MembershipRenewal.objects.get(membership=membership)
        assert renewal.processed_by == staff_user
        assert response.data["new_end_date"] == (today + timedelta(days=40)).isoformat()
        assert response.data["payment"]["payable_kind"] == "membershiprenewal"

        detail = api_client.get(reverse('memberships-detail', args=[membership.id]))
        assert detail.data["effective_end_date"] == (today + timedelta(days=40)).isoformat()
        assert detail.data["sum_local_payments"] == "100.00"

    def test_quick_renew_failure_creates_nothing(self, api_client, plan):
        membership = MembershipFactory(plan=plan)
        response = api_client.post(reverse('memberships-quick-renew', args=[membership.id]), {
            "currency": "local",
            "payment_methods": [{"method": "cash_local", "amount": "99.00"}],
        }, format='json')
        assert response.status_code == 400
        assert MembershipRenewal.objects.count() == 0


    def test_renewal_info_for_another_plan(self, api_client, plan):
        today = timezone.localdate()
        membership = MembershipFactory(plan=plan, start_date=today - timedelta(days=20),
                                       end_date=today + timedelta(days=10))
        quarterly = PlanFactory(renewal_period_days=90)
        response = api_client.get(reverse('memberships-renewal-info', args=[membership.id]),
                                  {"as_of": today.isoformat(), "plan": quarterly.id})
        assert response.status_code == 200
        assert response.data["days_added"] == 90
        assert response.data["new_end_date"] == (today + timedelta(days=100)).isoformat()

    def test_quick_renew_with_selected_plan(self, api_client, plan):
        today = timezone.localdate()
        membership = MembershipFactory(plan=plan, start_date=today - timedelta(days=20),
                                       end_date=today + timedelta(days=10))
        quarterly = PlanFactory(renewal_period_days=90, price=Decimal('250.00'))
        response = api_client.post(reverse('memberships-quick-renew', args=[membership.id]), {
            "plan": quarterly.id,
            "currency": "local",
            "payment_methods": [{"method": "cash_local", "amount": "250.00"}],
        }, format='json')
        assert response.status_code == 201, response.data
        assert response.data["plan"] == quarterly.id
        assert response.data["new_end_date"] == (today + timedelta(days=100)).isoformat()
        membership.refresh_from_db()
        assert membership.plan == plan


class TestMembershipUpdate:
    def test_patch_status(self, api_client, plan):
        membership = MembershipFactory(plan=plan)
        response = api_client.patch(reverse('memberships-detail', args=[membership.id]),
                                    {"status": MembershipStatus.SUSPENDED}, format='json')
        assert response.status_code == 200
        membership.refresh_from_db()
        assert membership.status == MembershipStatus.SUSPENDED

    def test_filter_by_status(self, api_client, plan):
        MembershipFactory(plan=plan, status=MembershipStatus.CANCELLED)
        MembershipFactory(plan=plan)
        response = api_client.get(reverse('memberships-list'), {"status": "cancelled"})
        assert response.data["count"] == 1

    def test_plan_with_memberships_cannot_be_deleted(self, admin_client, plan):
        MembershipFactory(plan=plan)
        response = admin_client.delete(reverse('plans-detail', args=[plan.id]))
        assert response.status_code == 400

    def test_staff_cannot_edit_plans(self, api_client, plan):
        response = api_client.patch(reverse('plans-detail', args=[plan.id]), {"price": "1.00"}, format='json')
        assert response.status_code == 403
