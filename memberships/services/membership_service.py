import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from clients.models import Client
from clients.services import ClientService
from common.enums import Currency, MembershipStatus
from memberships.models import Membership, MembershipRenewal
from memberships.services.renewal_calculator import RenewalCalculator
from payments.services.allocation_service import PaymentAllocator

logger = logging.getLogger(__name__)


class MembershipService:
    """Registration and renewal flows.

    Each flow runs in a single transaction, so a failure leaves no client
    created inline, membership, renewal, payment or payment method rows behind.
    """

    @staticmethod
    def _ensure_currency(currency):
        if not Currency.has_value(currency):
            raise ValidationError({'currency': f'Unsupported currency "{currency}"'})
        return Currency(currency)

    @staticmethod
    @transaction.atomic
    def register(*, plan, currency, payment_methods, client=None, new_client=None, start_date=None,
                 exchange_rate=None, registered_by=None, notes='', reference='', payment_date=None) -> Membership:
        """Register ``client``, or a client created from ``new_client`` data, on ``plan``."""
        currency = MembershipService._ensure_currency(currency)
        if not plan.is_active:
            raise ValidationError({'plan': 'The selected plan is not active'})

        if client is None:
            if not new_client:
                raise ValidationError({'client': 'Select a client or provide the new client details'})
            client = ClientService.create_client(new_client)
        client = Client.objects.select_for_update().get(pk=client.pk)
        today = timezone.localdate()
        if client.has_active_membership(as_of=today):
            raise ValidationError({'client': 'This client already has an active membership'})

        start_date = start_date or today
        end_date = RenewalCalculator.end_date_from(plan, start_date)
        plan_price = plan.price_in(currency)
        subscription_price = plan.subscription_price_in(currency)
        total = plan.total_price(currency)

        allocation = PaymentAllocator.plan(
            target_amount=total,
            target_currency=currency,
            entries=payment_methods,
            exchange_rate=exchange_rate,
        )

        membership = Membership.objects.create(
            client=client,
            plan=plan,
            start_date=start_date,
            end_date=end_date,
            status=MembershipStatus.ACTIVE,
            amount_paid=total,
            currency=currency,
            plan_price_paid=plan_price,
            subscription_price_paid=subscription_price,
            registered_by=registered_by,
            notes=notes or '',
        )
        payment = PaymentAllocator.persist(
            allocation,
            payable=membership,
            payment_date=payment_date,
            reference=reference,
            notes=notes,
            registered_by=registered_by,
            selected_price=total,
            selected_currency=currency,
        )
        logger.info(
            f"Membership {membership.id} registered for client {client.id}",
            extra={
                'membership_id': membership.id,
                'client_id': client.id,
                'plan_id': plan.id,
                'payment_id': payment.id,
                'end_date': end_date.isoformat(),
            },
        )
        return membership

    @staticmethod
    @transaction.atomic
    def renew(*, membership, currency, payment_methods, plan=None, exchange_rate=None, processed_by=None,
              as_of=None, notes='', reference='', payment_date=None) -> MembershipRenewal:
        """Extend a membership by one period of ``plan`` (the membership's own plan by default)."""
        currency = MembershipService._ensure_currency(currency)
        # Serializes concurrent renewals of the same membership.
        membership = Membership.objects.select_for_update().get(pk=membership.pk)
        plan = plan or membership.plan
        if not plan.is_active:
            raise ValidationError({'plan': 'The selected plan is not active'})
        as_of = as_of or timezone.localdate()

        info = RenewalCalculator.renewal_info(plan, membership, as_of=as_of)
        amount = plan.renewal_price(currency)
        allocation = PaymentAllocator.plan(
            target_amount=amount,
            target_currency=currency,
            entries=payment_methods,
            exchange_rate=exchange_rate,
        )

        renewal = MembershipRenewal.objects.create(
            membership=membership,
            plan=plan,
            previous_end_date=info['current_end_date'],
            new_end_date=info['new_end_date'],
            amount_paid=amount,
            currency=currency,
            processed_by=processed_by,
            notes=notes or '',
        )
        payment = PaymentAllocator.persist(
            allocation,
            payable=renewal,
            payment_date=payment_date,
            reference=reference,
            notes=notes,
            registered_by=processed_by,
            selected_price=amount,
            selected_currency=currency,
        )

        if membership.status != MembershipStatus.ACTIVE:
            membership.status = MembershipStatus.ACTIVE
            membership.save(update_fields=['status', 'updated_at'])

        logger.info(
            f"Membership {membership.id} renewed until {renewal.new_end_date}",
            extra={
                'membership_id': membership.id,
                'renewal_id': renewal.id,
                'plan_id': plan.id,
                'payment_id': payment.id,
                'calculation_basis': str(info['calculation_basis']),
                'previous_end_date': renewal.previous_end_date.isoformat(),
            },
        )
        return renewal

    @staticmethod
    def update(membership, *, status=None, notes=None) -> Membership:
        """Administrative edits; client, plan and dates are fixed after creation."""
        fields = []
        if status is not None:
            if not MembershipStatus.has_value(status):
                raise ValidationError({'status': f'Unknown status "{status}"'})
            membership.status = status
            fields.append('status')
        if notes is not None:
            membership.notes = notes
            fields.append('notes')
        if fields:
            membership.save(update_fields=fields + ['updated_at'])
        return membership
