from django.utils import timezone
from rest_framework import serializers

from clients.models import Client
from clients.serializers import ClientSerializer
from common.enums import Currency, MembershipStatus, RenewalBasis
from memberships.models import Membership, MembershipRenewal
from memberships.services.membership_service import MembershipService
from payments.serializers import PaymentMethodEntrySerializer, PaymentSerializer
from plans.models import Plan
from plans.serializers import PlanBriefSerializer


class ClientBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ('id', 'name', 'email', 'phone', 'identification_number')


class MembershipRenewalSerializer(serializers.ModelSerializer):
    processed_by_name = serializers.SerializerMethodField()
    payment = serializers.SerializerMethodField()

    class Meta:
        model = MembershipRenewal
        fields = (
            'id', 'membership', 'plan', 'previous_end_date', 'new_end_date', 'amount_paid', 'currency',
            'processed_by', 'processed_by_name', 'notes', 'payment', 'created_at',
        )
        read_only_fields = fields

    def get_processed_by_name(self, obj):
        return obj.processed_by.display_name if obj.processed_by else None

    def get_payment(self, obj):
        payment = obj.payment
        return PaymentSerializer(payment, context=self.context).data if payment else None


class MembershipSerializer(serializers.ModelSerializer):
    client = ClientBriefSerializer(read_only=True)
    plan = PlanBriefSerializer(read_only=True)
    effective_end_date = serializers.DateField(read_only=True)
    is_expired = serializers.SerializerMethodField()
    days_until_expiration = serializers.SerializerMethodField()
    renewals_count = serializers.SerializerMethodField()

    class Meta:
        model = Membership
        fields = (
            'id', 'uuid', 'client', 'plan', 'start_date', 'end_date', 'effective_end_date',
            'is_expired', 'days_until_expiration', 'status', 'amount_paid', 'currency',
            'plan_price_paid', 'subscription_price_paid', 'registered_by', 'notes',
            'renewals_count', 'created_at', 'updated_at',
        )
        read_only_fields = (
            'uuid', 'start_date', 'end_date', 'amount_paid', 'currency', 'plan_price_paid',
            'subscription_price_paid', 'registered_by', 'created_at', 'updated_at',
        )

    def get_is_expired(self, obj):
        return obj.effective_end_date < timezone.localdate()

    def get_days_until_expiration(self, obj):
        return obj.days_until_expiration()

    def get_renewals_count(self, obj):
        return obj.renewals.count()

    def update(self, instance, validated_data):
        return MembershipService.update(
            instance, status=validated_data.get('status'), notes=validated_data.get('notes'),
        )


class MembershipDetailSerializer(MembershipSerializer):
    renewals = MembershipRenewalSerializer(many=True, read_only=True)
    payments = serializers.SerializerMethodField()
    sum_local_payments = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    sum_usd_payments = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta(MembershipSerializer.Meta):
        fields = MembershipSerializer.Meta.fields + (
            'renewals', 'payments', 'sum_local_payments', 'sum_usd_payments',
        )

    def get_payments(self, obj):
        return PaymentSerializer(obj.payments.all(), many=True, context=self.context).data


class RenewalInfoQuerySerializer(serializers.Serializer):
    as_of = serializers.DateField(required=False)
    plan = serializers.PrimaryKeyRelatedField(queryset=Plan.objects.all(), required=False)


class RenewalInfoSerializer(serializers.Serializer):
    is_expired = serializers.BooleanField()
    calculation_basis = serializers.ChoiceField(choices=RenewalBasis.choices)
    current_end_date = serializers.DateField()
    days_added = serializers.IntegerField()
    new_end_date = serializers.DateField()
    days_until_expiration = serializers.IntegerField()


class PaymentInputMixin(serializers.Serializer):
    currency = serializers.ChoiceField(choices=Currency.choices)
    exchange_rate = serializers.DecimalField(
        max_digits=18, decimal_places=6, required=False, allow_null=True,
    )
    payment_methods = PaymentMethodEntrySerializer(many=True, allow_empty=True)
    payment_date = serializers.DateField(required=False, allow_null=True)
    reference = serializers.CharField(required=False, allow_blank=True, max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True)


class QuickRegisterSerializer(PaymentInputMixin):
    """Register an existing client (``client``) or one created inline (``new_client``)."""

    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all(), required=False, allow_null=True)
    new_client = ClientSerializer(required=False)
    plan = serializers.PrimaryKeyRelatedField(queryset=Plan.objects.all())
    start_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        has_client = attrs.get('client') is not None
        has_new_client = bool(attrs.get('new_client'))
        if has_client == has_new_client:
            raise serializers.ValidationError({'client': 'Provide either an existing client or new client details'})
        return attrs

    def create(self, validated_data):
        request = self.context.get('request')
        return MembershipService.register(
            registered_by=getattr(request, 'user', None),
            **validated_data,
        )


class QuickRenewSerializer(PaymentInputMixin):
    plan = serializers.PrimaryKeyRelatedField(queryset=Plan.objects.all(), required=False, allow_null=True)

    def create(self, validated_data):
        request = self.context.get('request')
        return MembershipService.renew(
            membership=self.context['membership'],
            processed_by=getattr(request, 'user', None),
            **validated_data,
        )
