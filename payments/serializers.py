from rest_framework import serializers

from attachments.serializers import AttachmentSerializer
from common.enums import Currency, PaymentMethodType
from memberships.models import Membership
from payments.models import Payment, PaymentMethod
from payments.services.payment_service import PaymentService


class PaymentMethodEntrySerializer(serializers.Serializer):
    """One line of a split payment as submitted by the front desk."""

    method = serializers.ChoiceField(choices=PaymentMethodType.choices)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.ChoiceField(choices=Currency.choices, required=False, allow_null=True)
    exchange_rate = serializers.DecimalField(
        max_digits=18, decimal_places=6, required=False, allow_null=True,
    )
    reference = serializers.CharField(required=False, allow_blank=True, max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True)


class PaymentMethodSerializer(serializers.ModelSerializer):
    method_display = serializers.CharField(source='get_method_display', read_only=True)

    class Meta:
        model = PaymentMethod
        fields = (
            'id', 'position', 'method', 'method_display', 'amount', 'currency',
            'exchange_rate', 'reference', 'notes', 'created_at',
        )
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    methods = PaymentMethodSerializer(many=True, read_only=True)
    payable_kind = serializers.CharField(read_only=True)
    membership = serializers.SerializerMethodField()
    client_name = serializers.SerializerMethodField()
    evidences = AttachmentSerializer(many=True, read_only=True)
    registered_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = (
            'id', 'uuid', 'payable_kind', 'object_id', 'membership', 'client_name',
            'amount', 'currency', 'exchange_rate', 'selected_price', 'selected_currency',
            'payment_date', 'payment_method', 'reference', 'notes', 'methods', 'evidences',
            'registered_by', 'registered_by_name', 'created_at', 'updated_at',
        )
        read_only_fields = fields

    def to_representation(self, instance):
        # Shared by get_membership and get_client_name.
        self._membership = instance.resolve_membership()
        return super().to_representation(instance)

    def get_membership(self, obj):
        return self._membership.id

    def get_client_name(self, obj):
        return self._membership.client.name

    def get_registered_by_name(self, obj):
        return obj.registered_by.display_name if obj.registered_by else None


class PaymentCreateSerializer(serializers.Serializer):
    """Extra payment recorded directly against a membership."""

    membership = serializers.PrimaryKeyRelatedField(queryset=Membership.objects.all())
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    currency = serializers.ChoiceField(choices=Currency.choices)
    exchange_rate = serializers.DecimalField(
        max_digits=18, decimal_places=6, required=False, allow_null=True,
    )
    payment_methods = PaymentMethodEntrySerializer(many=True, allow_empty=True)
    payment_date = serializers.DateField(required=False, allow_null=True)
    reference = serializers.CharField(required=False, allow_blank=True, max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True)

    def create(self, validated_data):
        request = self.context.get('request')
        return PaymentService.record_membership_payment(
            registered_by=getattr(request, 'user', None),
            **validated_data,
        )


class PaymentUpdateSerializer(serializers.Serializer):
    reference = serializers.CharField(required=False, allow_blank=True, max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True)
    payment_date = serializers.DateField(required=False)

    def update(self, instance, validated_data):
        return PaymentService.update_details(instance, **validated_data)


class PaymentStatsQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get('start_date'), attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({'end_date': 'End date must be on or after the start date'})
        return attrs


class PaymentStatsSerializer(serializers.Serializer):
    start_date = serializers.DateField(allow_null=True)
    end_date = serializers.DateField(allow_null=True)
    total_payments = serializers.IntegerField()
    totals = serializers.DictField(child=serializers.DecimalField(max_digits=14, decimal_places=2))
    by_kind = serializers.DictField()
    by_method = serializers.ListField(child=serializers.DictField())
