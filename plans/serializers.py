from rest_framework import serializers

from common.enums import Currency
from plans.models import Plan


class PlanSerializer(serializers.ModelSerializer):
    total_price_local = serializers.SerializerMethodField()
    total_price_usd = serializers.SerializerMethodField()
    active_memberships_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Plan
        fields = (
            'id', 'uuid', 'name', 'description', 'price', 'price_usd', 'renewal_period_days',
            'subscription_price_local', 'subscription_price_usd', 'status', 'features',
            'total_price_local', 'total_price_usd', 'active_memberships_count',
            'created_at', 'updated_at',
        )
        read_only_fields = ('uuid', 'created_at', 'updated_at')

    def get_total_price_local(self, obj):
        return obj.total_price(Currency.LOCAL)

    def get_total_price_usd(self, obj):
        return obj.total_price(Currency.USD)

    def validate_features(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError("Features must be a list of strings")
        return value


class PlanBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Plan
        fields = ('id', 'name', 'price', 'price_usd', 'renewal_period_days')
