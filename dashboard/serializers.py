from rest_framework import serializers

from memberships.serializers import MembershipSerializer
from payments.serializers import PaymentSerializer


class DashboardStatsSerializer(serializers.Serializer):
    total_clients = serializers.IntegerField()
    active_memberships = serializers.IntegerField()
    expiring_soon = serializers.IntegerField()
    monthly_revenue = serializers.DictField(child=serializers.DecimalField(max_digits=14, decimal_places=2))


class DashboardSerializer(serializers.Serializer):
    """Serializer for the back office landing page."""

    as_of = serializers.DateField()
    stats = DashboardStatsSerializer()
    expiring_memberships = MembershipSerializer(many=True)
    recent_payments = PaymentSerializer(many=True)
