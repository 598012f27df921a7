from django.core.exceptions import ValidationError
from django.db.models import Count, Q
from rest_framework import permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from common.enums import ActiveStatus, MembershipStatus
from core.api import BackOfficeModelViewSet
from core.permissions import IsAdminOrReadOnly
from plans.models import Plan
from plans.serializers import PlanSerializer


class PlanViewSet(BackOfficeModelViewSet):
    serializer_class = PlanSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrReadOnly]
    filterset_fields = ['status', 'renewal_period_days']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'price', 'price_usd', 'renewal_period_days', 'created_at']

    def get_queryset(self):
        return Plan.objects.annotate(
            active_memberships_count=Count(
                'memberships', filter=Q(memberships__status=MembershipStatus.ACTIVE)
            ),
        ).order_by('name')

    def perform_destroy(self, instance):
        if instance.memberships.exists() or instance.renewals.exists():
            raise ValidationError({'plan': 'Plans referenced by memberships or renewals cannot be deleted; deactivate it instead'})
        super().perform_destroy(instance)

    @action(detail=False, methods=['get'])
    def active(self, request):
        queryset = self.filter_queryset(self.get_queryset().filter(status=ActiveStatus.ACTIVE))
        return Response(self.get_serializer(queryset, many=True).data)
