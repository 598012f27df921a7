from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core.api import BackOfficeModelViewSet
from memberships.models import Membership
from memberships.serializers import (
    MembershipDetailSerializer,
    MembershipRenewalSerializer,
    MembershipSerializer,
    QuickRegisterSerializer,
    QuickRenewSerializer,
    RenewalInfoQuerySerializer,
    RenewalInfoSerializer,
)
from memberships.services.renewal_calculator import RenewalCalculator


class MembershipViewSet(BackOfficeModelViewSet):
    """Memberships are created through quick-register and extended through quick-renew."""

    filterset_fields = ['status', 'plan', 'client', 'currency']
    search_fields = ['client__name', 'client__identification_number', 'plan__name']
    ordering_fields = ['start_date', 'end_date', 'effective_end', 'created_at']
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return (
            Membership.objects.with_effective_end_date()
            .select_related('client', 'plan', 'registered_by')
        )

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return MembershipDetailSerializer
        if self.action == 'quick_register':
            return QuickRegisterSerializer
        if self.action == 'quick_renew':
            return QuickRenewSerializer
        return MembershipSerializer

    def create(self, request, *args, **kwargs):
        return self.quick_register(request)

    @extend_schema(request=QuickRegisterSerializer, responses={201: MembershipDetailSerializer})
    @action(detail=False, methods=['post'], url_path='quick-register')
    def quick_register(self, request):
        serializer = QuickRegisterSerializer(data=request.data, context=self.get_serializer_context())
        serializer.is_valid(raise_exception=True)
        membership = serializer.save()
        membership = self.get_queryset().get(pk=membership.pk)
        return Response(MembershipDetailSerializer(membership, context=self.get_serializer_context()).data,
                        status=status.HTTP_201_CREATED)

    @extend_schema(request=QuickRenewSerializer, responses={201: MembershipRenewalSerializer})
    @action(detail=True, methods=['post'], url_path='quick-renew')
    def quick_renew(self, request, pk=None):
        membership = self.get_object()
        context = {**self.get_serializer_context(), 'membership': membership}
        serializer = QuickRenewSerializer(data=request.data, context=context)
        serializer.is_valid(raise_exception=True)
        renewal = serializer.save()
        return Response(MembershipRenewalSerializer(renewal, context=context).data,
                        status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter('as_of', str, description='Evaluation date, YYYY-MM-DD'),
            OpenApiParameter('plan', int, description='Plan to renew under; defaults to the membership plan'),
        ],
        responses=RenewalInfoSerializer,
    )
    @action(detail=True, methods=['get'], url_path='renewal-info')
    def renewal_info(self, request, pk=None):
        membership = self.get_object()
        query = RenewalInfoQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        plan = query.validated_data.get('plan') or membership.plan
        info = RenewalCalculator.renewal_info(plan, membership, as_of=query.validated_data.get('as_of'))
        return Response(RenewalInfoSerializer(info).data)

    @action(detail=True, methods=['get'])
    def renewals(self, request, pk=None):
        membership = self.get_object()
        return Response(MembershipRenewalSerializer(membership.renewals.all(), many=True,
                                                    context=self.get_serializer_context()).data)
