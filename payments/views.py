from django.contrib.contenttypes.prefetch import GenericPrefetch
from django.db.models import Prefetch
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import permissions, status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from attachments.models import Attachment
from attachments.serializers import AttachmentSerializer, EvidenceUploadSerializer
from attachments.services import AttachmentService
from core.api import BackOfficeModelViewSet
from core.permissions import IsAdmin
from memberships.models import Membership, MembershipRenewal
from payments.filters import PaymentFilter
from payments.models import Payment
from payments.serializers import (
    PaymentCreateSerializer,
    PaymentSerializer,
    PaymentStatsQuerySerializer,
    PaymentStatsSerializer,
    PaymentUpdateSerializer,
)
from payments.services.payment_service import get_payment_stats


class PaymentViewSet(BackOfficeModelViewSet):
    filterset_class = PaymentFilter
    search_fields = ['reference', 'notes']
    ordering_fields = ['payment_date', 'amount', 'created_at']
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return (
            Payment.objects.select_related('content_type', 'registered_by')
            .prefetch_related(
                'methods',
                Prefetch('evidences', queryset=Attachment.objects.select_related('content_type')),
                GenericPrefetch('payable', [
                    Membership.objects.select_related('client'),
                    MembershipRenewal.objects.select_related('membership__client'),
                ]),
            )
        )

    def get_serializer_class(self):
        if self.action == 'create':
            return PaymentCreateSerializer
        if self.action == 'partial_update':
            return PaymentUpdateSerializer
        return PaymentSerializer

    def get_permissions(self):
        if self.action == 'destroy':
            return [permissions.IsAuthenticated(), IsAdmin()]
        return super().get_permissions()

    @extend_schema(request=PaymentCreateSerializer, responses={201: PaymentSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = serializer.save()
        return Response(PaymentSerializer(payment, context=self.get_serializer_context()).data,
                        status=status.HTTP_201_CREATED)

    @extend_schema(request=PaymentUpdateSerializer, responses=PaymentSerializer)
    def partial_update(self, request, *args, **kwargs):
        payment = self.get_object()
        serializer = self.get_serializer(payment, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        payment = serializer.save()
        return Response(PaymentSerializer(payment, context=self.get_serializer_context()).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('start_date', str, description='YYYY-MM-DD'),
            OpenApiParameter('end_date', str, description='YYYY-MM-DD'),
        ],
        responses=PaymentStatsSerializer,
    )
    @action(detail=False, methods=['get'])
    def stats(self, request):
        params = PaymentStatsQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        stats = get_payment_stats(**params.validated_data)
        return Response(PaymentStatsSerializer(stats).data)

    @extend_schema(request=EvidenceUploadSerializer, responses=AttachmentSerializer)
    @action(detail=True, methods=['get', 'post'])
    def evidences(self, request, pk=None):
        payment = self.get_object()
        if request.method == 'GET':
            return Response(AttachmentSerializer(payment.evidences.all(), many=True,
                                                 context={'request': request}).data)
        serializer = EvidenceUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        evidence = AttachmentService.add_payment_evidence(
            payment, serializer.validated_data['evidence'], uploaded_by=request.user,
        )
        return Response(AttachmentSerializer(evidence, context={'request': request}).data,
                        status=status.HTTP_201_CREATED)
