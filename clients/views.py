from django.db.models import Count
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from attachments.serializers import AttachmentSerializer, DocumentUploadSerializer, PhotoUploadSerializer
from attachments.services import AttachmentService
from clients.filters import ClientFilter
from clients.models import Client, Pathology
from clients.serializers import (
    ClientDetailSerializer,
    ClientListSerializer,
    ClientSerializer,
    PathologySerializer,
)
from clients.services import ClientService
from common.enums import AttachmentType
from core.api import BackOfficeModelViewSet
from memberships.serializers import MembershipSerializer


class ClientViewSet(BackOfficeModelViewSet):
    queryset = Client.objects.prefetch_related('client_pathologies__pathology').order_by('name')
    filterset_class = ClientFilter
    search_fields = ['name', 'email', 'phone', 'identification_number']
    ordering_fields = ['name', 'created_at', 'birth_date']
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_serializer_class(self):
        if self.action == 'list':
            return ClientListSerializer
        if self.action == 'retrieve':
            return ClientDetailSerializer
        return ClientSerializer

    @extend_schema(
        parameters=[OpenApiParameter('q', str, description='Name, email, phone or identification number')],
        responses=ClientListSerializer(many=True),
    )
    @action(detail=False, methods=['get'])
    def search(self, request):
        clients = ClientService.quick_search(request.query_params.get('q'))
        return Response(ClientListSerializer(clients, many=True).data)

    @action(detail=True, methods=['get'])
    def memberships(self, request, pk=None):
        client = self.get_object()
        memberships = client.memberships.with_effective_end_date().select_related('plan')
        return Response(MembershipSerializer(memberships, many=True, context=self.get_serializer_context()).data)

    @extend_schema(request=DocumentUploadSerializer, responses=AttachmentSerializer)
    @action(detail=True, methods=['get', 'post'])
    def documents(self, request, pk=None):
        client = self.get_object()
        if request.method == 'GET':
            return Response(AttachmentSerializer(client.documents(), many=True, context={'request': request}).data)

        serializer = DocumentUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attachment = AttachmentService.add_document(
            client,
            serializer.validated_data['document'],
            name=serializer.validated_data.get('name') or None,
            kind=serializer.validated_data.get('type', AttachmentType.DOCUMENT),
            uploaded_by=request.user,
        )
        return Response(AttachmentSerializer(attachment, context={'request': request}).data,
                        status=status.HTTP_201_CREATED)

    @extend_schema(request=PhotoUploadSerializer, responses=AttachmentSerializer)
    @action(detail=True, methods=['post', 'delete'], url_path='profile-photo')
    def profile_photo(self, request, pk=None):
        client = self.get_object()
        if request.method == 'DELETE':
            AttachmentService.remove_profile_photo(client)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = PhotoUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        photo = AttachmentService.replace_profile_photo(
            client, serializer.validated_data['photo'], uploaded_by=request.user,
        )
        return Response(AttachmentSerializer(photo, context={'request': request}).data,
                        status=status.HTTP_201_CREATED)


class PathologyViewSet(BackOfficeModelViewSet):
    serializer_class = PathologySerializer
    filterset_fields = ['name']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'created_at']

    def get_queryset(self):
        return Pathology.objects.annotate(clients_count=Count('clients', distinct=True)).order_by('name')

    def perform_destroy(self, instance):
        ClientService.delete_pathology(instance)
