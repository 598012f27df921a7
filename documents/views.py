from drf_spectacular.utils import extend_schema
from rest_framework import permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from attachments.serializers import AttachmentSerializer
from core.api import BackOfficeModelViewSet
from core.permissions import IsAdminOrReadOnly, IsAdminOrStaff
from documents.models import DocumentTemplate, TemplateKey
from documents.serializers import DocumentTemplateSerializer, GenerateDocumentSerializer, TemplateKeySerializer
from documents.services import DocumentGenerator


class DocumentTemplateViewSet(BackOfficeModelViewSet):
    serializer_class = DocumentTemplateSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminOrReadOnly]
    filterset_fields = ['status']
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'created_at']

    def get_queryset(self):
        return DocumentTemplate.objects.select_related('created_by')

    def get_permissions(self):
        if self.action == 'generate':
            return [permissions.IsAuthenticated(), IsAdminOrStaff()]
        return super().get_permissions()

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @extend_schema(responses=TemplateKeySerializer(many=True))
    @action(detail=False, methods=['get'])
    def keys(self, request):
        return Response(TemplateKeySerializer(TemplateKey.objects.all(), many=True).data)

    @extend_schema(responses=DocumentTemplateSerializer(many=True))
    @action(detail=False, methods=['get'])
    def active(self, request):
        templates = self.get_queryset().active()
        return Response(self.get_serializer(templates, many=True).data)

    @extend_schema(request=GenerateDocumentSerializer, responses={201: AttachmentSerializer})
    @action(detail=True, methods=['post'])
    def generate(self, request, pk=None):
        template = self.get_object()
        serializer = GenerateDocumentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attachment = DocumentGenerator.generate(
            template, serializer.validated_data['client'], generated_by=request.user,
        )
        return Response(AttachmentSerializer(attachment, context={'request': request}).data,
                        status=status.HTTP_201_CREATED)
