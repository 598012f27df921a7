from django.http import FileResponse
from rest_framework import mixins, permissions, viewsets
from rest_framework.decorators import action

from attachments.models import Attachment
from attachments.serializers import AttachmentSerializer
from core.permissions import IsAdminOrStaff


class AttachmentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin,
                        mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """Browse, download and delete stored files. Uploads go through the owner endpoints."""

    permission_classes = [permissions.IsAuthenticated, IsAdminOrStaff]
    serializer_class = AttachmentSerializer
    filterset_fields = ['type', 'object_id']

    def get_queryset(self):
        queryset = Attachment.objects.select_related('content_type')
        client_id = self.request.query_params.get('client')
        if client_id:
            queryset = queryset.filter(client__id=client_id)
        payment_id = self.request.query_params.get('payment')
        if payment_id:
            queryset = queryset.filter(payment__id=payment_id)
        return queryset

    @action(detail=True, methods=['get'])
    def download(self, request, pk=None):
        attachment = self.get_object()
        return FileResponse(
            attachment.file.open('rb'),
            as_attachment=True,
            filename=attachment.file.name.rsplit('/', 1)[-1],
            content_type=attachment.mime_type or None,
        )
