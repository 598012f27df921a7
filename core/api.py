import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, permissions, viewsets

from core.permissions import IsAdminOrStaff

logger = logging.getLogger(__name__)


class BackOfficeModelViewSet(viewsets.ModelViewSet):
    """Shared defaults for the back office resources.

    Every endpoint requires an authenticated Admin or Staff user; views
    declare their own ``filterset_fields``/``filterset_class`` and
    ``search_fields``.
    """

    permission_classes = [permissions.IsAuthenticated, IsAdminOrStaff]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter, filters.SearchFilter]
    ordering_fields = '__all__'
    # Do not set a global search_fields; define per-view to avoid DRF errors
    search_fields = []

    def perform_destroy(self, instance):
        logger.info(
            "Deleting %s", instance._meta.label,
            extra={'object_id': instance.pk, 'user_id': getattr(self.request.user, 'id', None)},
        )
        super().perform_destroy(instance)
