"""API endpoints for dashboard metrics."""

from drf_spectacular.utils import extend_schema
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import IsAdminOrStaff

from .serializers import DashboardSerializer
from .services import get_cached_dashboard_stats


class DashboardView(generics.GenericAPIView):
    permission_classes = [IsAuthenticated, IsAdminOrStaff]
    serializer_class = DashboardSerializer

    @extend_schema(responses=DashboardSerializer)
    def get(self, request):
        serializer = self.get_serializer(get_cached_dashboard_stats())
        return Response(serializer.data)
