from rest_framework.routers import DefaultRouter

from clients import views

router = DefaultRouter()
router.register(r'clients', views.ClientViewSet, basename='clients')
router.register(r'pathologies', views.PathologyViewSet, basename='pathologies')

urlpatterns = router.urls
