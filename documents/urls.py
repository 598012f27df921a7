from rest_framework.routers import DefaultRouter

from documents import views

router = DefaultRouter()
router.register(r'templates', views.DocumentTemplateViewSet, basename='document-templates')

urlpatterns = router.urls
