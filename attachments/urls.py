from rest_framework.routers import DefaultRouter

from attachments import views

router = DefaultRouter()
router.register(r'attachments', views.AttachmentViewSet, basename='attachments')

urlpatterns = router.urls
