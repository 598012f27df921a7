from rest_framework.routers import DefaultRouter

from plans import views

router = DefaultRouter()
router.register(r'plans', views.PlanViewSet, basename='plans')

urlpatterns = router.urls
