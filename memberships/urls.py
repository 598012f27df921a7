from rest_framework.routers import DefaultRouter

from memberships import views

router = DefaultRouter()
router.register(r'memberships', views.MembershipViewSet, basename='memberships')

urlpatterns = router.urls
