from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import PayrollSettingView
from .views import PayrollViewSet

router = SimpleRouter()
router.register("records", PayrollViewSet, basename="payroll-record")

urlpatterns = [
    path("settings/", PayrollSettingView.as_view(), name="payroll-settings"),
    path("", include(router.urls)),
]
