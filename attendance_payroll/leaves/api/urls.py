from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from attendance_payroll.leaves.api.views import HolidayViewSet
from attendance_payroll.leaves.api.views import LeaveViewSet

router = SimpleRouter()
router.register("holidays", HolidayViewSet)
router.register("requests", LeaveViewSet, basename="leave-request")

urlpatterns = [
    path("", include(router.urls)),
]
