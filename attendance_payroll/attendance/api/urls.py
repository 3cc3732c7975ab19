from django.urls import include
from django.urls import path
from rest_framework.routers import SimpleRouter

from attendance_payroll.attendance.api.views import AttendanceRecordViewSet
from attendance_payroll.attendance.api.views import DailyAttendanceRunView
from attendance_payroll.attendance.api.views import FixHolidayAttendanceView

router = SimpleRouter()
router.register("records", AttendanceRecordViewSet, basename="attendance-record")

urlpatterns = [
    path("daily-run/", DailyAttendanceRunView.as_view(), name="attendance-daily-run"),
    path(
        "fix-holidays/",
        FixHolidayAttendanceView.as_view(),
        name="attendance-fix-holidays",
    ),
    path("", include(router.urls)),
]
