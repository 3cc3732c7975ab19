from django.urls import include
from django.urls import path

app_name = "api"
urlpatterns = [
    path("attendance/", include("attendance_payroll.attendance.api.urls")),
    path("leaves/", include("attendance_payroll.leaves.api.urls")),
    path("payroll/", include("attendance_payroll.payroll.api.urls")),
]
