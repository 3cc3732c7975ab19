import os

from celery import Celery
from celery.signals import setup_logging

# Workers run production settings unless DJANGO_SETTINGS_MODULE says otherwise;
# pytest passes config.settings.test through --ds.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.production")

app = Celery("attendance_payroll")

# CELERY_BROKER_URL, CELERY_BEAT_SCHEDULE and friends come from Django settings.
app.config_from_object("django.conf:settings", namespace="CELERY")


@setup_logging.connect
def use_django_logging(*args, **kwargs):
    """Route worker and beat logs through settings.LOGGING."""
    from logging.config import dictConfig  # noqa: PLC0415

    from django.conf import settings  # noqa: PLC0415

    dictConfig(settings.LOGGING)


# Registers the nightly attendance batch, the holiday fix and monthly payroll.
app.autodiscover_tasks()
