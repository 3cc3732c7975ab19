"""WSGI entry point for the attendance and payroll API.

``BUILD_ENV=local`` selects the local settings when
``DJANGO_SETTINGS_MODULE`` is not set; anything else runs production.
"""

import os

from django.core.wsgi import get_wsgi_application

if "DJANGO_SETTINGS_MODULE" not in os.environ:
    build_env = os.environ.get("BUILD_ENV", "production").lower()
    os.environ["DJANGO_SETTINGS_MODULE"] = (
        "config.settings.local"
        if build_env == "local"
        else "config.settings.production"
    )

application = get_wsgi_application()
