"""WSGI entry point for the slotswap project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "slotswap.settings")

application = get_wsgi_application()
