"""
ASGI config for the alumni import platform.

Entry point for async web servers like Uvicorn or Hypercorn, which serve the
admin pages used to inspect import runs.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
