# backend/wsgi.py
"""
WSGI entrypoint for the shop backend (gunicorn: backend.wsgi:application).

Production deployments set DJANGO_SETTINGS_MODULE=backend.settings.prod;
prod settings refuse to start without Moyasar keys and a Postgres URL.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
