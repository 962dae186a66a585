"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS

- SQLite unless DATABASE_URL says otherwise
- Storefront dev server (Vite, :5173) allowed for CORS/CSRF
- Moyasar test keys come from .env (MOYASAR_SECRET_KEY=sk_test_...)
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])

_storefront = env.list("CORS_ALLOWED_ORIGINS", default=["http://localhost:5173"])
CORS_ALLOWED_ORIGINS = _storefront
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=_storefront)
CORS_ALLOW_CREDENTIALS = True
