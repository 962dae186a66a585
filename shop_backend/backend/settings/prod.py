"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS

Fail-closed: the process refuses to start when any of these is missing
or unsafe:
- SECRET_KEY, ALLOWED_HOSTS
- DATABASE_URL (Postgres; SQLite is rejected)
- MOYASAR_SECRET_KEY, and MOYASAR_WEBHOOK_SECRET unless the insecure
  MOYASAR_SKIP_WEBHOOK_VERIFICATION opt-out is set
- https-only CORS / CSRF origins
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import BASE_DIR, MIDDLEWARE, PAYMENTS, env


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ImproperlyConfigured(message)


DEBUG = False

# ----------------------------
# Secrets / hosts
# ----------------------------
SECRET_KEY = (env("SECRET_KEY", default="") or "").strip()
_require(
    bool(SECRET_KEY) and SECRET_KEY != "dev-insecure-change-me",
    "SECRET_KEY must be set to a strong value in production.",
)

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
_require(bool(ALLOWED_HOSTS), "ALLOWED_HOSTS must be set in production.")

# ----------------------------
# Database (Postgres only)
# ----------------------------
_database_url = (env("DATABASE_URL", default="") or "").strip()
_require(bool(_database_url), "DATABASE_URL must be set in production.")
_require(
    not _database_url.startswith("sqlite"),
    "SQLite is not supported in production; point DATABASE_URL at Postgres.",
)

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)

# ----------------------------
# Moyasar
# ----------------------------
_moyasar = PAYMENTS["MOYASAR"]
_require(bool(_moyasar["SECRET_KEY"]), "MOYASAR_SECRET_KEY must be set in production.")
_require(
    bool(_moyasar["WEBHOOK_SECRET"]) or _moyasar["SKIP_WEBHOOK_VERIFICATION"],
    "MOYASAR_WEBHOOK_SECRET must be set in production "
    "(MOYASAR_SKIP_WEBHOOK_VERIFICATION=True accepts unsigned webhooks).",
)

# ----------------------------
# Static files (WhiteNoise)
# ----------------------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ----------------------------
# Transport security (behind a TLS-terminating proxy)
# ----------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True
CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ----------------------------
# Storefront origins (https only)
# ----------------------------
CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=[])
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=[])
CORS_ALLOW_CREDENTIALS = False

_require(bool(CORS_ALLOWED_ORIGINS), "CORS_ALLOWED_ORIGINS must be set in production.")
_require(bool(CSRF_TRUSTED_ORIGINS), "CSRF_TRUSTED_ORIGINS must be set in production.")

for _origin in CORS_ALLOWED_ORIGINS + CSRF_TRUSTED_ORIGINS:
    _require(
        _origin.startswith("https://"),
        f"Origin {_origin!r} must be https:// in production.",
    )
    _require(
        "localhost" not in _origin and "127.0.0.1" not in _origin,
        f"Origin {_origin!r} points at localhost.",
    )

_require(
    FRONTEND_BASE_URL.startswith("https://"),  # noqa: F405
    "FRONTEND_BASE_URL must be https:// in production (payment callback redirects).",
)
