# backend/settings/__init__.py
"""
Settings package. Nothing is imported here; pick a module explicitly:

- backend.settings.dev   local development and tests (SQLite default)
- backend.settings.prod  deployment (Postgres, Moyasar keys required)
"""
