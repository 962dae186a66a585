#!/usr/bin/env python
"""
Shop backend management entrypoint.

DJANGO_SETTINGS_MODULE must name a concrete module. Pointing it at the
bare "backend.settings" package loads no apps, so it is replaced with
"backend.settings.dev". Production sets backend.settings.prod itself.
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"


def _ensure_settings_module() -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()
    if current in ("", "backend.settings"):
        os.environ["DJANGO_SETTINGS_MODULE"] = DEFAULT_SETTINGS


def main() -> None:
    _ensure_settings_module()

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django is not importable. Install the project "
            "(pip install -e .) inside an active virtual environment."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
