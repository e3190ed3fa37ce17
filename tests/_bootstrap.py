"""Test helper that normalizes sys.path and environment defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


_DEFAULT_ENV_VARS: dict[str, str] = {
    "BASE_URL": "https://broker.example.com",
    "FRONTEND_URL": "https://app.example.com",
    "SMARTTHINGS_CLIENT_ID": "st-client-id",
    "SMARTTHINGS_CLIENT_SECRET": "st-client-secret",
    "GOOGLE_CLIENT_ID": "google-client-id",
    "GOOGLE_CLIENT_SECRET": "google-client-secret",
    "TOKEN_ENCRYPTION_SECRET": "test-secret",
}

for key, value in _DEFAULT_ENV_VARS.items():
    os.environ.setdefault(key, value)
