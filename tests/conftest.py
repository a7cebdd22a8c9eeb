"""Test environment: in-memory SQLite and fixed secrets, set before the app is imported."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-secret-0123456789abcdef"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret-0123456789abcdef"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTH_LIVE_ROLE"] = "true"
os.environ["TOKEN_REVOCATION_ENABLED"] = "true"
os.environ["REFRESH_TOKEN_ROTATION"] = "false"
