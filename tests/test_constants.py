"""
Centralized test credentials and secrets.

All test-only credentials are loaded from environment variables when available,
with clearly non-production placeholders as fallbacks.
"""

from __future__ import annotations

import os

# Passwords: load from env; fallbacks are placeholders long enough for form validation
TEST_PASSWORD = os.environ.get("TEST_PASSWORD") or "test-password"
TEST_PASSWORD_WRONG = os.environ.get("TEST_PASSWORD_WRONG") or "wrong-password"

# Accounts used across API tests
TEST_ADMIN_EMAIL = "admin@example.com"
TEST_USER_EMAIL = "user@example.com"

# API keys and tokens: load from env; fallback is obviously a placeholder
TEST_LLM_API_KEY = os.environ.get("TEST_LLM_API_KEY") or "k"

# App config used by conftest
TEST_SECRET_KEY = os.environ.get("TEST_SECRET_KEY") or "test-secret-key"
