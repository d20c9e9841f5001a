"""Constants for GrowthKit authentication and token storage."""

from __future__ import annotations

TOKEN_ENDPOINT = "/public/auth/token"
FINGERPRINT_HEADER = "X-Fingerprint"

# Credential resolution
API_KEY_ENV_VAR = "GROWTHKIT_API_KEY"
PUBLIC_KEY_ENV_VAR = "GROWTHKIT_PUBLIC_KEY"
API_URL_ENV_VAR = "GROWTHKIT_API_URL"

# Token storage
TOKEN_STORAGE_KEY = "growthkit_token"
TOKEN_DIR = ".growthkit"
TOKEN_FILE = "token.json"

# Error messages
ERROR_TOKEN_UNAVAILABLE = "Token acquisition failed: unable to obtain an access token"
ERROR_REAUTH_FAILED = "Authentication failed: token rejected after re-authentication"
ERROR_MALFORMED_TOKEN = "Token acquisition failed: malformed token response"
