"""Constants for the GrowthKit CLI."""

FINGERPRINT_ENV_VAR = "GROWTHKIT_FINGERPRINT"
# A terminal session should not wait forever on an unreachable token endpoint.
CLI_MAX_TOKEN_ATTEMPTS = 5
