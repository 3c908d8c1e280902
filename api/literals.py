"""API-related constants and literals."""

# API Endpoints
API_V1_PREFIX = "/v1"
RUN_BASE_PATH = f"{API_V1_PREFIX}/run"
SCHEDULE_BASE_PATH = f"{API_V1_PREFIX}/schedule"
ACCOUNTS_BASE_PATH = f"{API_V1_PREFIX}/accounts"
COMMANDS_BASE_PATH = f"{API_V1_PREFIX}/commands"
HEALTH_ENDPOINT = "/health"
DOCS_ENDPOINT = "/docs"
OPENAPI_ENDPOINT = "/openapi.json"

SKIP_AUTH_PATHS = frozenset({HEALTH_ENDPOINT, DOCS_ENDPOINT, OPENAPI_ENDPOINT})

# Header carrying the caller's identity for command permission checks
USER_ID_HEADER = "X-User-Id"
