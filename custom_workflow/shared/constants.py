"""Centralized constants"""

# API defaults
DEFAULT_API_BASE_URL = "https://sharpapi.com/api/v1"
DEFAULT_USER_AGENT = "SharpAPIPythonCustomWorkflow/1.0.0"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30

# Environment variables
API_KEY_ENV_VAR = "CUSTOM_WORKFLOW_API_KEY"
BASE_URL_ENV_VAR = "CUSTOM_WORKFLOW_BASE_URL"
REDIS_URL_ENV_VAR = "REDIS_URL"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 15
MAX_PER_PAGE = 100

# Rate limit retry
MAX_RETRY_ATTEMPTS = 3
INITIAL_RETRY_DELAY_SECONDS = 1
MAX_RETRY_DELAY_SECONDS = 60
RATE_LIMIT_STATUS_CODE = 429

# Job polling
DEFAULT_POLLING_INTERVAL_SECONDS = 10
MAX_POLLING_TIME_SECONDS = 180

# Schema cache
SCHEMA_CACHE_KEY_PREFIX = "custom_workflow:schema:"
SCHEMA_CACHE_TTL_SECONDS = 7 * 24 * 60 * 60  # 7 days

# Validation messages
FIELD_REQUIRED = "Field is required"
FILE_REQUIRED = "File is required"
FILE_NOT_READABLE = "File is not readable: {path}"
UNKNOWN_PARAMETER = "Unknown parameter"
