import os

# ====================================================================================
# ENVIRONMENT CONFIGURATION: PROD / STAGE / LOCAL prefixes
# ====================================================================================
# Variables may carry an environment prefix:
#   - PROD: PROD_HISTORY_API_BASE_URL, PROD_HISTORY_API_KEY
#   - STAGE: STAGE_HISTORY_API_BASE_URL, STAGE_HISTORY_API_KEY
#   - LOCAL: LOCAL_HISTORY_API_BASE_URL, LOCAL_HISTORY_API_KEY
#
# The prefixed variable wins; the bare name is read when no prefixed one is set.
# Every accessor below reads the environment on each call. Nothing is cached,
# so a changed environment is picked up by the next request.
# ====================================================================================

VALID_ENVIRONMENTS = ("prod", "stage", "local")

# Project used when the caller does not pass one
DEFAULT_PROJECT_ID = "proj_demo"

DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_PREFERENCES_PATH = os.path.join("~", ".patch_history", "preferences.json")


def app_env() -> str:
    """Current environment name (prod, stage, local)."""
    value = os.getenv("APP_ENV", "prod").lower()
    if value not in VALID_ENVIRONMENTS:
        raise ValueError(
            f"Invalid APP_ENV={value}. Must be one of: {', '.join(VALID_ENVIRONMENTS)}"
        )
    return value


def env(key: str, default: str = "") -> str:
    """
    Get environment variable, preferring the environment-prefixed name.

    Args:
        key: Variable name without prefix (e.g. "HISTORY_API_KEY")
        default: Value returned when neither name is set

    Example:
        env("HISTORY_API_KEY") -> value of STAGE_HISTORY_API_KEY (if APP_ENV=stage),
        else value of HISTORY_API_KEY, else default
    """
    prefixed = os.getenv(f"{app_env().upper()}_{key}")
    if prefixed is not None:
        return prefixed
    return os.getenv(key, default)


def get_api_base_url() -> str:
    """History API base URL without trailing slash. Empty string if unset."""
    return env("HISTORY_API_BASE_URL").rstrip("/")


def get_api_key() -> str:
    """Bearer credential for the history API. Empty string if unset."""
    return env("HISTORY_API_KEY")


def get_http_timeout() -> float:
    """Timeout in seconds applied to each history API request."""
    raw = env("HISTORY_API_TIMEOUT", default=str(DEFAULT_HTTP_TIMEOUT))
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"HISTORY_API_TIMEOUT must be a number, got: {raw}")
    if timeout <= 0:
        raise ValueError(f"HISTORY_API_TIMEOUT must be positive, got: {raw}")
    return timeout


def get_log_level() -> str:
    return env("LOG_LEVEL", default="INFO").upper()


def get_preferences_path() -> str:
    """Location of the JSON file holding user preferences (e.g. locale)."""
    return os.path.expanduser(env("PREFERENCES_PATH", default=DEFAULT_PREFERENCES_PATH))
