import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("CONFIG_FILE", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def _get(key, default):
    """Environment variable wins over env.yaml, which wins over the default."""
    raw = os.environ.get(key)
    if raw is None:
        return data.get(key, default)
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, list):
        return yaml.safe_load(raw)
    return raw


class ApplicationConfig:
    APP_NAME = _get("APP_NAME", "Union Portal API")
    DB_URI = _get("DB_URI", "sqlite+aiosqlite:///./union_portal.db")
    DB_CONNECT_TIMEOUT = _get("DB_CONNECT_TIMEOUT", 2)
    API_PREFIX = _get("API_PREFIX", "/api")
    API_PORT = _get("API_PORT", 8000)
    API_HOST = _get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = _get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = _get("LOG_LEVEL", "INFO")

    JWT_ACCESS_SECRET = _get("JWT_ACCESS_SECRET", "dev-access-secret-change-in-production")
    JWT_REFRESH_SECRET = _get("JWT_REFRESH_SECRET", "dev-refresh-secret-change-in-production")
    ACCESS_TOKEN_TTL_SECONDS = _get("ACCESS_TOKEN_TTL_SECONDS", 15 * 60)
    REFRESH_TOKEN_TTL_SECONDS = _get("REFRESH_TOKEN_TTL_SECONDS", 7 * 24 * 60 * 60)
    REFRESH_COOKIE_NAME = _get("REFRESH_COOKIE_NAME", "refresh_token")
    REFRESH_COOKIE_SECURE = _get("REFRESH_COOKIE_SECURE", True)

    BCRYPT_ROUNDS = _get("BCRYPT_ROUNDS", 12)
    PASSWORD_RESET_TTL_MINUTES = _get("PASSWORD_RESET_TTL_MINUTES", 10)
    AUDIT_RETENTION_DAYS = _get("AUDIT_RETENTION_DAYS", 365)

    SEED_ADMIN_EMAIL = _get("SEED_ADMIN_EMAIL", "admin@union.org")
    SEED_ADMIN_PASSWORD = _get("SEED_ADMIN_PASSWORD", "ChangeMe123!")
    SEED_ADMIN_NAME = _get("SEED_ADMIN_NAME", "Site Administrator")
