import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./accounts.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    APP_NAME = data.get("APP_NAME", "Account Service")
    APP_URL = data.get("APP_URL", "http://localhost:3000")

    # Sessions
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    SESSION_TTL_MINUTES = int(data.get("SESSION_TTL_MINUTES", 60 * 24 * 30))
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "session_token")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", False))

    # Credential bootstrap tokens
    TOKEN_TTL_MINUTES = int(data.get("TOKEN_TTL_MINUTES", 60))
    REVOKE_SUPERSEDED_TOKENS = bool(data.get("REVOKE_SUPERSEDED_TOKENS", True))

    # Email domain validation
    MX_CHECK_ENABLED = bool(data.get("MX_CHECK_ENABLED", True))
    DNS_TIMEOUT_SECONDS = float(data.get("DNS_TIMEOUT_SECONDS", 5.0))

    # IP geolocation enrichment
    GEO_LOOKUP_ENABLED = bool(data.get("GEO_LOOKUP_ENABLED", False))
    GEO_LOOKUP_URL = data.get("GEO_LOOKUP_URL", "https://ipapi.co")
    GEO_LOOKUP_TIMEOUT_SECONDS = float(data.get("GEO_LOOKUP_TIMEOUT_SECONDS", 3.0))

    # Outbound email
    EMAIL_BACKEND = data.get("EMAIL_BACKEND", "log")
    EMAIL_FROM = data.get("EMAIL_FROM", "no-reply@example.com")
    SMTP_HOST = data.get("SMTP_HOST", "localhost")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USERNAME = data.get("SMTP_USERNAME", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", False))
