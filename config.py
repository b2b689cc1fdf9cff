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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./auth.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENVIRONMENT = data.get("ENVIRONMENT", "development")

    # Sessions and cookies
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "session")
    SESSION_EXPIRES_DAYS = int(data.get("SESSION_EXPIRES_DAYS", 30))
    SESSION_COOKIE_SECURE = bool(
        data.get("SESSION_COOKIE_SECURE", ENVIRONMENT.lower() == "production")
    )
    USER_PREFS_COOKIE_NAME = data.get("USER_PREFS_COOKIE_NAME", "user-prefs")
    USER_PREFS_MAX_AGE = int(data.get("USER_PREFS_MAX_AGE", 604_800))

    # Navigation
    DEFAULT_REDIRECT_URL = data.get("DEFAULT_REDIRECT_URL", "/")
    SIGNIN_URL = data.get("SIGNIN_URL", "/signin")
    VERIFY_EMAIL_URL = data.get("VERIFY_EMAIL_URL", "/verify-email-address")

    # Codes, tokens and passwords
    EMAIL_VERIFICATION_CODE_SIZE = int(data.get("EMAIL_VERIFICATION_CODE_SIZE", 4))
    EMAIL_VERIFICATION_CODE_DURATION_MINUTES = int(
        data.get("EMAIL_VERIFICATION_CODE_DURATION_MINUTES", 5)
    )
    EMAIL_VERIFICATION_MAX_RETRY = int(data.get("EMAIL_VERIFICATION_MAX_RETRY", 2))
    RESET_PASSWORD_DURATION_MINUTES = int(data.get("RESET_PASSWORD_DURATION_MINUTES", 60))
    PASSWORD_MIN_LENGTH = int(data.get("PASSWORD_MIN_LENGTH", 8))
    PASSWORD_MAX_LENGTH = int(data.get("PASSWORD_MAX_LENGTH", 255))
    PASSWORD_HASHER = data.get("PASSWORD_HASHER", "argon2")

    # Email delivery
    EMAIL_PROVIDER = data.get("EMAIL_PROVIDER", "log")
    RESEND_API_KEY = data.get("RESEND_API_KEY", "")
    EMAIL_FROM = data.get("EMAIL_FROM", "")

    # Bot mitigation
    TURNSTILE_ENABLED = bool(data.get("TURNSTILE_ENABLED", False))
    TURNSTILE_SECRET_KEY = data.get("TURNSTILE_SECRET_KEY", "")
    TURNSTILE_TIMEOUT = float(data.get("TURNSTILE_TIMEOUT", 5.0))
