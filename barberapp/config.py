import os
import sys
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

# In case pytest is running, read tests/.env.test instead of .env
if "pytest" in sys.modules or os.environ.get("TESTING") == "True":
    test_env_path = BASE_DIR / "tests" / ".env.test"
    if test_env_path.exists():
        load_dotenv(test_env_path, override=True)
else:
    load_dotenv(BASE_DIR / ".env")

TESTING = os.environ.get("TESTING") == "True"
FLASK_ENV = os.environ.get("FLASK_ENV", "development")


def is_production_env(env_name: str) -> bool:
    return (env_name or "").lower() == "production"


def env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def resolve_database_url() -> str:
    """Pick the database URL for the current environment."""
    if TESTING or FLASK_ENV == "testing":
        return os.environ.get("DATABASE_TEST_URL", "sqlite:///:memory:")

    url = os.environ.get("DATABASE_URL")
    if not url:
        if is_production_env(FLASK_ENV):
            raise ValueError("DATABASE_URL environment variable is required for production")
        url = f"sqlite:///{BASE_DIR / 'barber_dev.db'}"

    # Heroku/Railway style URLs
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


class Config:
    ENV_NAME = FLASK_ENV
    IS_PRODUCTION = is_production_env(FLASK_ENV)
    TESTING = TESTING

    SQLALCHEMY_DATABASE_URI = resolve_database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.environ.get("SECRET_KEY", "supersecretdevkey123")

    # Auth
    JWT_SECRET = os.environ.get("JWT_SECRET") or SECRET_KEY
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRES_IN_DAYS = int(os.environ.get("JWT_EXPIRES_IN_DAYS", "7"))
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    # Uploads
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", str(BASE_DIR / "uploads"))
    UPLOAD_URL_PREFIX = "/uploads"
    # 5 files of 5MB plus multipart overhead
    MAX_CONTENT_LENGTH = 26 * 1024 * 1024
    UPLOAD_CLEANUP_ENABLED = env_flag("UPLOAD_CLEANUP_ENABLED")
    UPLOAD_RETENTION_DAYS = int(os.environ.get("UPLOAD_RETENTION_DAYS", "30"))

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS", "http://localhost:8081,http://localhost:19006"
        ).split(",")
        if origin.strip()
    ]
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    API_VERSION = "1.0.0"


class TestingConfig(Config):
    ENV_NAME = "testing"
    IS_PRODUCTION = False
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_TEST_URL", "sqlite:///:memory:")
    SECRET_KEY = "test-secret-key-for-testing-only"
    JWT_SECRET = "test-jwt-secret-for-testing-only"
    # bcrypt minimum, keeps the suite fast
    BCRYPT_ROUNDS = 4
    UPLOAD_CLEANUP_ENABLED = False
