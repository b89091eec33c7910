import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# --- Database ---
DB_USER = os.getenv("POSTGRES_USER", "postgres")
DB_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
DB_HOST = os.getenv("POSTGRES_HOST", "localhost")  # In Docker, this will be 'postgres'
DB_PORT = os.getenv("POSTGRES_PORT", "5433")
DB_NAME = os.getenv("POSTGRES_DB", "agrovet")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
DB_ECHO = _flag("DB_ECHO", "false")

# --- Auth ---
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
INTERNAL_API_KEY = os.getenv("INTERNAL_API_KEY", "")

# --- Rate limiting ---
RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", "true")
CHECKOUT_RATE_LIMIT = os.getenv("CHECKOUT_RATE_LIMIT", "10/minute")

# --- Payments (stubbed Paystack) ---
PAYMENT_REF_PREFIX = os.getenv("PAYMENT_REF_PREFIX", "PSK")
PAYMENT_AMOUNT_TOLERANCE = Decimal(os.getenv("PAYMENT_AMOUNT_TOLERANCE", "1"))
PAYMENT_REDIRECT_BASE = os.getenv("PAYMENT_REDIRECT_BASE", "about:blank#paystack")

# --- SMS ---
SMS_PRIMARY_PROVIDER = os.getenv("SMS_PRIMARY_PROVIDER", "blessed_texts")
SMS_ENABLE_FAILOVER = _flag("SMS_ENABLE_FAILOVER", "false")
SMS_TIMEOUT_SECONDS = float(os.getenv("SMS_TIMEOUT_SECONDS", "5"))
NOTIFICATION_BRAND = os.getenv("NOTIFICATION_BRAND", "SmartLivestock")

BLESSED_ENDPOINT = os.getenv("BLESSED_ENDPOINT", "")
BLESSED_API_KEY = os.getenv("BLESSED_API_KEY", "")
BLESSED_SENDER_ID = os.getenv("BLESSED_SENDER_ID", "")

UMESIKIA_ENDPOINT = os.getenv("UMESIKIA_ENDPOINT", "")
UMESIKIA_API_KEY = os.getenv("UMESIKIA_API_KEY", "")
UMESIKIA_APP_ID = os.getenv("UMESIKIA_APP_ID", "")
UMESIKIA_SENDER_ID = os.getenv("UMESIKIA_SENDER_ID", "")

# --- Observability ---
SERVICE_NAME = os.getenv("SERVICE_NAME", "agrovet-checkout")
TRACING_ENABLED = _flag("TRACING_ENABLED", "false")
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4317")
