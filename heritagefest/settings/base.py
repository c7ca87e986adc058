import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")


def _env_bool(name, default="false"):
    return os.getenv(name, default).lower() in ("1", "true", "yes")


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-secret-key")
DEBUG = _env_bool("DJANGO_DEBUG")
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]

INSTALLED_APPS = [
    "heritagefest",
    "payments",
    "registrations",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "heritagefest.middleware.CorsMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
]

ROOT_URLCONF = "heritagefest.urls"
WSGI_APPLICATION = "heritagefest.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    },
]

# Registrations are kept as JSON files, there is no database.
DATABASES = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "Asia/Kolkata"
USE_TZ = True

# ---------- Server ----------
PORT = os.getenv("PORT", "3001")

# ---------- Payment gateway ----------
PAYMENT_GATEWAY = os.getenv("PAYMENT_GATEWAY", "instamojo").strip().lower()  # instamojo | razorpay

INSTAMOJO_API_KEY = os.getenv("INSTAMOJO_API_KEY", "")
INSTAMOJO_AUTH_TOKEN = os.getenv("INSTAMOJO_AUTH_TOKEN", "")
INSTAMOJO_BASE_URL = os.getenv("INSTAMOJO_BASE_URL", "https://www.instamojo.com/api/1.1/")

RAZORPAY_KEY_ID = os.getenv("RAZORPAY_KEY_ID", "")
RAZORPAY_KEY_SECRET = os.getenv("RAZORPAY_KEY_SECRET", "")
RAZORPAY_BASE_URL = os.getenv("RAZORPAY_BASE_URL", "https://api.razorpay.com/v1/")

GATEWAY_TIMEOUT = float(os.getenv("GATEWAY_TIMEOUT", "15"))

PAYMENT_REDIRECT_URL = os.getenv("PAYMENT_REDIRECT_URL", f"http://localhost:{PORT}/payment-success")
PAYMENT_FALLBACK_URL = os.getenv("PAYMENT_FALLBACK_URL", "https://www.instamojo.com/@heritagefest2025/")

REGISTRATION_PRICES = {
    "solo": Decimal(os.getenv("PRICE_SOLO", "300")),
    "group": Decimal(os.getenv("PRICE_GROUP", "1000")),
}

# ---------- Registration store ----------
REGISTRATIONS_DIR = Path(os.getenv("REGISTRATIONS_DIR", str(BASE_DIR / "registrations_data")))

# ---------- CORS ----------
CORS_ALLOW_ORIGIN = "*"
CORS_ALLOW_METHODS = "POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type"

# ---------- Logging ----------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "heritagefest": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "payments": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "registrations": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
